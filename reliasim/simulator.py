"""Monte Carlo simulation of the non-repairable system."""

from __future__ import annotations

import math

import numpy as np

from .params import SystemParams
from .system import System


class Simulator:
    """Samples failure times and state trajectories of a non-repairable system."""

    def __init__(self, params: SystemParams, seed=None) -> None:
        self.params = params
        self.rng = np.random.default_rng(seed)

    def _events(self):
        """Yield ``(time, working A, working B)`` after each failure until the system fails."""
        p = self.params
        a = p.na + p.ra
        b = p.nb + p.rb
        t = 0.0
        while a >= 1 and b >= p.nb:
            rate_a = a * p.lambda_a
            total_rate = rate_a + b * p.lambda_b
            if total_rate <= 0:
                yield math.inf, a, b
                return
            t += self.rng.exponential(1.0) / total_rate
            if self.rng.random() < rate_a / total_rate:
                a -= 1
            else:
                b -= 1
            yield t, a, b

    def simulate_single_run(self) -> float:
        """Time until the system stops being operational."""
        t = 0.0
        for t, _, _ in self._events():
            pass
        return t

    def simulate_multiple_runs(self, num_experiments: int) -> tuple[float, float]:
        """Mean and population standard deviation of ``num_experiments`` failure times."""
        if num_experiments <= 0:
            raise ValueError("num_experiments must be positive")
        times = np.array([self.simulate_single_run() for _ in range(num_experiments)])
        mean = float(times.mean())
        return mean, float(np.sqrt(np.mean((times - mean) ** 2)))

    def simulate_trajectory(self) -> list[tuple[float, int]]:
        """List of ``(time, state index)`` from the start to the system failure."""
        p = self.params
        system = System(p)
        trajectory = [(0.0, system.state_to_index(p.na + p.ra, p.nb + p.rb))]
        trajectory.extend((t, system.state_to_index(a, b)) for t, a, b in self._events())
        return trajectory