"""Continuous-time Markov model of the non-repairable system."""

from __future__ import annotations

import numpy as np

from .params import SystemParams
from .runge_kutta import integrate
from .system import System

INTERNAL_STEPS = 40


def _probability_step(qt: np.ndarray, p: np.ndarray, dt: float) -> np.ndarray:
    """One RK4 step of ``dp/dt = Q^T p``, clipped to non-negative and renormalised."""
    k1 = qt @ p
    k2 = qt @ (p + dt / 2 * k1)
    k3 = qt @ (p + dt / 2 * k2)
    k4 = qt @ (p + dt * k3)
    p = np.clip(p + dt / 6 * (k1 + 2 * k2 + 2 * k3 + k4), 0.0, None)
    total = p.sum()
    return p / total if total > 0 else p


class MarkovModel:
    """Kolmogorov equations for a system whose devices fail without repair."""

    def __init__(self, params: SystemParams) -> None:
        self.params = params
        self.system = System(params)
        self.num_states = self.system.total_states()
        self.initial_state = np.zeros(self.num_states)
        self.initial_state[0] = 1.0
        self.transition_matrix = np.zeros((self.num_states, self.num_states))
        self.build_transition_matrix()

    def _is_operational(self, a: int, b: int) -> bool:
        return a >= 1 and b >= self.params.nb

    def build_transition_matrix(self) -> np.ndarray:
        """Fill and return the matrix of transition intensities ``Q``."""
        p = self.params
        q = np.zeros((self.num_states, self.num_states))
        for a in range(p.na + p.ra + 1):
            for b in range(p.nb + p.rb + 1):
                if not self._is_operational(a, b):
                    continue
                current = self.system.state_to_index(a, b)
                rate_a = min(a, p.na) * p.lambda_a
                rate_b = min(b, p.nb) * p.lambda_b
                if a > 0 and rate_a > 0:
                    q[current, self.system.state_to_index(a - 1, b)] = rate_a
                if b > 0 and rate_b > 0:
                    q[current, self.system.state_to_index(a, b - 1)] = rate_b
                q[current, current] = -(rate_a + rate_b)
        self.transition_matrix = q
        return q

    def solve_kolmogorov_equations(self, t_max: float, steps: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(times, probabilities)``; column ``i`` holds state probabilities at ``times[i]``."""
        if steps < 1:
            raise ValueError("steps must be at least 1")
        times = np.linspace(0.0, t_max, steps)
        probabilities = np.empty((self.num_states, steps))
        probabilities[:, 0] = self.initial_state
        qt = self.transition_matrix.T
        p = self.initial_state.copy()
        for i, (start, end) in enumerate(zip(times[:-1], times[1:]), start=1):
            dt = (end - start) / INTERNAL_STEPS
            for _ in range(INTERNAL_STEPS):
                p = _probability_step(qt, p, dt)
            probabilities[:, i] = p
        return times, probabilities

    def _failure_mask(self) -> np.ndarray:
        return np.array(
            [not self._is_operational(*self.system.index_to_state(s)) for s in range(self.num_states)],
            dtype=float,
        )

    def reliability_function(self, probabilities) -> np.ndarray:
        """Probability of being in an operational state, per time column."""
        probabilities = np.asarray(probabilities, dtype=float)
        return 1.0 - self._failure_mask() @ probabilities

    def calculate_mttf(self, times, reliability) -> float:
        """Mean time to failure as the integral of the reliability function."""
        return integrate(reliability, times)