"""Continuous-time Markov model of the system with a single repair unit."""

from __future__ import annotations

import numpy as np

from .markov_model import _probability_step
from .params import RepairableSystemParams
from .system import RepairableSystem

INTERNAL_STEPS = 20
TRANSIENT_HORIZON = 100.0
TRANSIENT_STEPS = 1000


class RepairableMarkovModel:
    """Kolmogorov equations over the aggregated ``(a, b)`` states of a repairable system.

    State ``(a, b)`` has index ``b * (A + 1) + a`` where ``A`` is the total
    number of A devices; the process starts with every device working.
    """

    def __init__(self, params: RepairableSystemParams) -> None:
        self.params = params
        self.system = RepairableSystem(params)
        self.num_states = self.system.aggregated_states()
        total_a, total_b = self.system.max_devices()
        self.initial_state = np.zeros(self.num_states)
        self.initial_state[self._index(total_a, total_b)] = 1.0
        self.transition_matrix = np.zeros((self.num_states, self.num_states))
        self.build_transition_matrix()

    @classmethod
    def from_rates(cls, lambda_a, lambda_b, na, nb, ra, rb, lambda_s) -> "RepairableMarkovModel":
        """Build a model from explicit rates and device counts."""
        return cls(RepairableSystemParams(lambda_a, lambda_b, na, nb, ra, rb, lambda_s))

    def _index(self, a: int, b: int) -> int:
        total_a, _ = self.system.max_devices()
        return b * (total_a + 1) + a

    def _states(self):
        total_a, total_b = self.system.max_devices()
        for a in range(total_a + 1):
            for b in range(total_b + 1):
                yield a, b

    def _is_operational(self, a: int, b: int) -> bool:
        return a >= 1 and b >= self.params.nb

    def _failure_rates(self, a: int, b: int) -> tuple[float, float]:
        p = self.params
        return min(a, p.na) * p.lambda_a, min(b, p.nb) * p.lambda_b

    def _repair_target(self, a: int, b: int) -> tuple[int, int] | None:
        """State reached when the repair unit finishes its current job, if any."""
        total_a, total_b = self.system.max_devices()
        repairing_a = total_a - a
        repairing_b = total_b - b
        if repairing_a > repairing_b:
            return a + 1, b
        if repairing_b > repairing_a:
            return a, b + 1
        if repairing_a > 0:
            if self.params.lambda_a >= self.params.lambda_b:
                return a + 1, b
            return a, b + 1
        return None

    def _transitions(self, a: int, b: int):
        """Yield ``(target state, rate)`` for every transition out of ``(a, b)``."""
        if self._is_operational(a, b):
            rate_a, rate_b = self._failure_rates(a, b)
            if a > 0 and rate_a > 0:
                yield (a - 1, b), rate_a
            if b > 0 and rate_b > 0:
                yield (a, b - 1), rate_b
        target = self._repair_target(a, b)
        if target is not None:
            yield target, self.params.lambda_s

    def build_transition_matrix(self) -> np.ndarray:
        """Fill and return the matrix of transition intensities ``Q``."""
        q = np.zeros((self.num_states, self.num_states))
        for a, b in self._states():
            current = self._index(a, b)
            total_rate = 0.0
            for (na, nb), rate in self._transitions(a, b):
                q[current, self._index(na, nb)] = rate
                total_rate += rate
            q[current, current] = -total_rate
        self.transition_matrix = q
        return q

    def solve_steady_state_equations(self) -> np.ndarray:
        """Limiting probabilities: ``Q^T p = 0`` with the last equation replaced by ``sum(p) = 1``."""
        a = self.transition_matrix.T.copy()
        a[-1, :] = 1.0
        rhs = np.zeros(self.num_states)
        rhs[-1] = 1.0
        solution, *_ = np.linalg.lstsq(a, rhs, rcond=None)
        return solution

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

    def estimate_transient_time(self, steady_state_probs, tolerance: float = 0.01) -> float:
        """First time the distance to the limiting vector drops to ``tolerance`` of its norm."""
        steady = np.asarray(steady_state_probs, dtype=float)
        threshold = tolerance * np.linalg.norm(steady)
        times, probabilities = self.solve_kolmogorov_equations(TRANSIENT_HORIZON, TRANSIENT_STEPS)
        distances = np.linalg.norm(probabilities - steady[:, None], axis=0)
        reached = np.nonzero(distances <= threshold)[0]
        if reached.size == 0:
            return TRANSIENT_HORIZON
        return float(times[reached[0]])

    def _decoded_states(self):
        return (self.system.index_to_state(i) for i in range(self.num_states))

    def calculate_failure_probability(self, state_probs) -> float:
        """Total probability of the states in which the system is down."""
        probs = np.asarray(state_probs, dtype=float)
        return float(
            sum(
                probs[i]
                for i, (a, b, _) in enumerate(self._decoded_states())
                if not self._is_operational(a, b)
            )
        )

    def calculate_ready_devices(self, state_probs) -> tuple[float, float]:
        """Expected numbers of working A and B devices."""
        probs = np.asarray(state_probs, dtype=float)
        avg_a = 0.0
        avg_b = 0.0
        for prob, (a, b, _) in zip(probs, self._decoded_states()):
            avg_a += a * prob
            avg_b += b * prob
        return float(avg_a), float(avg_b)

    def calculate_repair_utilization(self, state_probs) -> float:
        """Probability that the repair unit is busy."""
        probs = np.asarray(state_probs, dtype=float)
        total_a, total_b = self.system.max_devices()
        return float(
            sum(
                probs[self._index(a, b)]
                for a, b in self._states()
                if total_a - a > 0 or total_b - b > 0
            )
        )

    def operational_states(self) -> np.ndarray:
        """Indicator vector of the operational aggregated states."""
        indicator = np.zeros(self.num_states)
        for a, b in self._states():
            indicator[self._index(a, b)] = 1.0 if self._is_operational(a, b) else 0.0
        return indicator

    def aggregated_state_probabilities(self, state_probs) -> np.ndarray:
        """Probabilities collected by ``(a, b)``, regardless of the repair status."""
        probs = np.asarray(state_probs, dtype=float)
        total_a, total_b = self.system.max_devices()
        aggregated = np.zeros((total_a + 1) * (total_b + 1))
        for prob, (a, b, _) in zip(probs, self._decoded_states()):
            aggregated[self._index(a, b)] += prob
        return aggregated

    def build_graph_transition_matrix(self) -> np.ndarray:
        """Transition intensities indexed as in the state graph (full state first)."""
        total_a, total_b = self.system.max_devices()
        size = (total_a + 1) * (total_b + 1)
        graph_q = np.zeros((size, size))
        for a, b in self._states():
            current = self.system.state_to_graph_index(a, b)
            total_rate = 0.0
            for (na, nb), rate in self._transitions(a, b):
                graph_q[current, self.system.state_to_graph_index(na, nb)] += rate
                total_rate += rate
            graph_q[current, current] = -total_rate
        return graph_q