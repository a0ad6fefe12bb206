"""Monte Carlo simulation of the system with a single repair unit."""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

import numpy as np

from .params import RepairableSystemParams

TRAJECTORY_HEADER = "# Time WorkingA WorkingB RepairStatus"
MARKOV_CHAIN_FILE = "repairable_markov_chain_trajectory.dat"
DISCRETE_EVENT_FILE = "repairable_discrete_event_trajectory.dat"

Trajectory = list[tuple[float, int, int, int]]


class EventType(Enum):
    """Kind of event in the discrete-event simulation."""

    DEVICE_FAILURE_A = auto()
    DEVICE_FAILURE_B = auto()
    DEVICE_REPAIR = auto()
    SIMULATION_END = auto()


@dataclass(order=True)
class Event:
    """Scheduled event; events are ordered by time only."""

    time: float
    type: EventType = field(compare=False)


@dataclass(frozen=True)
class SimulationStatistics:
    """Time-averaged characteristics of a simulated trajectory."""

    failure_probability: float
    average_working_a: float
    average_working_b: float
    repair_utilization: float


def write_trajectory(trajectory, path) -> Path:
    """Write ``(time, working A, working B, repair status)`` rows to ``path``."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as out:
        out.write(TRAJECTORY_HEADER + "\n")
        for time, a, b, r in trajectory:
            out.write(f"{time:g} {a} {b} {r}\n")
    return path


class RepairableSimulator:
    """Simulates a repairable system as a Markov chain or as discrete events."""

    def __init__(self, params: RepairableSystemParams, seed=None) -> None:
        self.params = params
        self.rng = np.random.default_rng(seed)

    def _totals(self) -> tuple[int, int]:
        p = self.params
        return p.na + p.ra, p.nb + p.rb

    def _repair_status(self, repairing_a: int, repairing_b: int) -> int:
        """0 when idle, 1 when repairing an A device, 2 when repairing a B device."""
        if repairing_a <= 0 and repairing_b <= 0:
            return 0
        if repairing_a > repairing_b:
            return 1
        if repairing_b > repairing_a:
            return 2
        return 1 if self.params.lambda_a >= self.params.lambda_b else 2

    def _exponential(self, rate: float) -> float:
        if rate <= 0:
            return math.inf
        return float(self.rng.exponential(1.0 / rate))

    def simulate_markov_chain(self, simulation_time: float) -> Trajectory:
        """Trajectory of the continuous-time Markov chain up to ``simulation_time``."""
        p = self.params
        total_a, total_b = self._totals()
        working_a, working_b = total_a, total_b
        repair_status = 0
        t = 0.0
        trajectory: Trajectory = [(t, working_a, working_b, repair_status)]

        while t < simulation_time:
            rate_a = working_a * p.lambda_a
            rate_b = working_b * p.lambda_b
            repairing_a = total_a - working_a
            repairing_b = total_b - working_b
            status = self._repair_status(repairing_a, repairing_b)
            rate_repair = p.lambda_s if status else 0.0
            repair_status = status

            total_rate = rate_a + rate_b + rate_repair
            if total_rate <= 0.0:
                break

            t += float(self.rng.exponential(1.0)) / total_rate
            if t > simulation_time:
                break

            u = float(self.rng.random())
            threshold = rate_a / total_rate
            if u < threshold:
                if working_a > 0:
                    working_a -= 1
            elif u < threshold + rate_b / total_rate:
                if working_b > 0:
                    working_b -= 1
            elif repair_status == 1 and repairing_a > 0:
                working_a += 1
            elif repair_status == 2 and repairing_b > 0:
                working_b += 1

            trajectory.append((t, working_a, working_b, repair_status))

        return trajectory

    def simulate_discrete_events(self, simulation_time: float) -> Trajectory:
        """Trajectory of the event-driven simulation up to ``simulation_time``."""
        p = self.params
        total_a, total_b = self._totals()
        working_a, working_b = total_a, total_b
        repair_status = 0
        trajectory: Trajectory = [(0.0, working_a, working_b, repair_status)]

        events: list[Event] = []

        def schedule(time: float, kind: EventType) -> None:
            heapq.heappush(events, Event(time, kind))

        for _ in range(working_a):
            schedule(self._exponential(p.lambda_a), EventType.DEVICE_FAILURE_A)
        for _ in range(working_b):
            schedule(self._exponential(p.lambda_b), EventType.DEVICE_FAILURE_B)
        schedule(simulation_time, EventType.SIMULATION_END)

        while events:
            event = heapq.heappop(events)
            now = event.time
            if event.type is EventType.SIMULATION_END or now > simulation_time:
                break

            repairing_a = total_a - working_a
            repairing_b = total_b - working_b
            if repairing_a > 0 or repairing_b > 0:
                repair_status = self._repair_status(repairing_a, repairing_b)
                repair_pending = any(e.type is EventType.DEVICE_REPAIR for e in events)
                if not repair_pending and repair_status > 0:
                    schedule(now + self._exponential(p.lambda_s), EventType.DEVICE_REPAIR)
            else:
                repair_status = 0

            if event.type is EventType.DEVICE_FAILURE_A:
                if working_a > 0:
                    working_a -= 1
                    if working_a > 0:
                        schedule(now + self._exponential(p.lambda_a), EventType.DEVICE_FAILURE_A)
                    trajectory.append((now, working_a, working_b, repair_status))
            elif event.type is EventType.DEVICE_FAILURE_B:
                if working_b > 0:
                    working_b -= 1
                    if working_b > 0:
                        schedule(now + self._exponential(p.lambda_b), EventType.DEVICE_FAILURE_B)
                    trajectory.append((now, working_a, working_b, repair_status))
            elif event.type is EventType.DEVICE_REPAIR:
                if repair_status == 1 and repairing_a > 0:
                    working_a += 1
                    schedule(now + self._exponential(p.lambda_a), EventType.DEVICE_FAILURE_A)
                elif repair_status == 2 and repairing_b > 0:
                    working_b += 1
                    schedule(now + self._exponential(p.lambda_b), EventType.DEVICE_FAILURE_B)

                repair_status = self._repair_status(total_a - working_a, total_b - working_b)
                if repair_status:
                    schedule(now + self._exponential(p.lambda_s), EventType.DEVICE_REPAIR)
                trajectory.append((now, working_a, working_b, repair_status))

        return trajectory

    def _run(self, trajectory: Trajectory, path) -> Trajectory:
        print(f"Моделирование завершено. Количество точек: {len(trajectory)}")
        _print_statistics(self.calculate_statistics(trajectory))
        write_trajectory(trajectory, path)
        print(f"Результаты сохранены в файл {path}")
        return trajectory

    def run_markov_chain_simulation(self, simulation_time: float, path=MARKOV_CHAIN_FILE) -> Trajectory:
        """Simulate the Markov chain, report statistics and save the trajectory."""
        print("Запуск моделирования непрерывной марковской цепи...")
        return self._run(self.simulate_markov_chain(simulation_time), path)

    def run_discrete_event_simulation(self, simulation_time: float, path=DISCRETE_EVENT_FILE) -> Trajectory:
        """Run the discrete-event simulation, report statistics and save the trajectory."""
        print("Запуск дискретно-событийного моделирования...")
        return self._run(self.simulate_discrete_events(simulation_time), path)

    def calculate_statistics(self, trajectory) -> SimulationStatistics:
        """Time-weighted statistics of the states visited by ``trajectory``."""
        if not trajectory:
            raise ValueError("trajectory is empty")

        total_time = trajectory[-1][0]
        durations: dict[tuple[int, int, int], float] = {}
        prev_time = 0.0
        prev_state = tuple(trajectory[0][1:])
        for time, a, b, r in trajectory[1:]:
            durations[prev_state] = durations.get(prev_state, 0.0) + (time - prev_time)
            prev_time = time
            prev_state = (a, b, r)

        failure = avg_a = avg_b = utilization = 0.0
        if total_time > 0:
            for (a, b, r), duration in durations.items():
                prob = duration / total_time
                if a < 1 or b < self.params.nb:
                    failure += prob
                avg_a += a * prob
                avg_b += b * prob
                if r > 0:
                    utilization += prob

        return SimulationStatistics(failure, avg_a, avg_b, utilization)


def _print_statistics(stats: SimulationStatistics) -> None:
    print("Статистика по результатам моделирования:")
    print(f"Вероятность отказа системы: {stats.failure_probability:.6f}")
    print(f"Среднее число готовых устройств типа A: {stats.average_working_a:.6f}")
    print(f"Среднее число готовых устройств типа B: {stats.average_working_b:.6f}")
    print(f"Коэффициент загрузки ремонтной службы: {stats.repair_utilization:.6f}")