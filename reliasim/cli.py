"""Command that runs both reliability tasks and writes their reports and plots."""

from __future__ import annotations

import math
import sys
from pathlib import Path

import numpy as np

from .dot_graph import generate_repairable_state_graph, generate_state_graph
from .markov_model import MarkovModel
from .params import RepairableSystemParams, SystemParams
from .plotting import (
    plot_aggregated_states,
    plot_histogram,
    plot_reliability_function,
    plot_repairable_trajectory,
    plot_states_probabilities,
    plot_trajectories,
)
from .repairable_markov_model import RepairableMarkovModel
from .repairable_simulator import DISCRETE_EVENT_FILE, MARKOV_CHAIN_FILE, RepairableSimulator
from .simulator import Simulator
from .system import RepairableSystem, System

DEFAULT_N = 260
DEFAULT_G = 1
NUM_SIMULATIONS = 100
NUM_TRAJECTORIES = 10
_SEPARATOR = "-" * 40


def mean(values) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values, mean_value: float) -> float:
    """Population standard deviation around ``mean_value``; 0 for fewer than two values."""
    values = list(values)
    if len(values) <= 1:
        return 0.0
    variance = sum((v - mean_value) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def read_trajectory(path) -> list[tuple[float, int, int, int]]:
    """Read ``(time, working A, working B, repair status)`` rows after a header line.

    Reading stops at the first row that cannot be parsed.
    """
    text = Path(path).read_text(encoding="utf-8")
    _, _, body = text.partition("\n")
    tokens = body.split()
    trajectory = []
    for start in range(0, len(tokens) - 3, 4):
        time, a, b, r = tokens[start:start + 4]
        try:
            trajectory.append((float(time), int(a), int(b), int(r)))
        except ValueError:
            break
    return trajectory


def _separate(number: int) -> None:
    print(f"{number}. {_SEPARATOR}")


def _save_matrix(matrix: np.ndarray, filename: str) -> None:
    np.savetxt(filename, matrix, fmt="%g")


def _print_simulation_stats(failure_times) -> tuple[float, float]:
    mean_value = mean(failure_times)
    deviation = standard_deviation(failure_times, mean_value)
    print(f"MTTF (имитационный): {mean_value:g}")
    print(f"Стандартное отклонение: {deviation:g}")
    return mean_value, deviation


def run_task1(n: int, g: int) -> float:
    """Analyse and simulate the non-repairable system; return the analytic MTTF."""
    params = SystemParams.from_variant(n, g)

    print("Параметры системы (Задача 1):")
    print(f"lambda_A = {params.lambda_a:g}")
    print(f"lambda_B = {params.lambda_b:g}")
    print(f"N_A = {params.na}")
    print(f"N_B = {params.nb}")
    print(f"R_A = {params.ra}")
    print(f"R_B = {params.rb}")

    _separate(1)
    print("Построение графа состояний системы:")
    generate_state_graph(System(params), "state_graph_task1")
    print("State graph saved in state_graph_task1.png")

    _separate(2)
    print("Построение матрицы интенсивностей переходов:")
    model = MarkovModel(params)
    _save_matrix(model.build_transition_matrix(), "transition_matrix_task1.dat")
    print("Transition matrix saved in transition_matrix_task1.dat")

    _separate(3)
    print("Запись дифференциальных уравнений Колмогорова:")
    print("dp(t)/dt = Q^T * p(t), где Q - матрица интенсивностей переходов")

    _separate(4)
    print("Решение системы дифференциальных уравнений:")
    times, probabilities = model.solve_kolmogorov_equations(2.0, 100)

    _separate(5)
    print("Построение графиков вероятностей состояний:")
    plot_states_probabilities(times, probabilities, "states_probabilities_task1")
    print("График вероятностей состояний сохранен в файл states_probabilities_task1.png")

    _separate(6)
    print("Построение графика функции надежности:")
    reliability = model.reliability_function(probabilities)
    plot_reliability_function(times, reliability, "reliability_function_task1")
    print("График функции надежности сохранен в файл reliability_function_task1.png")

    _separate(7)
    print("Расчет математического ожидания времени безотказной работы:")
    mttf = model.calculate_mttf(times, reliability)
    print(f"MTTF (аналитический): {mttf:g}")

    _separate(8)
    print("Имитационное моделирование системы:")
    simulator = Simulator(params)
    failure_times = [simulator.simulate_single_run() for _ in range(NUM_SIMULATIONS)]
    _print_simulation_stats(failure_times)

    histogram_prefix = "failure_times_histogram_task1"
    plot_histogram(failure_times, "Распределение времени безотказной работы", histogram_prefix)
    print(f"Гистограмма времен отказов сохранена в файл {histogram_prefix}.png")

    trajectories_prefix = "state_trajectories_task1"
    trajectories = [simulator.simulate_trajectory() for _ in range(NUM_TRAJECTORIES)]
    plot_trajectories(trajectories, trajectories_prefix)
    print(f"График траекторий сохранен в файл {trajectories_prefix}.png")

    return mttf


def _plot_saved_trajectory(path: str, prefix: str, description: str) -> None:
    trajectory = read_trajectory(path)
    if trajectory:
        plot_repairable_trajectory(trajectory, prefix)
        print(f"График траектории {description} сохранен в файл {prefix}.png")


def run_task2(n: int, g: int) -> np.ndarray:
    """Analyse and simulate the repairable system; return the limiting probabilities."""
    params = RepairableSystemParams.from_variant(n, g)

    print("\n")
    print("Параметры системы (Задача 2):")
    print(f"lambda_A = {params.lambda_a:g}")
    print(f"lambda_B = {params.lambda_b:g}")
    print(f"lambda_S = {params.lambda_s:g}")
    print(f"NA = {params.na}")
    print(f"NB = {params.nb}")
    print(f"RA = {params.ra}")
    print(f"RB = {params.rb}")

    _separate(1)
    print("Построение графа состояний ремонтируемой системы:")
    generate_repairable_state_graph(RepairableSystem(params), "state_graph_task2")
    print("Граф состояний сохранен в файлах state_graph_task2.dot и state_graph_task2.png")

    _separate(2)
    print("Построение матрицы интенсивностей переходов ремонтируемой системы:")
    model = RepairableMarkovModel(params)
    _save_matrix(model.build_graph_transition_matrix(), "transition_matrix_task2.dat")
    print("Матрица переходов сохранена в файл transition_matrix_task2.dat")

    _separate(3)
    print("Запись алгебраических уравнений Колмогорова для установившегося режима:")
    print("Q^T * \\pi = 0, где \\pi - вектор предельных вероятностей")
    print("\\sum\\pi_i = 1 (условие нормировки)")

    _separate(4)
    print("Расчет предельных вероятностей состояний системы:")
    steady = model.solve_steady_state_equations()
    aggregated = model.aggregated_state_probabilities(steady)
    print(f"Предельные вероятности рассчитаны ({aggregated.size} состояний):")

    size_a = params.na + params.ra + 1
    size_b = params.nb + params.rb + 1
    for a in range(size_a):
        for b in range(size_b):
            probability = aggregated[b * size_a + a]
            if probability > 0.001:
                print(f"P({a},{b}) = {probability:g}")

    _separate(5)
    print("Расчет математических ожиданий прикладных характеристик системы:")
    failure_prob = model.calculate_failure_probability(steady)
    avg_a, avg_b = model.calculate_ready_devices(steady)
    repair_util = model.calculate_repair_utilization(steady)
    print(f"Вероятность отказа системы: {failure_prob:g}")
    print(f"Среднее число готовых устройств типа A: {avg_a:g}")
    print(f"Среднее число готовых устройств типа B: {avg_b:g}")
    print(f"Коэффициент загрузки ремонтной службы: {repair_util:g}")

    _separate(6)
    print("Запись дифференциальных уравнений Колмогорова:")
    print("dp(t)/dt = Q^T * p(t), где Q - матрица интенсивностей переходов")

    _separate(7)
    print("Решение системы дифференциальных уравнений:")
    transient_time = model.estimate_transient_time(steady)
    print(f"Оценка времени переходного процесса: {transient_time:g}")
    modeling_time = 2 * transient_time
    times, probabilities = model.solve_kolmogorov_equations(modeling_time, 200)

    _separate(8)
    print("Построение графиков вероятностей состояний:")
    plot_aggregated_states(times, probabilities, model, "states_probabilities_task2")
    print(
        f"График агрегированных вероятностей состояний ({aggregated.size} состояний) "
        "сохранен в файл states_probabilities_task2.png"
    )

    _separate(9)
    print("Имитационное моделирование в терминах непрерывных марковских цепей:")
    simulator = RepairableSimulator(params)
    simulator.run_markov_chain_simulation(modeling_time, MARKOV_CHAIN_FILE)
    _plot_saved_trajectory(
        MARKOV_CHAIN_FILE, "repairable_markov_chain_trajectory", "марковского процесса"
    )

    _separate(10)
    print("Имитационное моделирование в терминах дискретно-событийного моделирования:")
    simulator.run_discrete_event_simulation(modeling_time, DISCRETE_EVENT_FILE)
    _plot_saved_trajectory(
        DISCRETE_EVENT_FILE,
        "repairable_discrete_event_trajectory",
        "дискретно-событийного процесса",
    )

    return steady


def main(argv=None) -> int:
    """Run task ``1``, ``2`` or both; the choice comes from the arguments or standard input."""
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        choice = argv[0]
    else:
        tokens = sys.stdin.read().split()
        choice = tokens[0] if tokens else ""

    if choice == "1":
        run_task1(DEFAULT_N, DEFAULT_G)
    elif choice == "2":
        run_task2(DEFAULT_N, DEFAULT_G)
    else:
        run_task1(DEFAULT_N, DEFAULT_G)
        run_task2(DEFAULT_N, DEFAULT_G)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())