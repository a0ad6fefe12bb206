"""Gnuplot scripts and data files for the model and simulation results."""

from __future__ import annotations

import math
import subprocess
import sys
from pathlib import Path

import numpy as np


def _num(value) -> str:
    return f"{float(value):g}"


def _write_lines(path: Path, lines) -> None:
    with path.open("w", encoding="utf-8") as out:
        for line in lines:
            out.write(line + "\n")


def _render(prefix: str, script_lines: list[str]) -> Path:
    """Write ``prefix.gp`` and run gnuplot on it; return the script path."""
    script = Path(f"{prefix}.gp")
    _write_lines(script, script_lines)
    try:
        subprocess.run(["gnuplot", str(script)], check=False)
    except OSError as exc:
        print(f"gnuplot: {exc}", file=sys.stderr)
    return script


def _header(prefix: str, title: str, size: str = "800,600") -> list[str]:
    return [
        f"set terminal png size {size}",
        f"set output '{prefix}.png'",
        f"set title '{title}'",
    ]


def _check_columns(times: np.ndarray, probabilities: np.ndarray) -> None:
    if probabilities.ndim != 2:
        raise ValueError("probabilities must be a two-dimensional matrix")
    if probabilities.shape[1] < times.size:
        raise ValueError("probabilities have fewer columns than there are time points")


def _write_state_table(path: Path, header: str, times: np.ndarray, table: np.ndarray) -> None:
    names = "".join(f"State{i} " for i in range(table.shape[0]))
    rows = (
        " ".join([_num(t), *(_num(v) for v in table[:, col])])
        for col, t in enumerate(times)
    )
    _write_lines(path, [header + names, *rows])


def _state_plot(prefix: str, count: int) -> str:
    curves = ", ".join(
        f"'{prefix}.dat' using 1:{i + 2} with lines title 'State {i}'" for i in range(count)
    )
    return "plot " + curves


def plot_states_probabilities(times, probabilities, output_prefix: str = "states_probabilities") -> Path:
    """Plot every state probability against time."""
    times = np.asarray(times, dtype=float)
    probabilities = np.asarray(probabilities, dtype=float)
    _check_columns(times, probabilities)

    _write_state_table(Path(f"{output_prefix}.dat"), "# Time ", times, probabilities)
    script = _header(output_prefix, "Вероятности состояний системы") + [
        "set xlabel 'Время'",
        "set ylabel 'Вероятность'",
        "set grid",
        "set key outside",
        _state_plot(output_prefix, probabilities.shape[0]),
    ]
    return _render(output_prefix, script)


def plot_reliability_function(times, reliability, output_prefix: str = "reliability_function") -> Path:
    """Plot the reliability function ``R(t)``."""
    times = np.asarray(times, dtype=float)
    reliability = np.asarray(reliability, dtype=float)
    if reliability.size < times.size:
        raise ValueError("reliability has fewer values than there are time points")

    _write_lines(
        Path(f"{output_prefix}.dat"),
        ["# Time Reliability", *(f"{_num(t)} {_num(r)}" for t, r in zip(times, reliability))],
    )
    script = _header(output_prefix, "Функция надежности системы") + [
        "set xlabel 'Время'",
        "set ylabel 'Вероятность'",
        "set grid",
        f"plot '{output_prefix}.dat' using 1:2 with lines title 'Reliability' lw 2",
    ]
    return _render(output_prefix, script)


def plot_histogram(data, title: str, output_prefix: str = "histogram") -> Path:
    """Plot a frequency histogram with the number of bins given by Sturges' rule."""
    values = [float(v) for v in data]
    if not values:
        raise ValueError("histogram needs at least one value")

    num_bins = int(1 + 3.322 * math.log10(len(values)))
    bin_width = (max(values) - min(values)) / num_bins

    _write_lines(Path(f"{output_prefix}.dat"), (_num(v) for v in values))
    script = _header(output_prefix, title) + [
        "set xlabel 'Время до отказа'",
        "set ylabel 'Частота'",
        "set grid",
        f"binwidth = {_num(bin_width)}",
        "bin(x,width) = width*floor(x/width)",
        "set boxwidth binwidth",
        f"plot '{output_prefix}.dat' using (bin($1,binwidth)):(1.0) "
        "smooth freq with boxes title 'Frequency'",
    ]
    return _render(output_prefix, script)


def plot_trajectories(trajectories, output_prefix: str = "state_trajectories") -> Path:
    """Plot ``(time, state index)`` trajectories as step functions, one file each."""
    trajectories = list(trajectories)
    for i, trajectory in enumerate(trajectories):
        _write_lines(
            Path(f"{output_prefix}_{i}.dat"),
            ["# Time State", *(f"{_num(t)} {state}" for t, state in trajectory)],
        )

    curves = ", ".join(
        f"'{output_prefix}_{i}.dat' using 1:2 with steps title 'Traj {i}'"
        for i in range(len(trajectories))
    )
    script = _header(output_prefix, "Траектории состояний системы") + [
        "set xlabel 'Время'",
        "set ylabel 'Состояние'",
        "set grid",
        "plot " + curves,
    ]
    return _render(output_prefix, script)


def plot_repairable_trajectory(trajectory, output_prefix: str = "repairable_trajectory") -> Path:
    """Plot working A, working B and the repair status of a repairable system."""
    _write_lines(
        Path(f"{output_prefix}.dat"),
        [
            "# Time WorkingA WorkingB RepairStatus",
            *(f"{_num(t)} {a} {b} {r}" for t, a, b, r in trajectory),
        ],
    )
    data = f"'{output_prefix}.dat'"
    script = _header(output_prefix, "Траектория состояний системы с ремонтом") + [
        "set xlabel 'Время'",
        "set grid",
        "set multiplot layout 3,1 title 'Траектория системы с ремонтом'",
        "set ylabel 'Устройства A'",
        f"plot {data} using 1:2 with steps title 'Working A'",
        "set ylabel 'Устройства B'",
        f"plot {data} using 1:3 with steps title 'Working B'",
        "set ylabel 'Ремонт'",
        "set yrange [-0.5:2.5]",
        "set ytics ('Нет' 0, 'A' 1, 'B' 2)",
        f"plot {data} using 1:4 with steps title 'Repair Status'",
        "unset multiplot",
    ]
    return _render(output_prefix, script)


def plot_aggregated_states(times, probabilities, model, output_prefix: str = "aggregated_states") -> Path:
    """Plot probabilities of the ``(a, b)`` states of a repairable model."""
    times = np.asarray(times, dtype=float)
    probabilities = np.asarray(probabilities, dtype=float)
    _check_columns(times, probabilities)

    aggregated = np.column_stack(
        [model.aggregated_state_probabilities(probabilities[:, col]) for col in range(probabilities.shape[1])]
    )
    count = aggregated.shape[0]

    _write_state_table(Path(f"{output_prefix}.dat"), "#Time ", times, aggregated)
    script = _header(output_prefix, f"Aggregated State Probabilities ({count} states)", "1200,800") + [
        "set xlabel 'Time'",
        "set ylabel 'Probability'",
        "set grid",
        "set key outside",
        _state_plot(output_prefix, count),
    ]
    return _render(output_prefix, script)