"""Graphviz descriptions of the system state graphs."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from .system import RepairableSystem, System

_OPERATIONAL_STYLE = "style=filled, fillcolor=lightblue"
_FAILED_STYLE = "style=filled, fillcolor=lightcoral"


def _node(index: int, a: int, b: int, operational: bool) -> str:
    style = _OPERATIONAL_STYLE if operational else _FAILED_STYLE
    return f'  S{index} [label="S{index}\\n({a},{b})", {style}];'


def _failure_edges(params, a: int, b: int, index, extra: str = ""):
    """Edges for A and B failures out of an operational state ``(a, b)``."""
    current = index(a, b)
    if a > 0:
        rate = min(a, params.na) * params.lambda_a
        if rate > 0:
            yield f'  S{current} -> S{index(a - 1, b)} [label="{rate:.2f}"{extra}];'
    if b > 0:
        rate = min(b, params.nb) * params.lambda_b
        if rate > 0:
            yield f'  S{current} -> S{index(a, b - 1)} [label="{rate:.2f}"{extra}];'


def state_graph_dot(system: System) -> str:
    """DOT text of the state graph of a non-repairable system."""
    p = system.params
    total_a = p.na + p.ra
    total_b = p.nb + p.rb
    states = [(a, b) for a in range(total_a + 1) for b in range(total_b + 1)]

    lines = ["digraph StateGraph {", "  rankdir=LR;", "  node [shape=circle];"]
    for a, b in states:
        lines.append(_node(system.state_to_index(a, b), a, b, a >= 1 and b >= p.nb))
    for a, b in states:
        if a >= 1 and b >= p.nb:
            lines.extend(_failure_edges(p, a, b, system.state_to_index))
    lines.append("}")
    return "\n".join(lines) + "\n"


def repairable_state_graph_dot(system: RepairableSystem) -> str:
    """DOT text of the state graph of a repairable system."""
    p = system.params
    total_a = p.na + p.ra
    total_b = p.nb + p.rb
    index = system.state_to_graph_index
    states = [(a, b) for a in range(total_a + 1) for b in range(total_b + 1)]

    lines = ["digraph RepairableStateGraph {", "  rankdir=RL;", "  node [shape=circle];"]
    for level in range(total_a + total_b + 1):
        members = "".join(f"S{index(a, b)}; " for a, b in states if a + b == level)
        lines.append(f"  {{ rank = same; {members}}}")

    for a, b in states:
        lines.append(_node(index(a, b), a, b, a >= 1 and b >= p.nb))

    repair_extra = ", style=dashed, color=blue"
    for a, b in states:
        current = index(a, b)
        if a >= 1 and b >= p.nb:
            lines.extend(_failure_edges(p, a, b, index, ", color=red"))

        repairing_a = total_a - a
        repairing_b = total_b - b
        if a < total_a and repairing_a > 0 and (
            repairing_a > repairing_b
            or (repairing_a == repairing_b and p.lambda_a >= p.lambda_b)
        ):
            lines.append(
                f'  S{current} -> S{index(a + 1, b)} [label="{p.lambda_s:.2f}"{repair_extra}];'
            )
        if b < total_b and repairing_b > 0 and (
            repairing_b > repairing_a
            or (repairing_b == repairing_a and p.lambda_b > p.lambda_a)
        ):
            lines.append(
                f'  S{current} -> S{index(a, b + 1)} [label="{p.lambda_s:.2f}"{repair_extra}];'
            )

    lines.append("}")
    return "\n".join(lines) + "\n"


def _render(dot_text: str, filename: str) -> tuple[Path, Path]:
    dot_path = Path(f"{filename}.dot")
    png_path = Path(f"{filename}.png")
    dot_path.write_text(dot_text, encoding="utf-8")
    try:
        subprocess.run(["dot", "-Tpng", str(dot_path), "-o", str(png_path)], check=False)
    except OSError as exc:
        print(f"dot: {exc}", file=sys.stderr)
    return dot_path, png_path


def generate_state_graph(system: System, filename: str = "state_graph") -> Path:
    """Write ``filename.dot`` and render it to ``filename.png`` with Graphviz."""
    dot_path, png_path = _render(state_graph_dot(system), filename)
    print(f"Граф состояний сохранен в файлах {dot_path} и {png_path}")
    return dot_path


def generate_repairable_state_graph(
    system: RepairableSystem, filename: str = "state_graph_task2"
) -> Path:
    """Write and render the state graph of a repairable system."""
    dot_path, png_path = _render(repairable_state_graph_dot(system), filename)
    print(f"Граф состояний ремонтируемой системы сохранен в файлах {dot_path} и {png_path}")
    return dot_path