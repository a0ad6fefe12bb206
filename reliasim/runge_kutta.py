"""Fixed-step Runge-Kutta solver for linear systems and trapezoidal integration."""

from __future__ import annotations

import numpy as np


def solve(a, y0, t_start: float, t_end: float, steps: int) -> np.ndarray:
    """Integrate ``dy/dt = a^T y`` with classic RK4.

    Returns a matrix whose column ``i`` is the solution at the ``i``-th of
    ``steps`` evenly spaced points from ``t_start`` to ``t_end``.
    """
    if steps < 1:
        raise ValueError("steps must be at least 1")
    at = np.asarray(a, dtype=float).T
    y_start = np.asarray(y0, dtype=float)
    result = np.empty((y_start.size, steps))
    result[:, 0] = y_start
    if steps == 1:
        return result

    h = (t_end - t_start) / (steps - 1)
    y = y_start
    for i in range(1, steps):
        k1 = at @ y
        k2 = at @ (y + h / 2 * k1)
        k3 = at @ (y + h / 2 * k2)
        k4 = at @ (y + h * k3)
        y = y + h / 6 * (k1 + 2 * k2 + 2 * k3 + k4)
        result[:, i] = y
    return result


def integrate(y, x) -> float:
    """Trapezoidal integral of samples ``y`` taken at points ``x``."""
    y = np.asarray(y, dtype=float)
    x = np.asarray(x, dtype=float)
    if y.shape != x.shape:
        raise ValueError("y and x must have the same length")
    if y.size < 2:
        return 0.0
    return float(np.sum(np.diff(x) * (y[:-1] + y[1:]) / 2.0))