from __future__ import annotations

from collections.abc import Sequence
import math

# Grid values within this many intervals of a multiple still get text.
Y_LABEL_TOLERANCE = 1e-6


def x_label_step(count: int, *, max_labels: int, min_spacing_px: float, plot_width: float) -> int:
    """Stride between labelled x ticks so labels fit both the count cap and the pixel budget."""
    if count <= 0:
        return 1
    budget = float(max(1, max_labels))
    if min_spacing_px > 0 and plot_width > 0:
        budget = min(budget, plot_width / min_spacing_px)
    if not math.isfinite(budget) or budget < 1.0:
        budget = 1.0
    return max(1, int(math.ceil(count / budget)))


def thin_x_label_indices(count: int, *, max_labels: int, min_spacing_px: float, plot_width: float) -> list[int]:
    step = x_label_step(count, max_labels=max_labels, min_spacing_px=min_spacing_px, plot_width=plot_width)
    indices = list(range(0, count, step))
    if count > 0 and indices[-1] != count - 1:
        indices.append(count - 1)
    return indices


def thin_x_labels(
    values: Sequence[float],
    *,
    max_labels: int = 12,
    min_spacing_px: float = 72.0,
    plot_width: float,
) -> list[float]:
    """Every ``step``-th x value, with the last value always present."""
    indices = thin_x_label_indices(
        len(values),
        max_labels=max_labels,
        min_spacing_px=min_spacing_px,
        plot_width=plot_width,
    )
    return [values[i] for i in indices]


def is_labelled_grid_value(value: float, *, axis_min: float, interval: float | None) -> bool:
    if interval is None or not math.isfinite(interval) or interval <= 0:
        return False
    k = (value - axis_min) / interval
    return abs(k - round(k)) <= Y_LABEL_TOLERANCE


def labelled_y_values(grid_values: Sequence[float], *, axis_min: float, interval: float | None) -> list[float]:
    """Grid values that carry axis text; an interval <= 0 (or None) leaves every gridline unlabelled."""
    return [v for v in grid_values if is_labelled_grid_value(v, axis_min=axis_min, interval=interval)]
