from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class SlotGeometry:
    """Horizontal placement of the glyph occupying one index, in pixels."""

    slot_width: float
    left: float
    center: float


def neighbor_distance(x_pixels: Sequence[float], i: int, *, gap: float, plot_width: float | None) -> float:
    """Spacing available to index ``i`` before the gap and width factor shrink it.

    A lone point gets the whole plot minus a gap on either side; otherwise the
    nearest measurable neighbor wins. NaN when nothing is measurable and no
    ``plot_width`` is known.
    """
    count = len(x_pixels)
    if count == 1:
        if plot_width is None:
            return math.nan
        return float(plot_width) - 2.0 * float(gap)

    x = float(x_pixels[i])
    spacing: list[float] = []
    if i > 0:
        spacing.append(abs(x - float(x_pixels[i - 1])))
    if i < count - 1:
        spacing.append(abs(float(x_pixels[i + 1]) - x))
    spacing = [d for d in spacing if math.isfinite(d)]
    if spacing:
        return min(spacing)
    if plot_width is None:
        return math.nan
    return float(plot_width) / count


def resolve_slot(
    x_pixels: Sequence[float],
    i: int,
    *,
    gap: float = 2.0,
    width_factor: float = 1.0,
    align_to_tick: bool = False,
    plot_width: float | None = None,
) -> SlotGeometry:
    """Slot width and left/center pixel for index ``i`` of ``x_pixels``.

    Pure function of its inputs; callers recompute it every frame. The width is
    floored to one pixel, including when the spacing is non-finite.
    """
    if len(x_pixels) == 0:
        raise IndexError("x_pixels is empty")
    distance = neighbor_distance(x_pixels, i, gap=gap, plot_width=plot_width)
    if len(x_pixels) == 1:
        raw = distance * width_factor
    else:
        raw = (distance - gap) * width_factor
    slot_width = raw if math.isfinite(raw) and raw > 1.0 else 1.0

    x = float(x_pixels[i])
    left = x if align_to_tick else x - slot_width / 2.0
    return SlotGeometry(slot_width=slot_width, left=left, center=left + slot_width / 2.0)


@dataclass(frozen=True)
class SlotParams:
    """Frame-local inputs to :func:`resolve_slot` shared by every index of one pass."""

    gap: float = 2.0
    width_factor: float = 1.0
    align_to_tick: bool = False
    plot_width: float | None = None

    def resolve(self, x_pixels: Sequence[float], i: int) -> SlotGeometry:
        return resolve_slot(
            x_pixels,
            i,
            gap=self.gap,
            width_factor=self.width_factor,
            align_to_tick=self.align_to_tick,
            plot_width=self.plot_width,
        )
