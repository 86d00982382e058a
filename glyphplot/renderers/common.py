from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import logging
import math

from glyphplot.host import HostView


LOGGER = logging.getLogger(__name__)

YMapper = Callable[[float], float]


def is_null(value: float | None) -> bool:
    return value is None or not math.isfinite(value)


def frame_x_pixels(host: HostView) -> list[float]:
    """Pixel position of every x value for the current frame; never cached."""
    return [host.value_to_pixel(float(x), "x", False) for x in host.data.x.tolist()]


def y_mapper(host: HostView) -> YMapper:
    def to_y(value: float) -> float:
        return host.value_to_pixel(value, "y", False)

    return to_y


def warn_unresolved_fields(owner: str, fields: Sequence[str], field_index: Mapping[str, int]) -> None:
    missing = sorted({name for name in fields if name not in field_index})
    if missing:
        LOGGER.warning("%s: no column for field(s) %s; they will not be drawn", owner, ", ".join(missing))
