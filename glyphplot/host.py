from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from glyphplot.colors import ColorLike
from glyphplot.series import SeriesArray
from glyphplot.surface import DrawingSurface

if TYPE_CHECKING:
    from glyphplot.chart import ChartOptions


@dataclass(frozen=True)
class PlotBox:
    """Plotting area inside the canvas, in canvas pixels."""

    left: float
    top: float
    width: float
    height: float


class HostView(Protocol):
    """What a draw hook may read from the host chart during one frame."""

    @property
    def surface(self) -> DrawingSurface:
        ...

    @property
    def data(self) -> SeriesArray:
        ...

    @property
    def bbox(self) -> PlotBox:
        ...

    def value_to_pixel(self, value: float, axis: str, clamp: bool = True) -> float:
        ...

    def visible_index_range(self) -> tuple[int, int] | None:
        ...


RangeContributor = Callable[[HostView, float, float], tuple[float, float]]


@dataclass
class SeriesOptions:
    label: str = ""
    color: ColorLike = (62, 149, 255, 255)
    width: float = 1.0
    show_paths: bool = True
    show_points: bool = False
    point_size: float = 4.0


@dataclass
class ScaleOptions:
    range: RangeContributor | None = None


class ChartPlugin(Protocol):
    """Extension points a host invokes: options mutation once, draw once per repaint."""

    def configure_options(self, options: "ChartOptions") -> None:
        ...

    def draw(self, host: HostView) -> None:
        ...


def disable_default_rendering(options: "ChartOptions", *, skip_x: bool = True) -> None:
    """Hide the host's own paths and points for series a glyph plugin draws itself."""
    for idx, series in enumerate(options.series):
        if skip_x and idx == 0:
            continue
        series.show_paths = False
        series.show_points = False


def ensure_y_scale(options: "ChartOptions") -> ScaleOptions:
    return options.scales.setdefault("y", ScaleOptions())


__all__ = [
    "ChartPlugin",
    "HostView",
    "PlotBox",
    "RangeContributor",
    "ScaleOptions",
    "SeriesOptions",
    "disable_default_rendering",
    "ensure_y_scale",
]
