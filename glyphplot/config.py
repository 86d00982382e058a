from __future__ import annotations

from dataclasses import dataclass
import math

from glyphplot.colors import ColorLike, coerce_color
from glyphplot.errors import GlyphConfigError


def _require_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise GlyphConfigError(f"{name} must be a finite number >= 0, got {value!r}")


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise GlyphConfigError(f"{name} must be a finite number > 0, got {value!r}")


def _set_color(obj: object, name: str, value: ColorLike) -> None:
    object.__setattr__(obj, name, coerce_color(value))


@dataclass(frozen=True)
class OverlaySpec:
    """A continuous curve drawn over the glyph layer from one named value column."""

    field: str
    color: ColorLike = (255, 255, 255, 255)
    line_width: float = 2.0
    spline: bool = False
    disabled: bool = False

    def __post_init__(self) -> None:
        if not self.field:
            raise GlyphConfigError("overlay field name must be non-empty")
        _require_positive("overlay line_width", self.line_width)
        _set_color(self, "color", self.color)


@dataclass(frozen=True)
class IndicatorSpec:
    """A short horizontal tick per index, sized as a fraction of the glyph slot."""

    field: str
    color: ColorLike = (255, 255, 255, 255)
    thickness: float = 2.0
    width_factor: float = 0.6
    disabled: bool = False

    def __post_init__(self) -> None:
        if not self.field:
            raise GlyphConfigError("indicator field name must be non-empty")
        _require_positive("indicator thickness", self.thickness)
        _require_positive("indicator width_factor", self.width_factor)
        _set_color(self, "color", self.color)


@dataclass(frozen=True)
class DurationBarConfig:
    """Options for start/end duration bars.

    ``fill_color`` defaults to a translucent blue; an ``outline_width`` of 0
    disables the outline. ``start_column``/``end_column`` index the series array.
    """

    gap: float = 2.0
    fill_color: ColorLike = (0, 128, 255, 102)
    outline_color: ColorLike = (0, 0, 0, 255)
    outline_width: float = 1.0
    align_to_tick: bool = False
    width_factor: float = 1.0
    start_column: int = 1
    end_column: int = 2
    overlays: tuple[OverlaySpec, ...] = ()
    indicators: tuple[IndicatorSpec, ...] = ()

    def __post_init__(self) -> None:
        _require_non_negative("gap", self.gap)
        _require_non_negative("outline_width", self.outline_width)
        _require_positive("width_factor", self.width_factor)
        if self.start_column < 1 or self.end_column < 1:
            raise GlyphConfigError("start_column/end_column must be >= 1 (column 0 is x)")
        _set_color(self, "fill_color", self.fill_color)
        _set_color(self, "outline_color", self.outline_color)
        object.__setattr__(self, "overlays", tuple(self.overlays))
        object.__setattr__(self, "indicators", tuple(self.indicators))


@dataclass(frozen=True)
class BoxGlyphConfig:
    """Options for five-number-summary boxes.

    Columns are fixed: 1 median, 2 q1, 3 q3, 4 min, 5 max, 6 outlier sets.
    ``outlier_color`` falls back to ``shadow_color``.
    """

    gap: float = 2.0
    shadow_color: ColorLike = (0, 0, 0, 255)
    body_color: ColorLike = (238, 238, 238, 255)
    median_color: ColorLike = (0, 0, 0, 255)
    outlier_color: ColorLike | None = None
    width_factor: float = 0.7
    shadow_width: float = 2.0
    shadow_dash: tuple[float, ...] = (4.0, 4.0)
    body_outline: float = 1.0
    median_thickness: float = 2.0
    outlier_size: float = 8.0
    align_to_tick: bool = False
    show_median: bool = True
    show_outliers: bool = True
    range_padding: float = 0.1
    overlays: tuple[OverlaySpec, ...] = ()
    indicators: tuple[IndicatorSpec, ...] = ()

    def __post_init__(self) -> None:
        _require_non_negative("gap", self.gap)
        _require_positive("width_factor", self.width_factor)
        _require_positive("shadow_width", self.shadow_width)
        _require_non_negative("body_outline", self.body_outline)
        _require_positive("median_thickness", self.median_thickness)
        _require_positive("outlier_size", self.outlier_size)
        _require_non_negative("range_padding", self.range_padding)
        for step in self.shadow_dash:
            _require_non_negative("shadow_dash entries", step)
        _set_color(self, "shadow_color", self.shadow_color)
        _set_color(self, "body_color", self.body_color)
        _set_color(self, "median_color", self.median_color)
        _set_color(self, "outlier_color", self.shadow_color if self.outlier_color is None else self.outlier_color)
        object.__setattr__(self, "shadow_dash", tuple(float(v) for v in self.shadow_dash))
        object.__setattr__(self, "overlays", tuple(self.overlays))
        object.__setattr__(self, "indicators", tuple(self.indicators))
