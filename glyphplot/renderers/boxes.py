from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING

from glyphplot.adapters import SetColumn
from glyphplot.config import BoxGlyphConfig
from glyphplot.geometry import SlotParams
from glyphplot.host import HostView, disable_default_rendering, ensure_y_scale
from glyphplot.renderers.common import YMapper, frame_x_pixels, is_null, warn_unresolved_fields, y_mapper
from glyphplot.renderers.overlays import draw_indicators, draw_overlays
from glyphplot.scales import range_num
from glyphplot.series import SeriesArray, build_field_index
from glyphplot.surface import DrawingSurface, round_px, scoped_state

if TYPE_CHECKING:
    from glyphplot.chart import ChartOptions


LOGGER = logging.getLogger(__name__)

MEDIAN_COLUMN = 1
Q1_COLUMN = 2
Q3_COLUMN = 3
MIN_COLUMN = 4
MAX_COLUMN = 5
OUTLIER_COLUMN = 6


@dataclass(frozen=True)
class BoxColumns:
    """Per-index five-number summaries plus optional outlier sets.

    The ordering max >= q3 >= median >= q1 >= min is not checked; a malformed
    summary draws an inverted box.
    """

    median: Sequence[float | None]
    q1: Sequence[float | None]
    q3: Sequence[float | None]
    low: Sequence[float | None]
    high: Sequence[float | None]
    outliers: SetColumn | None = None

    @classmethod
    def from_series(cls, data: SeriesArray) -> "BoxColumns | None":
        cols = [data.numeric(idx) for idx in (MEDIAN_COLUMN, Q1_COLUMN, Q3_COLUMN, MIN_COLUMN, MAX_COLUMN)]
        if any(col is None for col in cols):
            return None
        median, q1, q3, low, high = (col.tolist() for col in cols)  # type: ignore[union-attr]
        return cls(median=median, q1=q1, q3=q3, low=low, high=high, outliers=data.sets(OUTLIER_COLUMN))


def outlier_extent(outlier_sets: Iterable[Sequence[float]] | None) -> tuple[float, float] | None:
    lo = math.inf
    hi = -math.inf
    for members in outlier_sets or ():
        for value in members:
            if is_null(value):
                continue
            lo = min(lo, value)
            hi = max(hi, value)
    if lo > hi:
        return None
    return (lo, hi)


def outlier_range(
    outlier_sets: Iterable[Sequence[float]] | None,
    data_min: float,
    data_max: float,
    pad_ratio: float = 0.1,
) -> tuple[float, float]:
    """Y range covering the data extent and every outlier, padded by ``pad_ratio``.

    Empty outlier sets contribute no bound.
    """
    lo = data_min if math.isfinite(data_min) else math.inf
    hi = data_max if math.isfinite(data_max) else -math.inf
    extent = outlier_extent(outlier_sets)
    if extent is not None:
        lo = min(lo, extent[0])
        hi = max(hi, extent[1])
    if lo > hi:
        return range_num(0.0, 1.0, pad_ratio)
    return range_num(lo, hi, pad_ratio)


def draw_boxes(
    surface: DrawingSurface,
    index_range: tuple[int, int],
    x_pixels: Sequence[float],
    columns: BoxColumns,
    slot: SlotParams,
    config: BoxGlyphConfig,
    to_y: YMapper,
) -> int:
    """Paint the box glyph for every index in the inclusive ``index_range``; returns boxes visited."""
    count = len(x_pixels)
    if count == 0:
        return 0
    first = max(0, index_range[0])
    last = min(count - 1, index_range[1])
    if first > last:
        return 0

    visited = 0
    offset = (config.shadow_width % 2) / 2
    with scoped_state(surface):
        # Odd stroke widths land on pixel centers.
        surface.translate(offset, offset)
        for i in range(first, last + 1):
            _draw_box(surface, i, x_pixels, columns, slot, config, to_y)
            visited += 1
    return visited


def _draw_box(
    surface: DrawingSurface,
    i: int,
    x_pixels: Sequence[float],
    columns: BoxColumns,
    slot: SlotParams,
    config: BoxGlyphConfig,
    to_y: YMapper,
) -> None:
    x = x_pixels[i]
    geom = slot.resolve(x_pixels, i)
    body_width = round_px(geom.slot_width)
    body_x = geom.left if config.align_to_tick else x - body_width / 2

    low, high = columns.low[i], columns.high[i]
    low_y = None if is_null(low) else to_y(float(low))  # type: ignore[arg-type]
    high_y = None if is_null(high) else to_y(float(high))  # type: ignore[arg-type]

    if low_y is not None and high_y is not None:
        surface.begin_path()
        surface.set_line_dash(config.shadow_dash)
        surface.line_width = config.shadow_width
        surface.stroke_style = config.shadow_color
        surface.move_to(round_px(x), round_px(min(high_y, low_y)))
        surface.line_to(round_px(x), round_px(max(high_y, low_y)))
        surface.stroke()

    q1, q3 = columns.q1[i], columns.q3[i]
    if not is_null(q1) and not is_null(q3):
        q1_y = to_y(float(q1))  # type: ignore[arg-type]
        q3_y = to_y(float(q3))  # type: ignore[arg-type]
        body_y = min(q1_y, q3_y)
        body_height = abs(q3_y - q1_y)
        inset = config.body_outline

        surface.fill_style = config.shadow_color
        surface.fill_rect(round_px(body_x), round_px(body_y), body_width, round_px(body_height))
        surface.fill_style = config.body_color
        surface.fill_rect(
            round_px(body_x + inset),
            round_px(body_y + inset),
            round_px(body_width - inset * 2),
            round_px(body_height - inset * 2),
        )

    median = columns.median[i]
    if config.show_median and not is_null(median):
        median_y = to_y(float(median))  # type: ignore[arg-type]
        surface.fill_style = config.median_color
        surface.fill_rect(
            round_px(body_x),
            round_px(median_y - config.median_thickness / 2),
            body_width,
            round_px(config.median_thickness),
        )

    if low_y is not None or high_y is not None:
        surface.begin_path()
        surface.set_line_dash(())
        surface.line_width = config.shadow_width
        surface.stroke_style = config.shadow_color
        for cap_y in (high_y, low_y):
            if cap_y is None:
                continue
            surface.move_to(round_px(body_x), round_px(cap_y))
            surface.line_to(round_px(body_x + body_width), round_px(cap_y))
        surface.stroke()

    if config.show_outliers and columns.outliers is not None and i < len(columns.outliers):
        size = config.outlier_size
        surface.fill_style = config.outlier_color
        for value in columns.outliers[i]:
            if is_null(value):
                continue
            cy = to_y(value)
            surface.fill_rect(x - size / 2, cy - size / 2, size, size)


class BoxGlyphPlugin:
    """Box-and-whisker glyphs over index-aligned summary columns 1-6."""

    def __init__(self, config: BoxGlyphConfig | None = None, *, fields: Sequence[str] = ()) -> None:
        self.config = config or BoxGlyphConfig()
        self.field_index = build_field_index(fields)
        warn_unresolved_fields(
            "box glyphs",
            [spec.field for spec in (*self.config.overlays, *self.config.indicators) if not spec.disabled],
            self.field_index,
        )

    def configure_options(self, options: "ChartOptions") -> None:
        if self.config.show_outliers:
            ensure_y_scale(options).range = self.y_range
        disable_default_rendering(options)

    def y_range(self, host: HostView, data_min: float, data_max: float) -> tuple[float, float]:
        return outlier_range(host.data.sets(OUTLIER_COLUMN), data_min, data_max, self.config.range_padding)

    def slot_params(self, host: HostView) -> SlotParams:
        return SlotParams(
            gap=self.config.gap,
            width_factor=self.config.width_factor,
            align_to_tick=self.config.align_to_tick,
            plot_width=host.bbox.width,
        )

    def draw(self, host: HostView) -> None:
        data = host.data
        visible = host.visible_index_range()
        if len(data) == 0:
            return
        x_pixels = frame_x_pixels(host)
        to_y = y_mapper(host)
        slot = self.slot_params(host)

        columns = BoxColumns.from_series(data)
        if columns is None:
            LOGGER.debug("box glyphs skipped: summary columns 1-5 are not all numeric")
        elif visible is not None:
            draw_boxes(host.surface, visible, x_pixels, columns, slot, self.config, to_y)

        draw_overlays(host.surface, x_pixels, data, self.field_index, self.config.overlays, to_y)
        draw_indicators(host.surface, x_pixels, data, self.field_index, self.config.indicators, to_y, slot)
