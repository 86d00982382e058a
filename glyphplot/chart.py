from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from glyphplot.colors import RGBA, ColorLike, coerce_color
from glyphplot.errors import GlyphConfigError
from glyphplot.host import ChartPlugin, PlotBox, ScaleOptions, SeriesOptions
from glyphplot.labels import labelled_y_values, thin_x_label_indices
from glyphplot.raster import blit, clear_outside
from glyphplot.scales import AxisScale, finite_extent, format_tick, format_ticks_for_axis, nice_ticks, range_num
from glyphplot.series import SeriesArray
from glyphplot.surface import RasterSurface, scoped_state


LOGGER = logging.getLogger(__name__)


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


@dataclass
class ChartOptions:
    """Host chart configuration; plugins may mutate it once, before the first frame."""

    width: int = 800
    height: int = 600
    title: str = ""
    series: list[SeriesOptions] = field(default_factory=list)
    scales: dict[str, ScaleOptions] = field(default_factory=dict)
    plugins: list[ChartPlugin] = field(default_factory=list)

    # plot region gutters
    gutter_left: int = 64
    gutter_right: int = 16
    gutter_top: int = 32
    gutter_bottom: int = 40

    # style
    background: ColorLike = (12, 16, 23, 255)
    plot_bg_color: ColorLike = (20, 26, 36, 255)
    grid_color: ColorLike = (44, 53, 66, 255)
    text_color: ColorLike = (208, 218, 232, 255)
    tick_font_px: float = 11.0
    title_font_px: float = 14.0
    show_grid: bool = True

    # axis text
    x_max_labels: int = 12
    x_label_min_spacing_px: float = 72.0
    x_formatter: Callable[[float], str] | None = None
    y_tick_target: int = 6
    y_label_interval: float | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise GlyphConfigError("chart width/height must be > 0")
        if min(self.gutter_left, self.gutter_right, self.gutter_top, self.gutter_bottom) < 0:
            raise GlyphConfigError("gutters must be >= 0")
        if self.width - self.gutter_left - self.gutter_right <= 1 or self.height - self.gutter_top - self.gutter_bottom <= 1:
            raise GlyphConfigError("chart too small for plotting area")
        if self.x_max_labels < 1:
            raise GlyphConfigError("x_max_labels must be >= 1")
        if self.y_tick_target < 1:
            raise GlyphConfigError("y_tick_target must be >= 1")


class Chart:
    """Minimal host: owns data, scales and the render loop, and calls plugin hooks.

    Plugins' ``configure_options`` runs once here; ``draw`` runs on every
    :meth:`render`, after the host's own grid and series are painted.
    """

    def __init__(self, options: ChartOptions, data: Sequence[Any]) -> None:
        self._data = SeriesArray.from_columns(data)
        if len(options.series) > self._data.width:
            raise GlyphConfigError(f"{len(options.series)} series options for {self._data.width} data columns")
        series = [replace(s) for s in options.series]
        series.extend(SeriesOptions() for _ in range(self._data.width - len(series)))
        opts = replace(
            options,
            series=series,
            scales={name: replace(scale) for name, scale in options.scales.items()},
            plugins=list(options.plugins),
        )
        for plugin in opts.plugins:
            plugin.configure_options(opts)
        self.options = opts

        self._x_range: tuple[float, float] | None = None
        self._x_scale: AxisScale | None = None
        self._y_scale: AxisScale | None = None
        self._layer: RasterSurface | None = None
        self._last_frame: np.ndarray | None = None

    @property
    def data(self) -> SeriesArray:
        return self._data

    @property
    def bbox(self) -> PlotBox:
        o = self.options
        return PlotBox(
            left=float(o.gutter_left),
            top=float(o.gutter_top),
            width=float(o.width - o.gutter_left - o.gutter_right),
            height=float(o.height - o.gutter_top - o.gutter_bottom),
        )

    @property
    def surface(self) -> RasterSurface:
        if self._layer is None:
            raise RuntimeError("drawing surface is only available while rendering")
        return self._layer

    def set_data(self, data: Sequence[Any]) -> "Chart":
        array = SeriesArray.from_columns(data)
        if array.width != self._data.width:
            raise GlyphConfigError(f"expected {self._data.width} columns, got {array.width}")
        self._data = array
        self._invalidate_scales()
        return self

    def set_size(self, width: int, height: int) -> "Chart":
        self.options = replace(self.options, width=int(width), height=int(height))
        self._invalidate_scales()
        return self

    def set_x_range(self, xmin: float, xmax: float) -> "Chart":
        left = float(min(xmin, xmax))
        right = float(max(xmin, xmax))
        if right - left <= 1e-12:
            raise ValueError("x range span must be > 0")
        self._x_range = (left, right)
        self._invalidate_scales()
        return self

    def clear_x_range(self) -> "Chart":
        self._x_range = None
        self._invalidate_scales()
        return self

    def y_grid(self) -> list[tuple[float, str | None]]:
        """Y gridline values with their label text, ``None`` where the label is thinned out.

        With ``y_label_interval`` set, labels land on multiples of the interval
        counted from the axis minimum.
        """
        o = self.options
        y_scale = self.scale("y")
        y_ticks = nice_ticks(y_scale.vmin, y_scale.vmax, o.y_tick_target)
        if y_ticks.size == 0:
            return []
        values = y_ticks.tolist()
        if o.y_label_interval is None:
            labelled = set(values)
        else:
            labelled = set(labelled_y_values(values, axis_min=y_scale.vmin, interval=o.y_label_interval))
        return [(value, text if value in labelled else None) for value, text in zip(values, format_ticks_for_axis(y_ticks))]

    def scale(self, axis: str) -> AxisScale:
        if self._x_scale is None or self._y_scale is None:
            self._update_scales()
        if axis == "x":
            return self._x_scale  # type: ignore[return-value]
        if axis == "y":
            return self._y_scale  # type: ignore[return-value]
        raise KeyError(f"unknown axis: {axis}")

    def value_to_pixel(self, value: float, axis: str, clamp: bool = True) -> float:
        box = self.bbox
        if axis == "x":
            px = self.scale("x").to_pixel(value, origin=box.left, length=box.width)
            lo, hi = box.left, box.left + box.width
        else:
            px = self.scale(axis).to_pixel(value, origin=box.top, length=box.height, invert=True)
            lo, hi = box.top, box.top + box.height
        if clamp and math.isfinite(px):
            px = min(hi, max(lo, px))
        return px

    def visible_index_range(self) -> tuple[int, int] | None:
        x = self._data.x
        if x.size == 0:
            return None
        scale = self.scale("x")
        first = int(np.searchsorted(x, scale.vmin, side="left"))
        last = int(np.searchsorted(x, scale.vmax, side="right")) - 1
        if first > last:
            return None
        return (first, last)

    def render(self) -> np.ndarray:
        o = self.options
        self._update_scales()
        box = self.bbox
        base = RasterSurface(o.width, o.height, background=o.background)
        base.fill_style = o.plot_bg_color
        base.fill_rect(box.left, box.top, box.width, box.height)
        self._draw_axes(base)

        layer = RasterSurface(o.width, o.height)
        self._layer = layer
        try:
            self._draw_default_series(layer)
            for plugin in o.plugins:
                plugin.draw(self)
        finally:
            self._layer = None
        clear_outside(
            layer.canvas,
            int(box.left),
            int(box.top),
            int(box.left + box.width),
            int(box.top + box.height),
        )
        blit(base.canvas, layer.canvas)
        LOGGER.debug("rendered %dx%d frame with %d plugin(s)", o.width, o.height, len(o.plugins))
        self._last_frame = base.canvas
        return base.canvas

    def to_image(self) -> Image.Image:
        frame = self._last_frame if self._last_frame is not None else self.render()
        return Image.fromarray(np.ascontiguousarray(frame))

    def save_png(self, path: str | Path) -> Path:
        out_path = Path(path)
        self.to_image().save(out_path, format="PNG")
        return out_path

    def _update_scales(self) -> None:
        x = self._data.x
        if self._x_range is not None:
            xmin, xmax = self._x_range
        elif x.size:
            xmin, xmax = float(x[0]), float(x[-1])
        else:
            xmin, xmax = 0.0, 1.0
        if xmin == xmax:
            xmin -= 1.0
            xmax += 1.0
        self._x_scale = AxisScale(xmin, xmax)

        numeric = [self._data.numeric(idx) for idx in range(1, self._data.width)]
        extent = finite_extent([col for col in numeric if col is not None])
        data_min, data_max = extent if extent is not None else (math.nan, math.nan)
        y_opts = self.options.scales.get("y")
        if y_opts is not None and y_opts.range is not None:
            ymin, ymax = y_opts.range(self, data_min, data_max)
        elif extent is not None:
            ymin, ymax = range_num(data_min, data_max, 0.1)
        else:
            ymin, ymax = 0.0, 1.0
        self._y_scale = AxisScale(float(ymin), float(ymax))

    def _invalidate_scales(self) -> None:
        # Recomputed on the next scale() or render().
        self._x_scale = None
        self._y_scale = None

    def _draw_axes(self, surface: RasterSurface) -> None:
        o = self.options
        box = self.bbox
        text_color = coerce_color(o.text_color)
        grid_color = coerce_color(o.grid_color)

        with scoped_state(surface):
            if o.title:
                surface.fill_style = text_color
                surface.fill_text(o.title, o.width / 2, 8, font_size_px=o.title_font_px, align="center")

            for value, text in self.y_grid():
                py = self.value_to_pixel(value, "y")
                if o.show_grid:
                    _hline(surface, box.left, box.left + box.width, py, grid_color)
                if text is not None:
                    surface.fill_style = text_color
                    surface.fill_text(
                        text,
                        box.left - 6,
                        py,
                        font_size_px=o.tick_font_px,
                        align="right",
                        valign="middle",
                    )

            visible = self.visible_index_range()
            if visible is None:
                return
            x_values = self._data.x[visible[0] : visible[1] + 1].tolist()
            indices = thin_x_label_indices(
                len(x_values),
                max_labels=o.x_max_labels,
                min_spacing_px=o.x_label_min_spacing_px,
                plot_width=box.width,
            )
            fmt = o.x_formatter or format_tick
            for idx in indices:
                value = x_values[idx]
                px = self.value_to_pixel(value, "x")
                if o.show_grid:
                    _vline(surface, px, box.top, box.top + box.height, grid_color)
                text = fmt(value)
                surface.fill_style = text_color
                surface.fill_text(text, px, box.top + box.height + 6, font_size_px=o.tick_font_px, align="center")

    def _draw_default_series(self, surface: RasterSurface) -> None:
        x = self._data.x
        for idx, series in enumerate(self.options.series):
            if idx == 0 or not (series.show_paths or series.show_points):
                continue
            column = self._data.numeric(idx)
            if column is None:
                continue
            with scoped_state(surface):
                surface.stroke_style = series.color
                surface.fill_style = series.color
                surface.line_width = series.width
                live = np.isfinite(column)
                if series.show_paths:
                    for seg_start, seg_end in _contiguous_true_runs(live):
                        if seg_end - seg_start < 2:
                            continue
                        surface.begin_path()
                        for i in range(seg_start, seg_end):
                            px = self.value_to_pixel(float(x[i]), "x", False)
                            py = self.value_to_pixel(float(column[i]), "y", False)
                            if i == seg_start:
                                surface.move_to(px, py)
                            else:
                                surface.line_to(px, py)
                        surface.stroke()
                if series.show_points:
                    size = series.point_size
                    for i in np.flatnonzero(live).tolist():
                        px = self.value_to_pixel(float(x[i]), "x", False)
                        py = self.value_to_pixel(float(column[i]), "y", False)
                        surface.fill_rect(px - size / 2, py - size / 2, size, size)


def _hline(surface: RasterSurface, x0: float, x1: float, y: float, color: RGBA) -> None:
    surface.stroke_style = color
    surface.line_width = 1
    surface.begin_path()
    surface.move_to(x0, math.floor(y) + 0.5)
    surface.line_to(x1, math.floor(y) + 0.5)
    surface.stroke()


def _vline(surface: RasterSurface, x: float, y0: float, y1: float, color: RGBA) -> None:
    surface.stroke_style = color
    surface.line_width = 1
    surface.begin_path()
    surface.move_to(math.floor(x) + 0.5, y0)
    surface.line_to(math.floor(x) + 0.5, y1)
    surface.stroke()
