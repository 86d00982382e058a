from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging

from glyphplot.config import IndicatorSpec, OverlaySpec
from glyphplot.geometry import SlotParams
from glyphplot.renderers.common import YMapper, is_null
from glyphplot.series import SeriesArray
from glyphplot.spline import Point, build_monotone_path, trace_path, trace_polyline
from glyphplot.surface import DrawingSurface, scoped_state


LOGGER = logging.getLogger(__name__)


def collect_points(x_pixels: Sequence[float], values: Sequence[float], to_y: YMapper) -> list[Point]:
    points: list[Point] = []
    for x, value in zip(x_pixels, values):
        if is_null(value):
            continue
        points.append((x, to_y(float(value))))
    return points


def draw_overlays(
    surface: DrawingSurface,
    x_pixels: Sequence[float],
    data: SeriesArray,
    field_index: Mapping[str, int],
    overlays: Sequence[OverlaySpec],
    to_y: YMapper,
) -> int:
    """Stroke each enabled overlay as a polyline or monotone spline; returns curves drawn."""
    if len(x_pixels) == 0 or not overlays:
        return 0
    drawn = 0
    for spec in overlays:
        if spec.disabled:
            continue
        column = data.numeric(field_index.get(spec.field, -1))
        if column is None:
            LOGGER.debug("overlay %s skipped: field not resolvable", spec.field)
            continue
        points = collect_points(x_pixels, column.tolist(), to_y)
        if len(points) < 2:
            continue

        with scoped_state(surface):
            surface.stroke_style = spec.color
            surface.line_width = spec.line_width
            surface.begin_path()
            path = build_monotone_path(points) if spec.spline else None
            if path is not None:
                trace_path(surface, path)
            else:
                trace_polyline(surface, points)
            surface.stroke()
        drawn += 1
    return drawn


def draw_indicators(
    surface: DrawingSurface,
    x_pixels: Sequence[float],
    data: SeriesArray,
    field_index: Mapping[str, int],
    indicators: Sequence[IndicatorSpec],
    to_y: YMapper,
    slot: SlotParams,
) -> int:
    """Stroke a short round-capped tick per non-null value; returns ticks drawn."""
    if len(x_pixels) == 0 or not indicators:
        return 0
    drawn = 0
    for spec in indicators:
        if spec.disabled:
            continue
        column = data.numeric(field_index.get(spec.field, -1))
        if column is None:
            LOGGER.debug("indicator %s skipped: field not resolvable", spec.field)
            continue

        with scoped_state(surface):
            surface.stroke_style = spec.color
            surface.line_width = spec.thickness
            surface.line_cap = "round"
            for i, value in enumerate(column.tolist()):
                if is_null(value):
                    continue
                geom = slot.resolve(x_pixels, i)
                half = (geom.slot_width * spec.width_factor) / 2.0
                y = to_y(float(value))
                x_center = geom.left + geom.slot_width / 2.0

                surface.begin_path()
                surface.move_to(x_center - half, y)
                surface.line_to(x_center + half, y)
                surface.stroke()
                drawn += 1
    return drawn
