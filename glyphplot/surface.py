from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace
import math
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image

from glyphplot.colors import RGBA, ColorLike, coerce_color
from glyphplot.raster import blend_rect, draw_text, fill_polygons, new_canvas, stroke_polyline, text_size
from glyphplot.raster.draw_lines import LineCap
from glyphplot.raster.draw_text import HAlign, VAlign


Point = tuple[float, float]

_CAPS = ("butt", "round", "square")


class DrawingSurface(Protocol):
    """The subset of a 2D canvas context the glyph renderers draw through."""

    fill_style: RGBA
    stroke_style: RGBA
    line_width: float
    line_cap: LineCap

    def save(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def translate(self, dx: float, dy: float) -> None:
        ...

    def set_line_dash(self, pattern: Sequence[float]) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def bezier_curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        ...

    def stroke(self) -> None:
        ...

    def fill(self) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...


@contextmanager
def scoped_state(surface: DrawingSurface) -> Iterator[DrawingSurface]:
    """Push the surface state on entry and pop it on every exit path."""
    surface.save()
    try:
        yield surface
    finally:
        surface.restore()


def round_px(value: float) -> int:
    """Round half up, the way canvas code snaps to whole pixels."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SurfaceState:
    fill_style: RGBA = (0, 0, 0, 255)
    stroke_style: RGBA = (0, 0, 0, 255)
    line_width: float = 1.0
    line_cap: LineCap = "butt"
    line_dash: tuple[float, ...] = ()
    translate_x: float = 0.0
    translate_y: float = 0.0


@dataclass
class _SubPath:
    points: list[Point]
    closed: bool = False


class RasterSurface:
    """Numpy RGBA canvas with an HTML-canvas-like state machine.

    Coordinates are in pixels with the origin at the top-left; pixel (i, j)
    spans [i, i+1) x [j, j+1). Path coordinates are transformed by the
    translation current at the time each point is added.
    """

    def __init__(self, width: int, height: int, background: ColorLike = (0, 0, 0, 0)) -> None:
        self.canvas = new_canvas(int(width), int(height), color=coerce_color(background))
        self._state = SurfaceState()
        self._stack: list[SurfaceState] = []
        self._subpaths: list[_SubPath] = []

    @property
    def width(self) -> int:
        return int(self.canvas.shape[1])

    @property
    def height(self) -> int:
        return int(self.canvas.shape[0])

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def state_depth(self) -> int:
        return len(self._stack)

    @property
    def fill_style(self) -> RGBA:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, color: ColorLike) -> None:
        self._state = replace(self._state, fill_style=coerce_color(color))

    @property
    def stroke_style(self) -> RGBA:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, color: ColorLike) -> None:
        self._state = replace(self._state, stroke_style=coerce_color(color))

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, width: float) -> None:
        # Canvas ignores non-positive and non-finite widths.
        if math.isfinite(width) and width > 0:
            self._state = replace(self._state, line_width=float(width))

    @property
    def line_cap(self) -> LineCap:
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, cap: LineCap) -> None:
        if cap in _CAPS:
            self._state = replace(self._state, line_cap=cap)

    def get_line_dash(self) -> tuple[float, ...]:
        return self._state.line_dash

    def set_line_dash(self, pattern: Sequence[float]) -> None:
        values = tuple(float(v) for v in pattern)
        if any(v < 0 or not math.isfinite(v) for v in values):
            return
        if len(values) % 2 == 1:
            values = values * 2
        self._state = replace(self._state, line_dash=values)

    def save(self) -> None:
        self._stack.append(self._state)

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._state = replace(
            self._state,
            translate_x=self._state.translate_x + float(dx),
            translate_y=self._state.translate_y + float(dy),
        )

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append(_SubPath(points=[self._to_device(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths or self._subpaths[-1].closed:
            self.move_to(x, y)
            return
        self._subpaths[-1].points.append(self._to_device(x, y))

    def bezier_curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        if not self._subpaths or self._subpaths[-1].closed:
            self.move_to(c1x, c1y)
        points = self._subpaths[-1].points
        p0 = points[-1]
        p1 = self._to_device(c1x, c1y)
        p2 = self._to_device(c2x, c2y)
        p3 = self._to_device(x, y)
        points.extend(_flatten_cubic(p0, p1, p2, p3))

    def close_path(self) -> None:
        if self._subpaths and not self._subpaths[-1].closed:
            sub = self._subpaths[-1]
            sub.points.append(sub.points[0])
            sub.closed = True

    def stroke(self) -> None:
        state = self._state
        for sub in self._subpaths:
            stroke_polyline(
                self.canvas,
                sub.points,
                state.stroke_style,
                width=state.line_width,
                cap=state.line_cap,
                dash=state.line_dash,
            )

    def fill(self) -> None:
        fill_polygons(self.canvas, [sub.points for sub in self._subpaths], self._state.fill_style)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0 = self._to_device(x, y)
        x1, y1 = self._to_device(x + width, y + height)
        if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
            return
        blend_rect(self.canvas, round_px(x0), round_px(y0), round_px(x1), round_px(y1), self._state.fill_style)

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0 = self._to_device(x, y)
        x1, y1 = self._to_device(x + width, y + height)
        outline = [(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)]
        state = self._state
        # Square caps close the corners the way miter joins do for right angles.
        for a, b in zip(outline[:-1], outline[1:]):
            stroke_polyline(
                self.canvas,
                [a, b],
                state.stroke_style,
                width=state.line_width,
                cap="square",
                dash=state.line_dash,
            )

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size_px: float = 11.0,
        align: HAlign = "left",
        valign: VAlign = "top",
    ) -> None:
        dx, dy = self._to_device(x, y)
        draw_text(
            self.canvas,
            round_px(dx),
            round_px(dy),
            text,
            self._state.fill_style,
            font_size_px=font_size_px,
            align=align,
            valign=valign,
        )

    def measure_text(self, text: str, *, font_size_px: float = 11.0) -> tuple[int, int]:
        return text_size(text, font_size_px=font_size_px)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.canvas))

    def save_png(self, path: str | Path) -> Path:
        out_path = Path(path)
        self.to_image().save(out_path, format="PNG")
        return out_path

    def _to_device(self, x: float, y: float) -> Point:
        return (float(x) + self._state.translate_x, float(y) + self._state.translate_y)


def _flatten_cubic(p0: Point, p1: Point, p2: Point, p3: Point) -> list[Point]:
    hull = math.dist(p0, p1) + math.dist(p1, p2) + math.dist(p2, p3)
    if not math.isfinite(hull):
        return [p3]
    steps = int(min(256, max(4, math.ceil(hull / 2.0))))
    t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[1:]
    mt = 1.0 - t
    a = mt**3
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t**3
    xs = a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0]
    ys = a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1]
    out = list(zip(xs.tolist(), ys.tolist()))
    out[-1] = p3
    return out
