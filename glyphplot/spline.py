from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from glyphplot.surface import DrawingSurface


Point = tuple[float, float]

# Fritsch-Carlson bound on |(alpha, beta)|; beyond it the cubic overshoots.
OVERSHOOT_LIMIT = 3.0


@dataclass(frozen=True)
class BezierSegment:
    c1: Point
    c2: Point
    end: Point


@dataclass(frozen=True)
class SplinePath:
    start: Point
    segments: tuple[BezierSegment, ...]
    tangents: tuple[float, ...]

    @property
    def end(self) -> Point:
        return self.segments[-1].end


def secant_slopes(xs: Sequence[float], ys: Sequence[float]) -> list[float]:
    slopes: list[float] = []
    for i in range(len(xs) - 1):
        dx = xs[i + 1] - xs[i]
        dy = ys[i + 1] - ys[i]
        slopes.append(dy / dx if dx != 0 else 0.0)
    return slopes


def monotone_tangents(xs: Sequence[float], ys: Sequence[float]) -> list[float]:
    """Per-point tangents for a monotone cubic through (xs, ys); needs two or more points."""
    n = len(xs)
    ms = secant_slopes(xs, ys)
    ts = [0.0] * n
    ts[0] = ms[0]
    for i in range(1, n - 1):
        ts[i] = (ms[i - 1] + ms[i]) / 2.0
    ts[n - 1] = ms[n - 2]

    # Segments are visited in order, so a flattened tangent feeds the next test.
    for i in range(n - 1):
        if ms[i] == 0:
            ts[i] = 0.0
            ts[i + 1] = 0.0
            continue
        a = ts[i] / ms[i]
        b = ts[i + 1] / ms[i]
        h = math.hypot(a, b)
        if h > OVERSHOOT_LIMIT:
            scale = OVERSHOOT_LIMIT / h
            ts[i] = a * scale * ms[i]
            ts[i + 1] = b * scale * ms[i]
    return ts


def build_monotone_path(points: Sequence[Point]) -> SplinePath | None:
    """One start point plus ``len(points) - 1`` cubic Bezier segments, or None under two points."""
    if len(points) < 2:
        return None
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    ts = monotone_tangents(xs, ys)

    segments: list[BezierSegment] = []
    for i in range(len(xs) - 1):
        x0, y0 = xs[i], ys[i]
        x1, y1 = xs[i + 1], ys[i + 1]
        dx = x1 - x0
        segments.append(
            BezierSegment(
                c1=(x0 + dx / 3.0, y0 + ts[i] * dx / 3.0),
                c2=(x1 - dx / 3.0, y1 - ts[i + 1] * dx / 3.0),
                end=(x1, y1),
            )
        )
    return SplinePath(start=(xs[0], ys[0]), segments=tuple(segments), tangents=tuple(ts))


def trace_path(surface: DrawingSurface, path: SplinePath) -> None:
    surface.move_to(*path.start)
    for seg in path.segments:
        surface.bezier_curve_to(seg.c1[0], seg.c1[1], seg.c2[0], seg.c2[1], seg.end[0], seg.end[1])


def trace_polyline(surface: DrawingSurface, points: Sequence[Point]) -> None:
    surface.move_to(*points[0])
    for x, y in points[1:]:
        surface.line_to(x, y)
