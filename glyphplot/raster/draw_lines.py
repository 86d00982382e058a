from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Literal

import numpy as np

from glyphplot.raster.canvas import RGBA, blend_mask


LineCap = Literal["butt", "round", "square"]
Point = tuple[float, float]

_EPS = 1e-9


def stroke_polyline(
    dst: np.ndarray,
    points: Sequence[Point],
    color: RGBA,
    *,
    width: float = 1.0,
    cap: LineCap = "butt",
    dash: Sequence[float] = (),
) -> None:
    """Stroke one open sub-path onto ``dst``.

    Coverage of every piece is unioned before blending, so translucent strokes do
    not darken where segments meet.
    """
    if len(points) < 2:
        return
    half = max(1.0, float(width)) * 0.5
    pieces = split_dashes(points, dash) if dash else [list(points)]
    pieces = [piece for piece in pieces if len(piece) >= 2]
    if not pieces:
        return

    xs = [p[0] for piece in pieces for p in piece]
    ys = [p[1] for piece in pieces for p in piece]
    if not all(math.isfinite(v) for v in xs + ys):
        return
    pad = half + 1.0
    x0 = max(0, int(math.floor(min(xs) - pad)))
    y0 = max(0, int(math.floor(min(ys) - pad)))
    x1 = min(dst.shape[1], int(math.ceil(max(xs) + pad)) + 1)
    y1 = min(dst.shape[0], int(math.ceil(max(ys) + pad)) + 1)
    if x0 >= x1 or y0 >= y1:
        return

    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.bool_)
    for piece in pieces:
        last = len(piece) - 2
        for i in range(len(piece) - 1):
            ax, ay = piece[i]
            bx, by = piece[i + 1]
            _mark_segment(mask, x0, y0, ax, ay, bx, by, half, cap=cap, start=(i == 0), end=(i == last))
            if i > 0 and half > 1.0:
                # Interior vertices get a round join so wide curves stay closed.
                _mark_disc(mask, x0, y0, ax, ay, half)
    blend_mask(dst, x0, y0, mask, color)


def split_dashes(points: Sequence[Point], pattern: Sequence[float]) -> list[list[Point]]:
    """Split a polyline into its visible dash pieces; the phase restarts per call."""
    lengths = [float(v) for v in pattern]
    if len(lengths) % 2 == 1:
        lengths = lengths * 2
    if not lengths or any(v < 0 or not math.isfinite(v) for v in lengths) or sum(lengths) <= 0:
        return [list(points)]

    pieces: list[list[Point]] = []
    slot = 0
    remaining = lengths[0]
    current: list[Point] | None = [points[0]]
    for i in range(len(points) - 1):
        ax, ay = points[i]
        bx, by = points[i + 1]
        seg_len = math.hypot(bx - ax, by - ay)
        travelled = 0.0
        while seg_len - travelled > _EPS:
            step = min(remaining, seg_len - travelled)
            travelled += step
            remaining -= step
            f = travelled / seg_len
            pt = (ax + (bx - ax) * f, ay + (by - ay) * f)
            if current is not None:
                current.append(pt)
            if remaining <= _EPS:
                slot = (slot + 1) % len(lengths)
                remaining = lengths[slot]
                if slot % 2 == 1:
                    if current is not None:
                        pieces.append(current)
                    current = None
                else:
                    current = [pt]
    if current is not None and len(current) >= 2:
        pieces.append(current)
    return pieces


def _mark_segment(
    mask: np.ndarray,
    ox: int,
    oy: int,
    ax: float,
    ay: float,
    bx: float,
    by: float,
    half: float,
    *,
    cap: LineCap,
    start: bool,
    end: bool,
) -> None:
    dx = bx - ax
    dy = by - ay
    length = math.hypot(dx, dy)
    if length <= _EPS:
        if cap == "round":
            _mark_disc(mask, ox, oy, ax, ay, half)
        elif cap == "square":
            _mark_box(mask, ox, oy, ax - half, ay - half, ax + half, ay + half)
        return
    # Canonical direction keeps tie-breaking on pixel boundaries independent of
    # the order the caller supplied the endpoints in.
    if dy > 0 or (dy == 0 and dx < 0):
        ax, ay, bx, by = bx, by, ax, ay
        dx, dy = -dx, -dy
        start, end = end, start
    ux = dx / length
    uy = dy / length
    lead = half if (cap == "square" and start) else 0.0
    trail = half if (cap == "square" and end) else 0.0

    reach = half + max(lead, trail)
    cx0 = max(0, int(math.floor(min(ax, bx) - reach)) - ox)
    cy0 = max(0, int(math.floor(min(ay, by) - reach)) - oy)
    cx1 = min(mask.shape[1], int(math.ceil(max(ax, bx) + reach)) + 1 - ox)
    cy1 = min(mask.shape[0], int(math.ceil(max(ay, by) + reach)) + 1 - oy)
    if cx0 >= cx1 or cy0 >= cy1:
        return
    px = np.arange(cx0, cx1, dtype=np.float64)[None, :] + ox + 0.5 - ax
    py = np.arange(cy0, cy1, dtype=np.float64)[:, None] + oy + 0.5 - ay
    t = px * ux + py * uy
    s = -px * uy + py * ux
    inside = (t >= -lead - _EPS) & (t < length + trail - _EPS) & (s >= -half - _EPS) & (s < half - _EPS)
    mask[cy0:cy1, cx0:cx1] |= inside
    if cap == "round":
        if start:
            _mark_disc(mask, ox, oy, ax, ay, half)
        if end:
            _mark_disc(mask, ox, oy, bx, by, half)


def _mark_disc(mask: np.ndarray, ox: int, oy: int, cx: float, cy: float, radius: float) -> None:
    x0 = max(0, int(math.floor(cx - radius)) - ox)
    y0 = max(0, int(math.floor(cy - radius)) - oy)
    x1 = min(mask.shape[1], int(math.ceil(cx + radius)) + 1 - ox)
    y1 = min(mask.shape[0], int(math.ceil(cy + radius)) + 1 - oy)
    if x0 >= x1 or y0 >= y1:
        return
    px = np.arange(x0, x1, dtype=np.float64)[None, :] + ox + 0.5 - cx
    py = np.arange(y0, y1, dtype=np.float64)[:, None] + oy + 0.5 - cy
    mask[y0:y1, x0:x1] |= (px * px + py * py) < radius * radius - _EPS


def _mark_box(mask: np.ndarray, ox: int, oy: int, x0: float, y0: float, x1: float, y1: float) -> None:
    c0 = max(0, int(math.floor(x0 + 0.5)) - ox)
    r0 = max(0, int(math.floor(y0 + 0.5)) - oy)
    c1 = min(mask.shape[1], int(math.floor(x1 + 0.5)) - ox)
    r1 = min(mask.shape[0], int(math.floor(y1 + 0.5)) - oy)
    if c0 < c1 and r0 < r1:
        mask[r0:r1, c0:c1] = True
