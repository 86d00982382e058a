from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from PIL import Image, ImageChops, ImageDraw

from glyphplot.raster.canvas import RGBA, blend_mask


Point = tuple[float, float]


def fill_polygons(dst: np.ndarray, polygons: Sequence[Sequence[Point]], color: RGBA) -> None:
    """Fill closed polygons with the even-odd rule.

    Polygons are given in canvas coordinates where pixel (i, j) spans [i, i+1);
    Pillow samples at integer coordinates, hence the half-pixel shift.
    """
    usable = [list(poly) for poly in polygons if len(poly) >= 3]
    usable = [poly for poly in usable if all(math.isfinite(v) for p in poly for v in p)]
    if not usable:
        return
    xs = [p[0] for poly in usable for p in poly]
    ys = [p[1] for poly in usable for p in poly]
    x0 = max(0, int(math.floor(min(xs))))
    y0 = max(0, int(math.floor(min(ys))))
    x1 = min(dst.shape[1], int(math.ceil(max(xs))) + 1)
    y1 = min(dst.shape[0], int(math.ceil(max(ys))) + 1)
    if x0 >= x1 or y0 >= y1:
        return

    combined = Image.new("1", (x1 - x0, y1 - y0), 0)
    for poly in usable:
        layer = Image.new("1", combined.size, 0)
        ImageDraw.Draw(layer).polygon([(px - x0 - 0.5, py - y0 - 0.5) for px, py in poly], fill=1)
        combined = ImageChops.logical_xor(combined, layer)
    mask = np.asarray(combined, dtype=np.bool_)
    blend_mask(dst, x0, y0, mask, color)
