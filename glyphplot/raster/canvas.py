from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> bool:
    """Source-over blend ``color`` into the half-open pixel box [x0, x1) x [y0, y1).

    Returns False when the clipped box is empty.
    """
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0], max(y0, y1))
    if xa >= xb or ya >= yb:
        return False
    view = dst[ya:yb, xa:xb]
    coverage = np.ones(view.shape[:2], dtype=np.float32)
    _blend_coverage(view, coverage, color)
    return True


def blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    """Blend ``color`` through a coverage mask (uint8 0-255 or bool) placed at (x, y)."""
    h, w = mask.shape
    if h <= 0 or w <= 0:
        return

    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    sub = mask[y0 - y : y1 - y, x0 - x : x1 - x]
    if sub.dtype == np.bool_:
        coverage = sub.astype(np.float32)
    else:
        coverage = sub.astype(np.float32) / 255.0
    if not np.any(coverage > 0):
        return
    _blend_coverage(dst[y0:y1, x0:x1], coverage, color)


def _blend_coverage(patch: np.ndarray, coverage: np.ndarray, color: RGBA) -> None:
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0

    src_alpha = (color[3] / 255.0) * coverage
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[: y1 - y0, : x1 - x0]
    alpha = patch[:, :, 3:4].astype(np.float32) / 255.0
    inv = 1.0 - alpha
    view[:, :, :3] = np.rint(patch[:, :, :3] * alpha + view[:, :, :3] * inv).astype(np.uint8)
    view[:, :, 3] = np.maximum(view[:, :, 3], patch[:, :, 3])


def clear_outside(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> None:
    """Make every pixel outside the half-open box [x0, x1) x [y0, y1) transparent."""
    h, w = dst.shape[:2]
    xa, xb = max(0, x0), min(w, x1)
    ya, yb = max(0, y0), min(h, y1)
    dst[:ya] = 0
    dst[yb:] = 0
    dst[:, :xa] = 0
    dst[:, xb:] = 0
