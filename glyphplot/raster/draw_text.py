from __future__ import annotations

from functools import lru_cache
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from glyphplot.raster.canvas import RGBA, blend_mask


HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "middle", "bottom"]
Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

DEFAULT_FONT_SIZE_PX = 11.0
# Tried in order; Pillow searches the platform font directories for bare file names.
FONT_FILES = (
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "Arial.ttf",
    "Helvetica.ttc",
)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    align: HAlign = "left",
    valign: VAlign = "top",
) -> None:
    """Blend ``text`` so its ink box is anchored at (x, y) per ``align``/``valign``."""
    if not text:
        return
    mask = _render_mask(text, _load_font(_font_size(font_size_px)))
    h, w = mask.shape
    if align == "center":
        x -= w // 2
    elif align == "right":
        x -= w
    if valign == "middle":
        y -= h // 2
    elif valign == "bottom":
        y -= h
    blend_mask(dst, x, y, mask, color)


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    font = _load_font(_font_size(font_size_px))
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


def _font_size(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


@lru_cache(maxsize=512)
def _render_mask(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=32)
def _load_font(size: int) -> Font:
    for name in FONT_FILES:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    return ImageFont.load_default()
