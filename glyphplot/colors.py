from __future__ import annotations

import re

from PIL import ImageColor

from glyphplot.errors import GlyphConfigError


RGBA = tuple[int, int, int, int]
ColorLike = str | tuple[int, int, int] | tuple[int, int, int, int]

_RGBA_CALL = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9]*\.?[0-9]+)\s*\)$",
    re.IGNORECASE,
)


def coerce_color(color: ColorLike, alpha: float = 1.0) -> RGBA:
    if isinstance(color, str):
        r, g, b, a = _parse_color_string(color)
    elif isinstance(color, tuple) and len(color) == 3:
        r, g, b = (int(c) for c in color)
        a = 255
    elif isinstance(color, tuple) and len(color) == 4:
        r, g, b, a = (int(c) for c in color)
    else:
        raise GlyphConfigError(f"unsupported color value: {color!r}")
    if any(c < 0 or c > 255 for c in (r, g, b, a)):
        raise GlyphConfigError(f"color channels must be in [0, 255]: {color!r}")
    out_a = int(max(0.0, min(1.0, alpha)) * a)
    return (r, g, b, out_a)


def _parse_color_string(value: str) -> RGBA:
    text = value.strip()
    # CSS alpha is a 0-1 fraction; Pillow would read rgba() alpha as 0-255.
    match = _RGBA_CALL.match(text)
    if match is not None:
        r, g, b = (int(match.group(i)) for i in range(1, 4))
        raw_alpha = float(match.group(4))
        if raw_alpha > 1.0:
            raise GlyphConfigError(f"rgba() alpha must be in [0, 1]: {value!r}")
        a = int(round(raw_alpha * 255))
        return (r, g, b, a)
    try:
        parsed = ImageColor.getrgb(text)
    except ValueError as exc:
        raise GlyphConfigError(f"unknown color: {value!r}") from exc
    if len(parsed) == 3:
        return (parsed[0], parsed[1], parsed[2], 255)
    return (parsed[0], parsed[1], parsed[2], parsed[3])
