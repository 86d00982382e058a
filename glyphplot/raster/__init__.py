from .canvas import RGBA, blend_mask, blend_rect, blit, clear_outside, new_canvas
from .draw_lines import split_dashes, stroke_polyline
from .draw_shapes import fill_polygons
from .draw_text import draw_text, text_size

__all__ = [
    "RGBA",
    "blend_mask",
    "blend_rect",
    "blit",
    "clear_outside",
    "draw_text",
    "fill_polygons",
    "new_canvas",
    "split_dashes",
    "stroke_polyline",
    "text_size",
]
