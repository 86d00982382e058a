from .boxes import BoxColumns, BoxGlyphPlugin, draw_boxes, outlier_range
from .duration import DurationBarPlugin, draw_duration_bars
from .overlays import collect_points, draw_indicators, draw_overlays

__all__ = [
    "BoxColumns",
    "BoxGlyphPlugin",
    "DurationBarPlugin",
    "collect_points",
    "draw_boxes",
    "draw_duration_bars",
    "draw_indicators",
    "draw_overlays",
    "outlier_range",
]
