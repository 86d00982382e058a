from glyphplot.chart import Chart, ChartOptions
from glyphplot.config import BoxGlyphConfig, DurationBarConfig, IndicatorSpec, OverlaySpec
from glyphplot.errors import GlyphConfigError, GlyphError
from glyphplot.geometry import SlotGeometry, SlotParams, resolve_slot
from glyphplot.host import ChartPlugin, HostView, PlotBox, ScaleOptions, SeriesOptions
from glyphplot.labels import labelled_y_values, thin_x_labels, x_label_step
from glyphplot.renderers import BoxGlyphPlugin, DurationBarPlugin, outlier_range
from glyphplot.series import SeriesArray, build_field_index
from glyphplot.spline import SplinePath, build_monotone_path
from glyphplot.surface import DrawingSurface, RasterSurface, scoped_state

__all__ = [
    "BoxGlyphConfig",
    "BoxGlyphPlugin",
    "Chart",
    "ChartOptions",
    "ChartPlugin",
    "DrawingSurface",
    "DurationBarConfig",
    "DurationBarPlugin",
    "GlyphConfigError",
    "GlyphError",
    "HostView",
    "IndicatorSpec",
    "OverlaySpec",
    "PlotBox",
    "RasterSurface",
    "ScaleOptions",
    "SeriesArray",
    "SeriesOptions",
    "SlotGeometry",
    "SlotParams",
    "SplinePath",
    "build_field_index",
    "build_monotone_path",
    "labelled_y_values",
    "outlier_range",
    "resolve_slot",
    "scoped_state",
    "thin_x_labels",
    "x_label_step",
]
