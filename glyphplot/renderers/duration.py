from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TYPE_CHECKING

from glyphplot.config import DurationBarConfig
from glyphplot.geometry import SlotParams
from glyphplot.host import HostView, disable_default_rendering
from glyphplot.renderers.common import YMapper, frame_x_pixels, is_null, warn_unresolved_fields, y_mapper
from glyphplot.renderers.overlays import draw_indicators, draw_overlays
from glyphplot.series import build_field_index
from glyphplot.surface import DrawingSurface, round_px, scoped_state

if TYPE_CHECKING:
    from glyphplot.chart import ChartOptions


LOGGER = logging.getLogger(__name__)


def draw_duration_bars(
    surface: DrawingSurface,
    x_pixels: Sequence[float],
    start_values: Sequence[float | None],
    end_values: Sequence[float | None],
    slot: SlotParams,
    config: DurationBarConfig,
    to_y: YMapper,
) -> int:
    """Fill one rectangle per index whose start and end are both present.

    Returns the number of bars filled. An index with a null start or end
    contributes nothing.
    """
    if len(x_pixels) == 0:
        return 0
    drawn = 0
    outline = config.outline_width
    with scoped_state(surface):
        for i in range(len(x_pixels)):
            start = start_values[i] if i < len(start_values) else None
            end = end_values[i] if i < len(end_values) else None
            if is_null(start) or is_null(end):
                continue

            geom = slot.resolve(x_pixels, i)
            start_y = to_y(float(start))  # type: ignore[arg-type]
            end_y = to_y(float(end))  # type: ignore[arg-type]
            left = round_px(geom.left)
            top = round_px(min(start_y, end_y))
            width = round_px(geom.slot_width)
            height = round_px(abs(start_y - end_y))

            surface.fill_style = config.fill_color
            surface.fill_rect(left, top, width, height)
            drawn += 1

            if outline > 0 and width - outline > 0 and height - outline > 0:
                # Inset by half the stroke so the outline stays inside the fill.
                surface.stroke_style = config.outline_color
                surface.line_width = outline
                surface.stroke_rect(left + outline / 2, top + outline / 2, width - outline, height - outline)
    return drawn


class DurationBarPlugin:
    """Paired start/end bars with optional overlay curves and indicator ticks.

    ``fields`` names the value columns in order (column 1 onward) so overlays
    and indicators can refer to them by name.
    """

    def __init__(self, config: DurationBarConfig | None = None, *, fields: Sequence[str] = ()) -> None:
        self.config = config or DurationBarConfig()
        self.field_index = build_field_index(fields)
        warn_unresolved_fields(
            "duration bars",
            [spec.field for spec in (*self.config.overlays, *self.config.indicators) if not spec.disabled],
            self.field_index,
        )

    def configure_options(self, options: "ChartOptions") -> None:
        disable_default_rendering(options)

    def slot_params(self, host: HostView) -> SlotParams:
        return SlotParams(
            gap=self.config.gap,
            width_factor=self.config.width_factor,
            align_to_tick=self.config.align_to_tick,
            plot_width=host.bbox.width,
        )

    def draw(self, host: HostView) -> None:
        data = host.data
        if len(data) == 0:
            return
        x_pixels = frame_x_pixels(host)
        to_y = y_mapper(host)
        slot = self.slot_params(host)

        starts = data.numeric(self.config.start_column)
        ends = data.numeric(self.config.end_column)
        if starts is None or ends is None:
            LOGGER.debug("duration bars skipped: start/end columns are not numeric")
        else:
            draw_duration_bars(host.surface, x_pixels, starts.tolist(), ends.tolist(), slot, self.config, to_y)

        draw_overlays(host.surface, x_pixels, data, self.field_index, self.config.overlays, to_y)
        draw_indicators(host.surface, x_pixels, data, self.field_index, self.config.indicators, to_y, slot)
