from __future__ import annotations

from dataclasses import dataclass
import unittest
from unittest import mock

import numpy as np

from glyphplot.config import DurationBarConfig, OverlaySpec
from glyphplot.geometry import SlotParams
from glyphplot.host import PlotBox
from glyphplot.renderers.duration import DurationBarPlugin, draw_duration_bars
from glyphplot.series import SeriesArray
from glyphplot.surface import RasterSurface


RED = (255, 0, 0, 255)


@dataclass
class _IdentityHost:
    data: SeriesArray
    surface: RasterSurface
    bbox: PlotBox = PlotBox(0.0, 0.0, 200.0, 100.0)

    def value_to_pixel(self, value: float, axis: str, clamp: bool = True) -> float:
        return float(value)

    def visible_index_range(self) -> tuple[int, int] | None:
        return (0, len(self.data) - 1)


def _identity(value: float) -> float:
    return value


class DurationBarTests(unittest.TestCase):
    def test_null_ends_are_skipped(self) -> None:
        xs = [10.0 + 15.0 * i for i in range(12)]
        starts = [10.0] * 12
        ends = [None if i % 3 == 2 else 50.0 for i in range(12)]
        host = _IdentityHost(SeriesArray.from_columns([xs, starts, ends]), RasterSurface(200, 100))

        with mock.patch.object(host.surface, "fill_rect", wraps=host.surface.fill_rect) as fill_rect:
            DurationBarPlugin().draw(host)
        self.assertEqual(fill_rect.call_count, 8)
        # index 2 (x=40) is null; its neighbours stop at columns 31 and 49
        self.assertEqual(int(host.surface.canvas[30, 40, 3]), 0)
        self.assertGreater(int(host.surface.canvas[30, 25, 3]), 0)

    def test_missing_end_draws_nothing_and_restores_state(self) -> None:
        surface = RasterSurface(100, 100)
        surface.fill_style = (1, 2, 3, 255)
        with mock.patch.object(surface, "fill_rect", wraps=surface.fill_rect) as fill_rect:
            drawn = draw_duration_bars(
                surface, [50.0], [5.0], [None], SlotParams(plot_width=100.0), DurationBarConfig(), _identity
            )
        self.assertEqual(drawn, 0)
        fill_rect.assert_not_called()
        self.assertEqual(surface.fill_style, (1, 2, 3, 255))
        self.assertEqual(surface.state_depth, 0)
        self.assertFalse(np.any(surface.canvas[:, :, 3]))

    def test_state_is_balanced_on_mock_surface(self) -> None:
        surface = mock.MagicMock()
        draw_duration_bars(surface, [10.0, 20.0], [1.0, 2.0], [5.0, 6.0], SlotParams(), DurationBarConfig(), _identity)
        self.assertEqual(surface.save.call_count, 1)
        self.assertEqual(surface.restore.call_count, 1)
        self.assertEqual(surface.fill_rect.call_count, 2)
        self.assertEqual(surface.stroke_rect.call_count, 2)

    def test_outline_stays_inside_fill(self) -> None:
        surface = RasterSurface(100, 100)
        config = DurationBarConfig(gap=30.0, outline_color=RED, outline_width=2.0)
        drawn = draw_duration_bars(surface, [50.0], [20.0], [60.0], SlotParams(gap=30.0, plot_width=100.0), config, _identity)
        self.assertEqual(drawn, 1)
        canvas = surface.canvas
        # slot is 40px wide: columns 30..69, rows 20..59
        for row, col in ((20, 30), (21, 31), (59, 69), (58, 68), (20, 69), (59, 30)):
            self.assertEqual(tuple(int(v) for v in canvas[row, col]), RED)
        for row, col in ((19, 30), (20, 29), (60, 69), (59, 70)):
            self.assertEqual(int(canvas[row, col, 3]), 0)
        self.assertEqual(tuple(int(v) for v in canvas[40, 50]), (0, 128, 255, 102))

    def test_outline_skipped_when_bar_is_too_thin(self) -> None:
        surface = mock.MagicMock()
        config = DurationBarConfig(outline_width=3.0)
        draw_duration_bars(surface, [10.0, 20.0], [1.0, 1.0], [2.0, 2.0], SlotParams(), config, _identity)
        self.assertEqual(surface.fill_rect.call_count, 2)
        surface.stroke_rect.assert_not_called()

    def test_bars_accept_reversed_start_end(self) -> None:
        surface = mock.MagicMock()
        draw_duration_bars(
            surface, [10.0, 20.0], [50.0], [20.0], SlotParams(), DurationBarConfig(outline_width=0.0), _identity
        )
        surface.fill_rect.assert_called_once_with(6, 20, 8, 30)

    def test_single_point_without_plot_width_draws_one_pixel_bar(self) -> None:
        surface = mock.MagicMock()
        drawn = draw_duration_bars(
            surface, [50.0], [20.0], [60.0], SlotParams(), DurationBarConfig(outline_width=0.0), _identity
        )
        self.assertEqual(drawn, 1)
        surface.fill_rect.assert_called_once_with(50, 20, 1, 40)

    def test_unknown_overlay_field_logs_warning(self) -> None:
        config = DurationBarConfig(overlays=(OverlaySpec(field="avg"),))
        with self.assertLogs("glyphplot.renderers.common", level="WARNING") as captured:
            DurationBarPlugin(config, fields=("start", "end"))
        self.assertIn("avg", captured.output[0])


if __name__ == "__main__":
    unittest.main()
