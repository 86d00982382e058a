from __future__ import annotations

import math
import unittest
from unittest import mock

import numpy as np

from glyphplot.config import IndicatorSpec, OverlaySpec
from glyphplot.geometry import SlotParams
from glyphplot.renderers.overlays import collect_points, draw_indicators, draw_overlays
from glyphplot.series import SeriesArray, build_field_index
from glyphplot.surface import RasterSurface


RED = (255, 0, 0, 255)


def _identity(value: float) -> float:
    return value


class OverlayTests(unittest.TestCase):
    def setUp(self) -> None:
        self.xs = [20.0, 40.0, 60.0, 80.0]
        self.data = SeriesArray.from_columns([self.xs, [10.0, 30.0, 30.0, 20.0], [None, 50.0, None, None]])
        self.fields = build_field_index(["avg", "sparse"])

    def test_collect_points_skips_nulls(self) -> None:
        points = collect_points([1.0, 2.0, 3.0], [5.0, math.nan, 7.0], _identity)
        self.assertEqual(points, [(1.0, 5.0), (3.0, 7.0)])

    def test_polyline_overlay_uses_line_segments(self) -> None:
        surface = mock.MagicMock()
        drawn = draw_overlays(surface, self.xs, self.data, self.fields, [OverlaySpec(field="avg")], _identity)
        self.assertEqual(drawn, 1)
        surface.move_to.assert_called_once_with(20.0, 10.0)
        self.assertEqual(surface.line_to.call_count, 3)
        surface.bezier_curve_to.assert_not_called()
        self.assertEqual(surface.save.call_count, surface.restore.call_count)

    def test_spline_overlay_uses_bezier_segments(self) -> None:
        surface = mock.MagicMock()
        draw_overlays(surface, self.xs, self.data, self.fields, [OverlaySpec(field="avg", spline=True)], _identity)
        self.assertEqual(surface.bezier_curve_to.call_count, 3)
        surface.line_to.assert_not_called()

    def test_unresolved_sparse_and_disabled_overlays_are_skipped(self) -> None:
        surface = mock.MagicMock()
        overlays = [
            OverlaySpec(field="missing"),
            OverlaySpec(field="sparse"),
            OverlaySpec(field="avg", disabled=True),
        ]
        self.assertEqual(draw_overlays(surface, self.xs, self.data, self.fields, overlays, _identity), 0)
        surface.stroke.assert_not_called()

    def test_overlay_pixels_follow_the_curve(self) -> None:
        surface = RasterSurface(100, 60)
        draw_overlays(surface, self.xs, self.data, self.fields, [OverlaySpec(field="avg", color=RED)], _identity)
        # flat run between (40, 30) and (60, 30)
        self.assertEqual(tuple(int(v) for v in surface.canvas[30, 50]), RED)
        self.assertEqual(surface.state_depth, 0)
        self.assertEqual(surface.stroke_style, (0, 0, 0, 255))


class IndicatorTests(unittest.TestCase):
    def test_one_tick_per_present_value(self) -> None:
        xs = [20.0, 40.0, 60.0]
        data = SeriesArray.from_columns([xs, [10.0, None, 30.0]])
        surface = mock.MagicMock()
        drawn = draw_indicators(
            surface, xs, data, build_field_index(["mark"]), [IndicatorSpec(field="mark")], _identity, SlotParams()
        )
        self.assertEqual(drawn, 2)
        self.assertEqual(surface.stroke.call_count, 2)
        self.assertEqual(surface.line_cap, "round")

    def test_tick_is_centered_on_slot(self) -> None:
        xs = [20.0, 40.0, 60.0]
        data = SeriesArray.from_columns([xs, [None, 50.0, None]])
        surface = mock.MagicMock()
        spec = IndicatorSpec(field="mark", width_factor=0.5)
        draw_indicators(surface, xs, data, build_field_index(["mark"]), [spec], _identity, SlotParams(gap=2.0))
        # slot is 18px, so the tick spans 9px around x=40
        surface.move_to.assert_called_once_with(35.5, 50.0)
        surface.line_to.assert_called_once_with(44.5, 50.0)

    def test_tick_pixels(self) -> None:
        xs = [20.0, 40.0, 60.0]
        data = SeriesArray.from_columns([xs, [None, 50.0, None]])
        surface = RasterSurface(100, 100)
        spec = IndicatorSpec(field="mark", color=RED, width_factor=0.5)
        draw_indicators(surface, xs, data, build_field_index(["mark"]), [spec], _identity, SlotParams(gap=2.0))
        self.assertEqual(tuple(int(v) for v in surface.canvas[50, 40]), RED)
        self.assertEqual(tuple(int(v) for v in surface.canvas[49, 40]), RED)
        self.assertEqual(int(surface.canvas[50, 30, 3]), 0)
        self.assertFalse(np.any(surface.canvas[:45, :, 3]))

    def test_unresolved_indicator_is_skipped(self) -> None:
        xs = [20.0, 40.0]
        data = SeriesArray.from_columns([xs, [1.0, 2.0]])
        surface = mock.MagicMock()
        drawn = draw_indicators(surface, xs, data, {}, [IndicatorSpec(field="mark")], _identity, SlotParams())
        self.assertEqual(drawn, 0)
        surface.save.assert_not_called()


if __name__ == "__main__":
    unittest.main()
