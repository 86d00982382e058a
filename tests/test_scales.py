from __future__ import annotations

import unittest

import numpy as np

from glyphplot.scales import AxisScale, finite_extent, format_tick, format_ticks_for_axis, nice_number, nice_ticks, range_num


class ScaleTests(unittest.TestCase):
    def test_range_num_pads_and_snaps(self) -> None:
        self.assertEqual(range_num(1.0, 9.0), (0.0, 10.0))

    def test_range_num_pads_by_a_tenth_of_the_span(self) -> None:
        lo, hi = range_num(3.0, 7.0)
        self.assertLessEqual(lo, 2.6)
        self.assertGreaterEqual(hi, 7.4)
        lo, hi = range_num(-50.0, -10.0)
        self.assertLessEqual(lo, -54.0)
        self.assertGreaterEqual(hi, -6.0)
        self.assertLessEqual(hi, 0.0)

    def test_range_num_stays_proportional_far_from_zero(self) -> None:
        day_ms = 86_400_000.0
        start = 1.7e12
        lo, hi = range_num(start, start + day_ms)
        self.assertLessEqual(lo, start - 0.1 * day_ms)
        self.assertGreaterEqual(hi, start + 1.1 * day_ms)
        self.assertLess(hi - lo, 2.0 * day_ms)
        self.assertGreater(lo, 0.0)

    def test_range_num_handles_flat_and_zero_data(self) -> None:
        lo, hi = range_num(5.0, 5.0)
        self.assertLess(lo, 5.0)
        self.assertGreater(hi, 5.0)
        self.assertEqual(range_num(0.0, 0.0, snap=False), (0.0, 0.1))

    def test_axis_scale_maps_and_inverts(self) -> None:
        scale = AxisScale(0.0, 10.0)
        self.assertEqual(scale.to_pixel(5.0, origin=100.0, length=200.0), 200.0)
        self.assertEqual(scale.to_pixel(10.0, origin=100.0, length=200.0, invert=True), 100.0)
        self.assertEqual(AxisScale(3.0, 3.0).to_pixel(3.0, origin=0.0, length=10.0), 5.0)

    def test_finite_extent_skips_nan(self) -> None:
        cols = [np.array([np.nan, 2.0, 4.0]), np.array([np.nan, -1.0, np.nan])]
        self.assertEqual(finite_extent(cols), (-1.0, 4.0))
        self.assertIsNone(finite_extent([np.array([np.nan])]))

    def test_nice_ticks_stay_inside_range(self) -> None:
        self.assertEqual(nice_ticks(0.0, 10.0, 6).tolist(), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])
        self.assertEqual(nice_ticks(0.45, 110.0, 6).tolist(), [50.0, 100.0])
        self.assertEqual(nice_ticks(-1.0, 1.0, 3).tolist(), [-1.0, 0.0, 1.0])

    def test_nice_number_rounds_to_one_two_five(self) -> None:
        self.assertEqual(nice_number(3.2, round_result=True), 5.0)
        self.assertEqual(nice_number(1.4, round_result=True), 1.0)
        self.assertEqual(nice_number(32.0, round_result=False), 50.0)
        self.assertEqual(nice_number(0.2, round_result=False), 0.2)

    def test_tick_text(self) -> None:
        self.assertEqual(format_ticks_for_axis(np.array([0.0, 0.5, 1.0])), ["0", "0.5", "1"])
        self.assertEqual(format_tick(3.0), "3")
        self.assertEqual(format_tick(-1e-12, step=0.1), "0")
        self.assertEqual(format_tick(2.5e7, step=1e6), "2.5000e+07")


if __name__ == "__main__":
    unittest.main()
