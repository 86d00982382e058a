from __future__ import annotations

import math
import unittest

from glyphplot.geometry import SlotParams, neighbor_distance, resolve_slot


class GeometryResolverTests(unittest.TestCase):
    def test_interior_index_uses_nearest_neighbor(self) -> None:
        geom = resolve_slot([0.0, 10.0, 30.0, 60.0], 1, gap=2.0)
        self.assertEqual(geom.slot_width, 8.0)
        self.assertEqual(geom.left, 6.0)
        self.assertEqual(geom.center, 10.0)

    def test_boundary_indices_use_their_only_neighbor(self) -> None:
        xs = [0.0, 10.0, 30.0, 60.0]
        self.assertEqual(resolve_slot(xs, 0, gap=2.0).slot_width, 8.0)
        self.assertEqual(resolve_slot(xs, 3, gap=2.0).slot_width, 28.0)

    def test_align_to_tick_puts_left_edge_on_pixel(self) -> None:
        geom = resolve_slot([0.0, 10.0, 20.0], 1, gap=2.0, align_to_tick=True)
        self.assertEqual(geom.left, 10.0)
        self.assertEqual(geom.center, 14.0)

    def test_width_factor_shrinks_slot(self) -> None:
        geom = resolve_slot([0.0, 20.0, 40.0], 1, gap=4.0, width_factor=0.5)
        self.assertEqual(geom.slot_width, 8.0)
        self.assertEqual(geom.left, 16.0)

    def test_single_point_fills_plot_minus_two_gaps(self) -> None:
        geom = resolve_slot([400.0], 0, gap=4.0, plot_width=800.0)
        self.assertEqual(geom.slot_width, 800.0 - 2 * 4.0)
        self.assertEqual(geom.center, 400.0)

    def test_single_point_without_plot_width_gets_one_pixel(self) -> None:
        self.assertTrue(math.isnan(neighbor_distance([5.0], 0, gap=2.0, plot_width=None)))
        geom = resolve_slot([5.0], 0, gap=2.0)
        self.assertEqual(geom.slot_width, 1.0)
        self.assertEqual(geom.center, 5.0)

    def test_width_is_floored_to_one_pixel(self) -> None:
        self.assertEqual(resolve_slot([0.0, 1.0], 0, gap=2.0).slot_width, 1.0)
        self.assertEqual(resolve_slot([0.0, 0.0, 0.0], 1, gap=0.0).slot_width, 1.0)
        self.assertEqual(resolve_slot([0.0, math.nan], 0, gap=2.0).slot_width, 1.0)

    def test_non_finite_spacing_falls_back_to_plot_share(self) -> None:
        self.assertEqual(neighbor_distance([math.nan, 5.0], 1, gap=2.0, plot_width=100.0), 50.0)

    def test_resolution_is_independent_of_call_order(self) -> None:
        xs = [3.0, 11.0, 12.5, 40.0, 41.0, 90.0]
        forward = [resolve_slot(xs, i, gap=1.5, width_factor=0.8) for i in range(len(xs))]
        backward = [resolve_slot(xs, i, gap=1.5, width_factor=0.8) for i in reversed(range(len(xs)))]
        self.assertEqual(forward, list(reversed(backward)))
        self.assertTrue(all(g.slot_width >= 1.0 for g in forward))

    def test_slot_params_forward_to_resolver(self) -> None:
        params = SlotParams(gap=2.0, width_factor=0.5, align_to_tick=True, plot_width=100.0)
        self.assertEqual(params.resolve([50.0], 0), resolve_slot([50.0], 0, gap=2.0, width_factor=0.5, align_to_tick=True, plot_width=100.0))

    def test_empty_sequence_is_rejected(self) -> None:
        with self.assertRaises(IndexError):
            resolve_slot([], 0)


if __name__ == "__main__":
    unittest.main()
