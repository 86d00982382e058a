from __future__ import annotations

import unittest

import numpy as np

from glyphplot.raster import blit, clear_outside, fill_polygons, new_canvas, split_dashes, stroke_polyline


RED = (255, 0, 0, 255)


class RasterPrimitiveTests(unittest.TestCase):
    def test_split_dashes_restarts_phase_per_path(self) -> None:
        pieces = split_dashes([(0.0, 0.0), (10.0, 0.0)], [3, 2])
        self.assertEqual(pieces, [[(0.0, 0.0), (3.0, 0.0)], [(5.0, 0.0), (8.0, 0.0)]])

    def test_split_dashes_carries_pattern_across_vertices(self) -> None:
        pieces = split_dashes([(0.0, 0.0), (2.0, 0.0), (2.0, 4.0)], [3, 1])
        self.assertEqual(pieces[0], [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0)])
        self.assertEqual(pieces[1][0], (2.0, 2.0))

    def test_invalid_dash_pattern_draws_solid(self) -> None:
        points = [(0.0, 0.0), (4.0, 0.0)]
        self.assertEqual(split_dashes(points, [0, 0]), [points])
        self.assertEqual(split_dashes(points, [-1, 2]), [points])

    def test_stroke_direction_does_not_change_pixels(self) -> None:
        forward = new_canvas(20, 20)
        backward = new_canvas(20, 20)
        stroke_polyline(forward, [(2.0, 3.0), (15.0, 11.0)], RED, width=2.0)
        stroke_polyline(backward, [(15.0, 11.0), (2.0, 3.0)], RED, width=2.0)
        self.assertTrue(np.array_equal(forward, backward))

    def test_round_cap_extends_past_endpoint(self) -> None:
        butt = new_canvas(20, 20)
        round_ = new_canvas(20, 20)
        stroke_polyline(butt, [(5.0, 10.0), (15.0, 10.0)], RED, width=4.0)
        stroke_polyline(round_, [(5.0, 10.0), (15.0, 10.0)], RED, width=4.0, cap="round")
        self.assertEqual(int(butt[10, 4, 3]), 0)
        self.assertEqual(int(round_[10, 4, 3]), 255)

    def test_fill_polygons_even_odd_leaves_hole(self) -> None:
        canvas = new_canvas(20, 20)
        outer = [(0.0, 0.0), (20.0, 0.0), (20.0, 20.0), (0.0, 20.0)]
        inner = [(5.0, 5.0), (15.0, 5.0), (15.0, 15.0), (5.0, 15.0)]
        fill_polygons(canvas, [outer, inner], RED)
        self.assertEqual(int(canvas[2, 2, 3]), 255)
        self.assertEqual(int(canvas[10, 10, 3]), 0)

    def test_clear_outside_then_blit(self) -> None:
        layer = new_canvas(10, 10, color=RED)
        clear_outside(layer, 2, 2, 8, 8)
        self.assertEqual(int(layer[1, 5, 3]), 0)
        self.assertEqual(int(layer[2, 2, 3]), 255)

        base = new_canvas(10, 10, color=(0, 0, 255, 255))
        blit(base, layer)
        self.assertEqual(tuple(int(v) for v in base[5, 5]), RED)
        self.assertEqual(tuple(int(v) for v in base[0, 0]), (0, 0, 255, 255))


if __name__ == "__main__":
    unittest.main()
