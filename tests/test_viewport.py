from __future__ import annotations

import unittest

from _support import make_node

from mdradial.config import ViewportConfig
from mdradial.viewport import Bounds, ViewportController, ViewportMode, content_bounds


class ZoomTests(unittest.TestCase):
    def test_initial_state(self) -> None:
        viewport = ViewportController()
        self.assertEqual((viewport.scale, viewport.pan_x, viewport.pan_y), (1.0, 0.0, 0.0))
        self.assertIs(viewport.mode, ViewportMode.IDLE)

    def test_zoom_in_and_out_by_fixed_factor(self) -> None:
        viewport = ViewportController()
        self.assertAlmostEqual(viewport.zoom_in(), 1.2)
        self.assertAlmostEqual(viewport.zoom_out(), 1.0)
        self.assertAlmostEqual(viewport.zoom_out(), 1 / 1.2)

    def test_repeated_zoom_converges_to_bounds(self) -> None:
        viewport = ViewportController()
        for _ in range(50):
            viewport.zoom_in()
        self.assertEqual(viewport.scale, 3.0)
        viewport.zoom_in()
        self.assertEqual(viewport.scale, 3.0)

        for _ in range(100):
            viewport.zoom_out()
        self.assertEqual(viewport.scale, 0.1)
        viewport.zoom_out()
        self.assertEqual(viewport.scale, 0.1)

    def test_custom_bounds(self) -> None:
        viewport = ViewportController(ViewportConfig(min_scale=0.5, max_scale=2.0))
        for _ in range(10):
            viewport.zoom_in()
        self.assertEqual(viewport.scale, 2.0)

    def test_wheel_direction_follows_delta_sign(self) -> None:
        viewport = ViewportController()
        self.assertAlmostEqual(viewport.wheel(120), 0.9)
        viewport.reset_view()
        self.assertAlmostEqual(viewport.wheel(-3), 1.1)
        self.assertAlmostEqual(viewport.wheel(0), 1.1)
        for _ in range(200):
            viewport.wheel(-1)
        self.assertEqual(viewport.scale, 3.0)


class PanTests(unittest.TestCase):
    def test_pan_requires_panning_state(self) -> None:
        viewport = ViewportController()
        self.assertFalse(viewport.pan_by(10, 10))
        self.assertFalse(viewport.move_pointer(5, 5))
        self.assertEqual((viewport.pan_x, viewport.pan_y), (0.0, 0.0))

    def test_pan_divides_screen_delta_by_scale(self) -> None:
        viewport = ViewportController()
        viewport.scale = 2.0
        viewport.begin_pan(10, 10)
        self.assertIs(viewport.mode, ViewportMode.PANNING)
        self.assertTrue(viewport.move_pointer(30, 50))
        self.assertAlmostEqual(viewport.pan_x, 10.0)
        self.assertAlmostEqual(viewport.pan_y, 20.0)
        self.assertTrue(viewport.pan_by(-4, 4))
        self.assertAlmostEqual(viewport.pan_x, 8.0)
        self.assertAlmostEqual(viewport.pan_y, 22.0)

        viewport.end_pan()
        self.assertIs(viewport.mode, ViewportMode.IDLE)
        self.assertFalse(viewport.move_pointer(100, 100))
        self.assertAlmostEqual(viewport.pan_x, 8.0)

    def test_pointer_deltas_are_relative_to_last_position(self) -> None:
        viewport = ViewportController()
        viewport.begin_pan(0, 0)
        viewport.move_pointer(10, 0)
        viewport.move_pointer(15, 0)
        self.assertAlmostEqual(viewport.pan_x, 15.0)


class FitTests(unittest.TestCase):
    def test_single_node_is_centered(self) -> None:
        viewport = ViewportController()
        self.assertTrue(viewport.fit_to_content([make_node("a", 500, 500)], (1000, 800)))
        screen_x, screen_y = viewport.world_to_screen(500, 500)
        self.assertAlmostEqual(screen_x, 500.0)
        self.assertAlmostEqual(screen_y, 400.0)
        # box is 100 + 2*144 wide and 100 + 2*48 high
        self.assertAlmostEqual(viewport.scale, min(1000 / 388, 800 / 196, 3.0) * 0.95)

    def test_fit_keeps_all_nodes_visible(self) -> None:
        nodes = [make_node("a", -400, 0), make_node("b", 900, 300), make_node("c", 100, -700, 200, 60)]
        viewport = ViewportController()
        viewport.fit_to_content(nodes, (1200, 800))
        for node in nodes:
            left, top, right, bottom = node.rect
            for x, y in ((left, top), (right, bottom)):
                sx, sy = viewport.world_to_screen(x, y)
                self.assertTrue(0 <= sx <= 1200)
                self.assertTrue(0 <= sy <= 800)

    def test_fit_clamps_scale(self) -> None:
        viewport = ViewportController()
        viewport.fit_to_content([make_node("far", 0, 0), make_node("away", 100000, 0)], (800, 600))
        self.assertEqual(viewport.scale, 0.1)
        viewport.fit_to_content([make_node("tiny", 0, 0, 1, 1)], (100000, 100000))
        self.assertEqual(viewport.scale, 3.0 * 0.95)

    def test_fit_with_no_nodes_is_a_no_op(self) -> None:
        viewport = ViewportController()
        viewport.zoom_in()
        self.assertFalse(viewport.fit_to_content([], (800, 600)))
        self.assertAlmostEqual(viewport.scale, 1.2)
        self.assertFalse(viewport.fit_to_content([make_node("a", 0, 0)], (0, 600)))

    def test_reset_view_is_unconditional(self) -> None:
        viewport = ViewportController()
        viewport.fit_to_content([make_node("a", 500, 500)], (1000, 800))
        viewport.reset_view()
        self.assertEqual(viewport.state.to_dict(), {"scale": 1.0, "panX": 0.0, "panY": 0.0})


class TransformTests(unittest.TestCase):
    def test_transform_string(self) -> None:
        viewport = ViewportController()
        self.assertEqual(viewport.transform(), "translate(0, 0) scale(1)")
        viewport.zoom_in()
        viewport.begin_pan(0, 0)
        viewport.pan_by(12, -6)
        self.assertEqual(viewport.transform(), "translate(10, -5) scale(1.2)")

    def test_screen_world_round_trip(self) -> None:
        viewport = ViewportController()
        viewport.fit_to_content([make_node("a", 250, -75)], (640, 480))
        wx, wy = viewport.screen_to_world(*viewport.world_to_screen(123.0, -45.5))
        self.assertAlmostEqual(wx, 123.0)
        self.assertAlmostEqual(wy, -45.5)


class BoundsTests(unittest.TestCase):
    def test_content_bounds(self) -> None:
        self.assertIsNone(content_bounds([]))
        bounds = content_bounds([make_node("a", 0, 0, 20, 10), make_node("b", 100, 50, 40, 40)])
        self.assertEqual(bounds, Bounds(-10.0, -5.0, 120.0, 70.0))
        self.assertEqual(bounds.width, 130.0)
        self.assertEqual(bounds.center, (55.0, 32.5))


if __name__ == "__main__":
    unittest.main()
