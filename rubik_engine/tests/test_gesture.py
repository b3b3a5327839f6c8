# rubik_engine/tests/test_gesture.py
import unittest

from rubik_engine.logic.gesture import (
    GestureTranslator,
    axis_of_vector,
    compute_face_basis,
    move_from_drag,
    sign_of_axis,
)
from rubik_engine.logic.moves import Move

FRONT = (0.0, 0.0, 1.0)


class TestFaceBasis(unittest.TestCase):
    def test_front(self):
        u, v = compute_face_basis(FRONT)
        self.assertEqual(u, (1.0, 0.0, 0.0))
        self.assertEqual(v, (0.0, 1.0, 0.0))

    def test_top_uses_right_fallback(self):
        u, v = compute_face_basis((0.0, 1.0, 0.0))
        self.assertEqual(u, (0.0, 0.0, 1.0))
        self.assertEqual(v, (1.0, 0.0, 0.0))

    def test_back_points_left(self):
        u, _ = compute_face_basis((0.0, 0.0, -1.0))
        self.assertEqual(u, (-1.0, 0.0, 0.0))


class TestMoveFromDrag(unittest.TestCase):
    def test_directions_on_front(self):
        self.assertEqual(move_from_drag(FRONT, (0.5, 0, 0)), Move("z", 1, True))
        self.assertEqual(move_from_drag(FRONT, (-0.5, 0, 0)), Move("z", 1, False))
        self.assertEqual(move_from_drag(FRONT, (0, -0.5, 0)), Move("z", 1, True))
        self.assertEqual(move_from_drag(FRONT, (0, 0.5, 0)), Move("z", 1, False))

    def test_short_drag_is_a_click(self):
        self.assertIsNone(move_from_drag(FRONT, (0.1, 0.05, 0)))

    def test_tie_goes_to_horizontal(self):
        self.assertEqual(move_from_drag(FRONT, (0.3, 0.3, 0)), Move("z", 1, True))

    def test_layer_comes_from_normal(self):
        m = move_from_drag((-1.0, 0.0, 0.0), (0, 0, 0.4))
        self.assertEqual((m.axis, m.sign), ("x", -1))


class TestAxisHelpers(unittest.TestCase):
    def test_ties_resolve_to_z(self):
        self.assertEqual(axis_of_vector((1, 1, 1)), "z")
        self.assertEqual(axis_of_vector((1, 1, 0)), "z")
        self.assertEqual(axis_of_vector((0.9, 0.1, 0)), "x")

    def test_zero_sign_is_positive(self):
        self.assertEqual(sign_of_axis((0, 0, 0), "x"), 1)
        self.assertEqual(sign_of_axis((0, -2, 0), "y"), -1)


class TestGestureTranslator(unittest.TestCase):
    def test_pick_then_release(self):
        g = GestureTranslator()
        info = g.pick((0.0, 1.0, 1.5), FRONT, cubelet_id=7)
        self.assertEqual((info.axis, info.sign, info.cubelet_id), ("z", 1, 7))
        self.assertTrue(g.dragging)
        self.assertEqual(g.release((0.5, 1.0, 1.5)), Move("z", 1, True))
        self.assertFalse(g.dragging)

    def test_release_without_pick(self):
        self.assertIsNone(GestureTranslator().release((1.0, 0.0, 0.0)))

    def test_cancel(self):
        g = GestureTranslator()
        g.pick((0.0, 0.0, 1.5), FRONT)
        g.cancel()
        self.assertIsNone(g.release((1.0, 0.0, 1.5)))

    def test_double_activate_is_half_turn(self):
        g = GestureTranslator()
        self.assertEqual(g.double_activate((0.0, -1.0, 0.0)), Move("y", -1, True, 2))

    def test_custom_threshold(self):
        g = GestureTranslator(threshold=1.0)
        g.pick((0.0, 0.0, 1.5), FRONT)
        self.assertIsNone(g.release((0.5, 0.0, 1.5)))


if __name__ == "__main__":
    unittest.main()
