# rubik_engine/tests/test_moves.py
import unittest

from rubik_engine.logic.history import MoveHistory
from rubik_engine.logic.moves import Move, format_sequence, normalize_token, parse_move, parse_sequence
from rubik_engine.logic.scramble import generate_scramble


class TestMoves(unittest.TestCase):
    def test_parse_sequence(self):
        self.assertEqual(
            parse_sequence("R U' F2"),
            [Move("x", 1, True, 1), Move("y", 1, False, 1), Move("z", 1, True, 2)],
        )

    def test_opposite_faces_share_axis(self):
        self.assertEqual(parse_move("L"), Move("x", -1, True))
        self.assertEqual(parse_move("D'"), Move("y", -1, False))
        self.assertEqual(parse_move("B2"), Move("z", -1, True, 2))

    def test_normalize_token(self):
        self.assertEqual(normalize_token("D2'"), "D2")
        self.assertEqual(normalize_token(" r’ "), "R'")
        self.assertEqual(normalize_token(""), "")

    def test_invalid_tokens(self):
        with self.assertRaises(ValueError):
            parse_move("X")
        with self.assertRaises(ValueError):
            parse_move("R3")
        with self.assertRaises(ValueError):
            parse_move("  ")
        with self.assertRaises(ValueError):
            parse_sequence("R Q")

    def test_inverse(self):
        self.assertEqual(parse_move("R").inverse(), parse_move("R'"))
        self.assertEqual(parse_move("R'").inverse(), parse_move("R"))
        self.assertEqual(parse_move("R2").inverse().quarters, 2)
        self.assertEqual(parse_move("U").inverse().inverse(), parse_move("U"))

    def test_angle_convention(self):
        # Horario visto desde fuera = -90° alrededor de la normal exterior
        self.assertEqual(Move("z", 1, True).angle_deg(), -90.0)
        self.assertEqual(Move("z", -1, True).angle_deg(), 90.0)
        self.assertEqual(Move("x", 1, False, 2).angle_deg(), 180.0)

    def test_notation_roundtrip_text(self):
        text = "R U R' U' L2 D B' F"
        self.assertEqual(format_sequence(parse_sequence(text)), text)

    def test_validity(self):
        self.assertTrue(Move("y", -1, False, 2).is_valid())
        self.assertFalse(Move("y", 0, False).is_valid())
        self.assertFalse(Move("q", 1, False).is_valid())  # type: ignore[arg-type]


class TestScramble(unittest.TestCase):
    def test_default_length(self):
        seq = generate_scramble()
        self.assertEqual(len(seq), 20)
        self.assertTrue(all(m.is_valid() and m.quarters == 1 for m in seq))

    def test_seed_is_reproducible(self):
        self.assertEqual(generate_scramble(15, seed=3), generate_scramble(15, seed=3))

    def test_invalid_length(self):
        with self.assertRaises(ValueError):
            generate_scramble(0)


class TestMoveHistory(unittest.TestCase):
    def test_record_pop_clear(self):
        h = MoveHistory()
        h.record(Move("x", 1, True))
        h.record(Move("y", 1, False))
        self.assertEqual(len(h), 2)
        self.assertEqual(h.pop(), Move("y", 1, False))
        h.clear()
        self.assertIsNone(h.pop())

    def test_inverse_steps_pop_lazily(self):
        h = MoveHistory()
        for m in parse_sequence("R U F2"):
            h.record(m)
        steps = h.inverse_steps()
        self.assertEqual(len(h), 3)
        self.assertEqual(next(steps), (Move("z", 1, False, 2), False))
        self.assertEqual(len(h), 2)
        self.assertEqual([m.notation() for m, _ in steps], ["U'", "R'"])
        self.assertEqual(len(h), 0)


if __name__ == "__main__":
    unittest.main()
