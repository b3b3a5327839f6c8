# rubik_engine/tests/test_session.py
import unittest

from rubik_engine.core.errors import CubeConsistencyError
from rubik_engine.core.rotations import IDENTITY
from rubik_engine.core.session import CubeSession
from rubik_engine.logic.moves import Move


class TestSessionCommands(unittest.TestCase):
    def setUp(self):
        self.session = CubeSession(strict=True)

    def test_assemble_after_scramble_solves(self):
        done = []
        self.assertTrue(self.session.scramble(25, seed=1))
        self.assertEqual(len(self.session.history()), 25)
        self.assertTrue(self.session.assemble(on_done=lambda: done.append(True)))
        self.assertEqual(done, [True])
        self.assertTrue(self.session.is_solved())
        self.assertEqual(self.session.closeness(), 1.0)
        self.assertEqual(self.session.history(), ())
        self.assertEqual(self.session.mode(), "play")

    def test_single_move_scenario(self):
        self.assertTrue(self.session.reset())
        self.session.scramble(moves=[Move("x", 1, True, 1)])
        self.assertEqual(self.session.registry.at((1, 1, -1)).home, (1, 1, 1))
        self.assertTrue(self.session.assemble())
        self.assertTrue(self.session.is_solved())
        self.assertEqual(self.session.closeness(), 1.0)
        self.assertEqual(self.session.history(), ())

    def test_assemble_with_empty_history(self):
        self.assertFalse(self.session.assemble())
        self.assertTrue(self.session.is_solved())

    def test_scramble_clears_previous_history(self):
        self.session.request_turn(Move("y", 1, True))
        self.session.scramble(3, seed=5)
        self.assertEqual(len(self.session.history()), 3)

    def test_apply_sequence_and_undo(self):
        self.assertTrue(self.session.apply_sequence("R U R' U'"))
        self.assertEqual([m.notation() for m in self.session.history()], ["R", "U", "R'", "U'"])
        self.session.assemble()
        self.assertTrue(self.session.is_solved())

    def test_apply_sequence_rejects_bad_notation(self):
        with self.assertRaises(ValueError):
            self.session.apply_sequence("R Z")
        self.assertEqual(self.session.history(), ())
        self.assertFalse(self.session.apply_sequence("   "))

    def test_setup_counter(self):
        self.session.request_turn(Move("x", 1, True))
        self.assertTrue(self.session.start_setup())
        self.assertEqual(self.session.history(), ())
        self.session.turn_intent("x", 1, True)
        self.session.turn_intent("y", -1, False)
        self.assertEqual(self.session.setup_count(), 2)

        self.session.stop_setup()
        self.session.turn_intent("z", 1, True)
        self.assertEqual(self.session.setup_count(), 2)

        self.session.toggle_setup()
        self.assertEqual(self.session.mode(), "setup")
        self.assertEqual(self.session.setup_count(), 0)

    def test_reset(self):
        self.session.start_setup()
        self.session.apply_sequence("F B2 L")
        self.assertTrue(self.session.reset())
        self.assertTrue(self.session.is_solved())
        self.assertEqual(self.session.history(), ())
        self.assertEqual(self.session.setup_count(), 0)

    def test_reset_runs_dispose_hooks(self):
        disposed = []
        self.session.registry.on_dispose(lambda cubelets: disposed.append(len(cubelets)))
        self.session.reset()
        self.assertEqual(disposed, [27])

    def test_progress_follows_mode(self):
        self.session.turn_intent("x", 1, True)
        self.assertEqual(self.session.progress(), 0.0)
        self.session.play()
        self.assertAlmostEqual(self.session.progress(), 18 / 26)

    def test_invalid_intent(self):
        self.assertFalse(self.session.turn_intent("x", 0, True))
        self.assertFalse(self.session.turn_intent("x", 1, True, 3))
        self.assertEqual(self.session.history(), ())


class TestSessionGestures(unittest.TestCase):
    def test_drag_on_front_face(self):
        session = CubeSession(strict=True)
        self.assertTrue(session.pick((0.0, 1.0, 1.5), (0.0, 0.0, 1.0)))
        self.assertEqual(session.release((0.5, 1.0, 1.5)), Move("z", 1, True, 1))
        self.assertEqual(session.history(), (Move("z", 1, True, 1),))

    def test_click_is_not_a_turn(self):
        session = CubeSession(strict=True)
        session.pick((0.0, 1.0, 1.5), (0.0, 0.0, 1.0))
        self.assertIsNone(session.release((0.05, 1.0, 1.5)))
        self.assertTrue(session.is_solved())

    def test_double_activate(self):
        session = CubeSession(strict=True)
        self.assertEqual(session.double_activate((1.0, 0.0, 0.0)), Move("x", 1, True, 2))
        self.assertEqual(session.registry.at((1, -1, -1)).home, (1, 1, 1))


class TestAnimatedSession(unittest.TestCase):
    def test_turns_wait_for_the_animator(self):
        pendings = []
        session = CubeSession(strict=True, animator=pendings.append)
        done = []
        session.scramble(moves=[Move("x", 1, True), Move("y", 1, True), Move("z", 1, True)],
                         on_done=lambda: done.append(True))

        self.assertEqual(len(pendings), 1)
        self.assertTrue(session.is_turning())
        self.assertTrue(session.is_solved())
        self.assertFalse(session.turn_intent("z", -1, True))
        self.assertFalse(session.pick((0.0, 0.0, 1.5), (0.0, 0.0, 1.0)))
        self.assertIsNone(session.double_activate((0.0, 0.0, 1.0)))
        self.assertFalse(session.reset())

        session.finish_turn()
        self.assertEqual(len(pendings), 2)
        session.finish_turn()
        session.finish_turn()
        self.assertEqual([p.move.axis for p in pendings], ["x", "y", "z"])
        self.assertEqual(done, [True])
        self.assertFalse(session.is_busy())
        self.assertEqual(len(session.history()), 3)

    def test_fault_during_animation_releases_the_session(self):
        pendings = []
        session = CubeSession(strict=True, animator=pendings.append)
        session.scramble(moves=[Move("x", 1, True), Move("y", 1, True)])
        self.assertTrue(session.is_busy())

        session.registry.get(13)._reseat((1, 0, 0), IDENTITY)
        with self.assertRaises(CubeConsistencyError):
            session.finish_turn()

        self.assertEqual(len(pendings), 1)
        self.assertFalse(session.is_turning())
        self.assertFalse(session.is_busy())
        self.assertTrue(session.reset())
        self.assertTrue(session.is_solved())
        self.assertTrue(session.turn_intent("y", 1, True))

    def test_synchronous_animator(self):
        session = CubeSession(strict=True)
        session.set_animator(lambda pending: session.finish_turn())
        session.scramble(200, seed=9)
        self.assertEqual(len(session.history()), 200)
        self.assertTrue(session.assemble())
        self.assertTrue(session.is_solved())

    def test_listeners_see_every_turn(self):
        session = CubeSession(strict=True)
        seen = []
        session.add_turn_listener(lambda move, record: seen.append(record))
        session.scramble(4, seed=2)
        session.assemble()
        self.assertEqual(seen, [True] * 4 + [False] * 4)


if __name__ == "__main__":
    unittest.main()
