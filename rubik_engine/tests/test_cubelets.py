# rubik_engine/tests/test_cubelets.py
import unittest

from rubik_engine.core.cubelets import CubeletRegistry, select_layer
from rubik_engine.core.rotations import IDENTITY


class TestCubeletRegistry(unittest.TestCase):
    def test_starts_solved(self):
        reg = CubeletRegistry()
        self.assertEqual(len(reg), 27)
        self.assertTrue(reg.is_solved())
        self.assertEqual(reg.check_invariants(), [])

    def test_homes_are_unique_and_one_core(self):
        reg = CubeletRegistry()
        homes = {c.home for c in reg.all()}
        self.assertEqual(len(homes), 27)
        self.assertEqual(sum(1 for c in reg if c.is_core), 1)
        self.assertEqual(reg.get(13).home, (0, 0, 0))

    def test_position_is_read_only(self):
        c = CubeletRegistry().get(0)
        with self.assertRaises(AttributeError):
            c.position = (0, 0, 0)  # type: ignore[misc]

    def test_visible_faces_by_kind(self):
        reg = CubeletRegistry()
        self.assertEqual(len(reg.at((1, 1, 1)).visible_faces()), 3)
        self.assertEqual(len(reg.at((1, 1, 0)).visible_faces()), 2)
        self.assertEqual(reg.at((0, 0, 1)).visible_faces(), [(0, 0, 1)])
        self.assertEqual(reg.at((0, 0, 0)).visible_faces(), [])

    def test_world_normal_at_rest(self):
        c = CubeletRegistry().at((1, 0, 0))
        self.assertEqual(c.orientation, IDENTITY)
        self.assertEqual(c.world_normal((1, 0, 0)), (1, 0, 0))

    def test_dispose_hook_runs_on_rebuild(self):
        reg = CubeletRegistry()
        calls = []
        reg.on_dispose(lambda cubelets: calls.append(len(cubelets)))
        reg.create_solved()
        reg.create_solved()
        self.assertEqual(calls, [27, 27])

    def test_detects_duplicate_positions(self):
        reg = CubeletRegistry()
        reg.get(0)._reseat((1, 1, 1), IDENTITY)
        self.assertTrue(reg.check_invariants())


class TestLayerSelector(unittest.TestCase):
    def test_outer_layers_have_nine(self):
        reg = CubeletRegistry()
        for axis in ("x", "y", "z"):
            for sign in (-1, 1):
                layer = select_layer(reg, axis, sign)
                self.assertEqual(len(layer), 9)
                idx = "xyz".index(axis)
                self.assertTrue(all(c.position[idx] == sign for c in layer))

    def test_middle_layer_contains_core(self):
        reg = CubeletRegistry()
        layer = select_layer(reg, "y", 0)
        self.assertEqual(len(layer), 9)
        self.assertTrue(any(c.is_core for c in layer))

    def test_excludes_off_lattice_cubelet(self):
        reg = CubeletRegistry()
        reg.get(0)._reseat((2, -1, -1), IDENTITY)
        with self.assertLogs("rubik_engine.core.cubelets", level="ERROR"):
            layer = select_layer(reg, "y", -1)
        self.assertNotIn(0, [c.id for c in layer])
        self.assertEqual(len(layer), 8)

    def test_excludes_cubelet_off_lattice_on_selected_axis(self):
        reg = CubeletRegistry()
        reg.get(0)._reseat((-1, 2, -1), IDENTITY)
        with self.assertLogs("rubik_engine.core.cubelets", level="ERROR"):
            for sign in (-1, 0, 1):
                self.assertNotIn(0, [c.id for c in select_layer(reg, "y", sign)])


if __name__ == "__main__":
    unittest.main()
