# rubik_engine/tests/test_layout.py
import unittest
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class TestModuleHeaders(unittest.TestCase):
    def test_every_module_starts_with_its_path(self):
        root = PACKAGE_DIR.parent
        for path in sorted(PACKAGE_DIR.rglob("*.py")):
            rel = path.relative_to(root).as_posix()
            first = path.read_text(encoding="utf-8").splitlines()[0]
            self.assertEqual(first, f"# {rel}", rel)


if __name__ == "__main__":
    unittest.main()
