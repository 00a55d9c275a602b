import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from main import main

PUZZLE = {
    "row_targets": [1, 0, 1],
    "col_targets": [1, 0, 1],
    "grid": ["...", "T.T", "..."],
}


class MainTests(unittest.TestCase):
    def run_main(self, payload, *extra):
        with tempfile.TemporaryDirectory() as tmpdir:
            puzzle = Path(tmpdir) / "puzzle.json"
            puzzle.write_text(json.dumps(payload), encoding="utf-8")
            out, err = io.StringIO(), io.StringIO()
            with redirect_stdout(out), redirect_stderr(err):
                code = main([str(puzzle), "--log-level", "ERROR", *extra])
        return code, out.getvalue(), err.getvalue()

    def test_solve_prints_json(self) -> None:
        code, out, err = self.run_main(PUZZLE, "--trace")
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload["status"], "SOLVED")
        self.assertEqual(payload["validation"], [])
        self.assertIn("BRANCH", err)
        self.assertIn("--- Solve ---", err)

    def test_hint(self) -> None:
        code, out, _ = self.run_main(PUZZLE, "--hint")
        self.assertEqual(code, 0)
        self.assertIn("row 2, column 0", out)

    def test_unsolvable_exit_code(self) -> None:
        payload = {"row_targets": [1, 0, 1], "col_targets": [2, 0, 0], "grid": ["...", "T.T", "..."]}
        code, out, _ = self.run_main(payload)
        self.assertEqual(code, 2)
        self.assertEqual(json.loads(out)["status"], "INVALID")

    def test_strict_validation_failure_exit_code(self) -> None:
        # The trees at (0, 0) and (0, 2) can only share the tent at (0, 1).
        payload = {
            "row_targets": [1, 0, 1, 0, 1],
            "col_targets": [0, 1, 0, 2, 0],
            "grid": ["T.T..", ".....", ".....", "...T.", "....."],
        }
        code, out, _ = self.run_main(payload)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["validation"], [])

        code, out, _ = self.run_main(payload, "--strict")
        self.assertEqual(code, 2)
        result = json.loads(out)
        self.assertEqual(result["status"], "SOLVED")
        self.assertEqual(len(result["validation"]), 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
