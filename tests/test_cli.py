import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from seat_manifest.__main__ import main
from seat_manifest.manifest import generate_manifest
from seat_manifest.storage import save_json


def _run(argv):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        code = main(argv)
    return code, out.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_ids(self):
        code, out = _run(["ids", "--count", "3", "--prefix", "S"])
        self.assertEqual(code, 0)
        self.assertEqual(out.split(), ["S00", "S01", "S02"])

    def test_ids_grid(self):
        code, out = _run(["ids", "--count", "2", "--pattern", "grid", "--seats-per-row", "1"])
        self.assertEqual(code, 0)
        self.assertEqual(out.split(), ["000000", "000100"])

    def test_parse(self):
        code, out = _run(["parse", "ABCDEFGHIJKL"])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["section"], "ABCDEFG")

    def test_generate_then_diff(self):
        req = self.tmp / "req.json"
        save_json({"event_id": "E1", "layout_algorithm": "grid", "total_places": 20}, req)
        out_file = self.tmp / "out" / "result.json"

        code, _ = _run(["generate", "--input", str(req), "--output", str(out_file)])
        self.assertEqual(code, 0)
        data = json.loads(out_file.read_text(encoding="utf-8"))
        self.assertEqual(len(data["manifest"]["place_ids"]), 20)

        code, out = _run(["diff", str(out_file), str(out_file)])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"changed": False})

        other = self.tmp / "other.json"
        save_json(generate_manifest(["NEW"], update_time=1).model_dump(mode="json"), other)
        code, out = _run(["diff", str(out_file), str(other)])
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out)["added"], ["NEW"])

    def test_missing_file_is_error(self):
        code, out = _run(["generate", "--input", str(self.tmp / "nope.json")])
        self.assertEqual(code, 2)
        self.assertTrue(out.startswith("Error:"))

    def test_invalid_request_is_error(self):
        req = self.tmp / "bad.json"
        save_json({"total_places": 0}, req)
        code, out = _run(["generate", "--input", str(req)])
        self.assertEqual(code, 2)
        self.assertIn("total_places", out)


if __name__ == "__main__":
    unittest.main()
