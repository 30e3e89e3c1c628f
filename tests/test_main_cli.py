import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from PIL import Image

from app.fluidgrid.layout.settings import GridSettings
from app.fluidgrid.main import format_rows, main, run_layout


class TestMainCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.sizes = self.tmp / "sizes.json"
        self.sizes.write_text(
            json.dumps([{"width": 400, "height": 250}] * 3 + [{"width": 0, "height": 10}]),
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            main(list(argv))
        return out.getvalue()

    def test_text_output(self) -> None:
        lines = self._run("--sizes", str(self.sizes), "--width", "1000").splitlines()
        self.assertEqual(lines[0], "Items: 3  Rows: 1  Height: 208px")
        self.assertEqual(lines[1], "row 0: items 0-2 height 208 ratio 0.833 widths [332, 332, 332]")

    def test_json_output(self) -> None:
        doc = json.loads(self._run("--sizes", str(self.sizes), "--width", "1000", "--gutter", "0", "--json"))
        self.assertEqual(doc["total_height"], 208)
        self.assertEqual(len(doc["rows"]), 1)
        self.assertEqual(doc["rows"][0]["item_widths"], [332, 332, 332])
        self.assertEqual([p["x"] for p in doc["placements"]], [0, 332, 664])

    def test_folder_input(self) -> None:
        folder = self.tmp / "pics"
        folder.mkdir()
        Image.new("RGB", (200, 100)).save(folder / "wide.png")
        Image.new("RGB", (100, 200)).save(folder / "tall.png")

        doc = json.loads(self._run(str(folder), "--width", "2000", "--row-height", "100", "--json"))
        keys = [Path(p["key"]).name for p in doc["placements"]]
        self.assertEqual(keys, ["tall.png", "wide.png"])
        self.assertTrue(doc["rows"][0]["is_orphan"])
        self.assertEqual(doc["rows"][0]["height"], 100)

    def test_invalid_arguments_exit(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            with self.assertRaises(SystemExit):
                main(["--sizes", str(self.sizes), "--width", "0"])
            with self.assertRaises(SystemExit):
                main([str(self.tmp), "--sizes", str(self.sizes), "--width", "100"])
            with self.assertRaises(SystemExit):
                main(["--width", "100"])

    def test_unreadable_sizes_files_exit(self) -> None:
        not_utf8 = self.tmp / "latin1.json"
        not_utf8.write_bytes(b'[{"width": 400, "height": 250, "key": "caf\xe9"}]')
        not_json = self.tmp / "broken.json"
        not_json.write_text("[{width: 400", encoding="utf-8")
        not_list = self.tmp / "object.json"
        not_list.write_text('{"width": 400, "height": 250}', encoding="utf-8")

        for path in (not_utf8, not_json, not_list, self.tmp / "missing.json"):
            with self.subTest(path=path.name):
                err = io.StringIO()
                with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
                    main(["--sizes", str(path), "--width", "1000"])
                self.assertEqual(ctx.exception.code, 2)
                self.assertIn("error:", err.getvalue())

    def test_run_layout_and_format_rows(self) -> None:
        result = run_layout(
            [(600, 250), (600, 250), (200, 250)],
            container_width_px=1000,
            settings=GridSettings(orphan_policy="last"),
        )
        self.assertEqual(len(result["items"]), 3)
        lines = format_rows(result["rows"])
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].startswith("row 1: items 2-2 height 208 "))
        self.assertIn("(orphan)", lines[1])


if __name__ == "__main__":
    unittest.main()
