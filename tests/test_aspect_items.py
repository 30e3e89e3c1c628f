import unittest

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.items import AspectItem, build_items, renormalize


class TestBuildItems(unittest.TestCase):
    def test_normalized_width_scales_to_row_height(self):
        items = build_items([{"width": 800, "height": 600}, (400, 200)], row_height_px=250)

        self.assertEqual(len(items), 2)
        self.assertAlmostEqual(items[0].normalized_width, 800 * 250 / 600)
        self.assertEqual(items[1].normalized_width, 500)
        self.assertEqual((items[1].width, items[1].height), (400, 200))

    def test_unusable_entries_are_skipped_in_order(self):
        raw = [
            {"key": "a", "width": "800", "height": " 600 "},
            {"key": "b", "width": None, "height": 5},
            {"key": "c", "width": "abc", "height": 5},
            {"key": "d", "width": 0, "height": 5},
            {"key": "e", "width": -3, "height": 5},
            {"key": "f", "width": 10},
            {"key": "g", "width": True, "height": 5},
            {"key": "h", "width": float("nan"), "height": 3},
            {"key": "i", "width": float("inf"), "height": 3},
            "not a record",
            "12",
            b"34",
            {"key": "j", "width": 30, "height": 10},
        ]
        items = build_items(raw, row_height_px=100)

        self.assertEqual([i.key for i in items], ["a", "j"])
        self.assertEqual(items[1].normalized_width, 300)

    def test_empty_input(self):
        self.assertEqual(build_items([], row_height_px=250), [])

    def test_custom_dimension_keys(self):
        raw = [{"data-fld-width": "640", "data-fld-height": "480", "key": 7}]
        items = build_items(
            raw, row_height_px=240, width_key="data-fld-width", height_key="data-fld-height"
        )
        self.assertEqual(items, [AspectItem(width=640.0, height=480.0, normalized_width=320.0, key="7")])

    def test_invalid_row_height(self):
        with self.assertRaises(InvalidArgument):
            build_items([(1, 1)], row_height_px=0)
        with self.assertRaises(InvalidArgument):
            build_items([(1, 1)], row_height_px=-10)

    def test_renormalize(self):
        items = build_items([(300, 150), (100, 100)], row_height_px=200)
        halved = renormalize(items, 100)

        self.assertEqual([i.normalized_width for i in halved], [200, 100])
        self.assertEqual([i.normalized_width for i in items], [400, 200])
        with self.assertRaises(InvalidArgument):
            renormalize(items, 0)


if __name__ == "__main__":
    unittest.main()
