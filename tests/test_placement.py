import unittest

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.items import build_items
from app.fluidgrid.layout.justified import JustifiedPlacement, Row, layout_justified, place_rows


class TestPlaceRows(unittest.TestCase):
    def setUp(self):
        self.rows = [
            Row(item_indices=(0, 1), height=100, ratio=0.5, item_widths=(200, 300)),
            Row(item_indices=(2,), height=80, ratio=0.4, item_widths=(150,), is_orphan=True),
        ]

    def test_positions_advance_by_gutter(self):
        placements, total = place_rows(self.rows, gutter_px=10)

        self.assertEqual(
            placements,
            [
                JustifiedPlacement(index=0, row=0, x=0, y=0, width=200, height=100),
                JustifiedPlacement(index=1, row=0, x=210, y=0, width=300, height=100),
                JustifiedPlacement(index=2, row=1, x=0, y=110, width=150, height=80),
            ],
        )
        self.assertEqual(total, 190)

    def test_separate_row_gap(self):
        placements, total = place_rows(self.rows, gutter_px=10, row_gap_px=0)
        self.assertEqual(placements[2].y, 100)
        self.assertEqual(total, 180)

    def test_no_rows(self):
        self.assertEqual(place_rows([], gutter_px=10), ([], 0))

    def test_invalid_gaps(self):
        with self.assertRaises(InvalidArgument):
            place_rows(self.rows, gutter_px=-1)
        with self.assertRaises(InvalidArgument):
            place_rows(self.rows, gutter_px=0, row_gap_px=-1)


class TestLayoutJustified(unittest.TestCase):
    def test_rows_and_placements_agree(self):
        items = build_items([(400, 250)] * 3 + [(100, 250)], row_height_px=250)
        rows, placements, total = layout_justified(
            items, container_width_px=1000, row_height_px=250, gutter_px=0
        )

        self.assertEqual([r.item_indices for r in rows], [(0, 1, 2), (3,)])
        self.assertEqual([p.height for p in placements], [208, 208, 208, 208])
        self.assertEqual([p.x for p in placements[:3]], [0, 332, 664])
        self.assertEqual(placements[3].y, 208)
        self.assertEqual(total, 416)


if __name__ == "__main__":
    unittest.main()
