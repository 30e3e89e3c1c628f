from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.items import build_items
from app.fluidgrid.layout.justified import ORPHAN_POLICIES, JustifiedPlacement, Row, layout_justified
from app.fluidgrid.layout.settings import GridSettings
from app.fluidgrid.utils.media_scan import collect_records, scan_image_paths


def load_sizes_file(path: str | Path) -> list[Any]:
    """Load raw ``{width, height}`` records from a JSON list."""

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise InvalidArgument(f"{path}: expected a JSON list of {{width, height}} records")
    return data


def run_layout(
    records: Iterable[Any],
    *,
    container_width_px: float,
    settings: GridSettings,
) -> dict:
    items = build_items(
        records,
        row_height_px=settings.row_height_px,
        width_key=settings.width_key,
        height_key=settings.height_key,
    )
    rows, placements, total = layout_justified(
        items,
        container_width_px=container_width_px,
        row_height_px=settings.row_height_px,
        gutter_px=settings.gutter_px,
        orphan_height=settings.orphan_height,
        width_fudge_px=settings.width_fudge_px,
    )
    return {"items": items, "rows": rows, "placements": placements, "total_height": total}


def format_rows(rows: Sequence[Row]) -> list[str]:
    lines = []
    for n, row in enumerate(rows):
        first, last = row.item_indices[0], row.item_indices[-1]
        tag = " (orphan)" if row.is_orphan else ""
        lines.append(
            f"row {n}: items {first}-{last} height {row.height} ratio {row.ratio:.3f}{tag} "
            f"widths {list(row.item_widths)}"
        )
    return lines


def _as_json(result: dict) -> str:
    def placement(p: JustifiedPlacement) -> dict:
        return {
            "key": result["items"][p.index].key,
            "index": p.index,
            "row": p.row,
            "x": p.x,
            "y": p.y,
            "width": p.width,
            "height": p.height,
        }

    doc = {
        "total_height": result["total_height"],
        "rows": [
            {
                "item_indices": list(r.item_indices),
                "height": r.height,
                "ratio": r.ratio,
                "item_widths": list(r.item_widths),
                "is_orphan": r.is_orphan,
            }
            for r in result["rows"]
        ],
        "placements": [placement(p) for p in result["placements"]],
    }
    return json.dumps(doc, indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a justified (fluid row) image layout")
    parser.add_argument("folder", nargs="?", help="Folder of images to lay out")
    parser.add_argument("--sizes", help="JSON file with a list of {width, height} records")
    parser.add_argument("--width", type=float, required=True, help="Container width in px")
    parser.add_argument("--row-height", type=int, default=GridSettings.row_height_px, help="Nominal row height in px")
    parser.add_argument("--gutter", type=int, default=GridSettings.gutter_px, help="Gutter reserved per item in px")
    parser.add_argument(
        "--orphan-policy",
        choices=sorted(ORPHAN_POLICIES),
        default=GridSettings.orphan_policy,
        help="Height policy for a short final row",
    )
    parser.add_argument("--json", action="store_true", help="Print rows and placements as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if bool(args.folder) == bool(args.sizes):
        parser.error("give either an image folder or --sizes, not both")

    try:
        settings = GridSettings(
            row_height_px=args.row_height,
            gutter_px=args.gutter,
            orphan_policy=args.orphan_policy,
        )
        if args.sizes:
            records: Iterable[Any] = load_sizes_file(args.sizes)
        else:
            records = collect_records(scan_image_paths(args.folder))
        result = run_layout(records, container_width_px=args.width, settings=settings)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))

    if args.json:
        print(_as_json(result))
        return

    print(f"Items: {len(result['items'])}  Rows: {len(result['rows'])}  Height: {result['total_height']}px")
    for line in format_rows(result["rows"]):
        print(line)


if __name__ == "__main__":
    main()
