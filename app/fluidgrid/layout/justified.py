"""Justified (fluid row) layout helpers.

This module is intentionally UI-framework agnostic.

Goal: given a *known* container width and items with a known aspect ratio,
split the items into rows that fill the container width at a shared row
height. Rows are only ever shrunk below the nominal row height, never
stretched above it; a short final row ("orphan") gets its height from a
pluggable policy instead.

UI layers (web/Qt) apply the resulting widths/heights to their own widgets.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.items import AspectItem

logger = logging.getLogger(__name__)

# (height_avg, heights of the rows closed so far) -> orphan row height
OrphanHeightPolicy = Callable[[float, Tuple[float, ...]], float]


@dataclass(frozen=True)
class Row:
    item_indices: Tuple[int, ...]
    height: float
    ratio: float
    item_widths: Tuple[int, ...]
    is_orphan: bool = False


@dataclass(frozen=True)
class JustifiedPlacement:
    index: int
    row: int
    x: int
    y: int
    width: int
    height: int


def _round_half_up(value: float) -> int:
    # round() would send halves to the even neighbour (198.5 -> 198).
    return math.floor(value + 0.5)


def average_orphan_height(height_avg: float, heights: Tuple[float, ...]) -> float:
    """Give orphans the average height of the rows above them.

    Without rows above, ``height_avg`` is the nominal row height and is used as is.
    """

    return _round_half_up(height_avg) if heights else height_avg


def last_row_orphan_height(height_avg: float, heights: Tuple[float, ...]) -> float:
    return heights[-1] if heights else height_avg


def tallest_orphan_height(height_avg: float, heights: Tuple[float, ...]) -> float:
    return max(heights) if heights else height_avg


def shortest_orphan_height(height_avg: float, heights: Tuple[float, ...]) -> float:
    return min(heights) if heights else height_avg


ORPHAN_POLICIES: Dict[str, OrphanHeightPolicy] = {
    "average": average_orphan_height,
    "last": last_row_orphan_height,
    "tallest": tallest_orphan_height,
    "shortest": shortest_orphan_height,
}


def orphan_policy(name: str) -> OrphanHeightPolicy:
    try:
        return ORPHAN_POLICIES[name]
    except KeyError:
        choices = ", ".join(sorted(ORPHAN_POLICIES))
        raise InvalidArgument(f"unknown orphan policy {name!r} (expected one of: {choices})") from None


def _require_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidArgument(f"{name} must be a finite number")


def _check_params(
    container_width_px: float,
    row_height_px: float,
    gutter_px: float,
    width_fudge_px: int,
) -> None:
    _require_finite("container_width_px", container_width_px)
    _require_finite("row_height_px", row_height_px)
    _require_finite("gutter_px", gutter_px)
    if container_width_px <= 0:
        raise InvalidArgument("container_width_px must be > 0")
    if row_height_px <= 0:
        raise InvalidArgument("row_height_px must be > 0")
    if gutter_px < 0:
        raise InvalidArgument("gutter_px must be >= 0")
    if width_fudge_px < 0:
        raise InvalidArgument("width_fudge_px must be >= 0")


def _resolve_orphan_height(
    policy: OrphanHeightPolicy,
    heights: List[float],
    row_height_px: float,
) -> float:
    # With no rows above the orphan the average is undefined; use the nominal height.
    height_avg = sum(heights) / len(heights) if heights else row_height_px
    height = policy(height_avg, tuple(heights))
    if isinstance(height, bool) or not isinstance(height, (int, float)):
        raise InvalidArgument("orphan height policy must return a number")
    if not math.isfinite(height) or height <= 0:
        raise InvalidArgument(f"orphan height policy returned {height!r}; expected > 0")
    return height


def pack_rows(
    items: Sequence[AspectItem],
    *,
    container_width_px: float,
    row_height_px: float,
    gutter_px: float = 0,
    orphan_height: OrphanHeightPolicy = average_orphan_height,
    width_fudge_px: int = 1,
) -> List[Row]:
    """Partition items into justified rows.

    Algorithm: single greedy pass. Items are added to the current row until
    its normalized width plus one gutter per item reaches the container
    width, or the items run out. A closed row is shrunk so its content fits
    the width left after gutters (never stretched above ``row_height_px``).
    The final row is an orphan when its content is narrower than that width;
    its height comes from ``orphan_height``.

    Every resolved item width is reduced by ``width_fudge_px`` to keep
    rounded rows from overflowing the container.
    """

    _check_params(container_width_px, row_height_px, gutter_px, width_fudge_px)

    rows: List[Row] = []
    heights: List[float] = []
    count = len(items)

    row_first = 0
    row_width = 0.0
    row_gutter_width = 0.0

    for i, item in enumerate(items):
        if not math.isfinite(item.normalized_width) or item.normalized_width <= 0:
            raise InvalidArgument(f"item {i} has no usable normalized width")

        row_width += item.normalized_width
        row_gutter_width += gutter_px
        is_last = i == count - 1

        if row_width + row_gutter_width < container_width_px and not is_last:
            continue

        # Gutters have a fixed size regardless of row height, so keep them out of the ratio.
        row_max_width = container_width_px - row_gutter_width
        if row_max_width <= 0:
            raise InvalidArgument(
                f"gutter_px={gutter_px} leaves no room for items in a {container_width_px}px container"
            )

        is_orphan = is_last and row_max_width / row_width > 1
        if is_orphan:
            height = _resolve_orphan_height(orphan_height, heights, row_height_px)
            ratio = height / row_height_px
        else:
            ratio = min(row_max_width / row_width, 1)
            height = max(1, math.floor(ratio * row_height_px))

        widths = tuple(
            max(1, math.floor(ratio * items[x].normalized_width) - width_fudge_px)
            for x in range(row_first, i + 1)
        )
        rows.append(
            Row(
                item_indices=tuple(range(row_first, i + 1)),
                height=height,
                ratio=ratio,
                item_widths=widths,
                is_orphan=is_orphan,
            )
        )
        heights.append(height)

        row_width = 0.0
        row_gutter_width = 0.0
        row_first = i + 1

    logger.debug(
        "Packed %d items into %d rows (container=%spx, row_height=%spx, gutter=%spx)",
        count,
        len(rows),
        container_width_px,
        row_height_px,
        gutter_px,
    )
    return rows


def place_rows(
    rows: Iterable[Row],
    *,
    gutter_px: int,
    row_gap_px: Optional[int] = None,
) -> Tuple[List[JustifiedPlacement], int]:
    """Compute item positions from packed rows.

    Returns (placements, total_height_px). x advances by width + gutter, y by
    row height + row gap (defaults to the gutter).
    """

    if gutter_px < 0:
        raise InvalidArgument("gutter_px must be >= 0")
    gap = gutter_px if row_gap_px is None else row_gap_px
    if gap < 0:
        raise InvalidArgument("row_gap_px must be >= 0")

    placements: List[JustifiedPlacement] = []
    y = 0
    row_count = 0
    for row_number, row in enumerate(rows):
        h = int(row.height)
        x = 0
        for index, width in zip(row.item_indices, row.item_widths):
            placements.append(
                JustifiedPlacement(index=index, row=row_number, x=int(x), y=int(y), width=int(width), height=h)
            )
            x += width + gutter_px
        y += h + gap
        row_count += 1

    total = y - (gap if row_count else 0)
    return placements, max(0, int(total))


def layout_justified(
    items: Sequence[AspectItem],
    *,
    container_width_px: float,
    row_height_px: float,
    gutter_px: int = 0,
    row_gap_px: Optional[int] = None,
    orphan_height: OrphanHeightPolicy = average_orphan_height,
    width_fudge_px: int = 1,
) -> Tuple[List[Row], List[JustifiedPlacement], int]:
    """Pack and place in one call. Returns (rows, placements, total_height_px)."""

    rows = pack_rows(
        items,
        container_width_px=container_width_px,
        row_height_px=row_height_px,
        gutter_px=gutter_px,
        orphan_height=orphan_height,
        width_fudge_px=width_fudge_px,
    )
    placements, total = place_rows(rows, gutter_px=gutter_px, row_gap_px=row_gap_px)
    return rows, placements, total
