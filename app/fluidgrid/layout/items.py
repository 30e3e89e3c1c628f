"""Aspect item store.

Turns raw ``{width, height}`` records into items that know their width at the
nominal row height. Records without usable dimensions are skipped, never
raised on: a gallery should still render the images it can measure.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from app.fluidgrid.layout.errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AspectItem:
    """One layout unit with a fixed intrinsic aspect ratio.

    normalized_width: the width the item has when scaled to the nominal row
    height, aspect ratio preserved.
    """

    width: float
    height: float
    normalized_width: float
    key: Optional[str] = None


def _parse_dimension(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number) or number <= 0:
        return None
    return number


def _split_record(
    raw: Any, width_key: str, height_key: str
) -> Tuple[Any, Any, Optional[str]]:
    if isinstance(raw, Mapping):
        key = raw.get("key")
        return raw.get(width_key), raw.get(height_key), None if key is None else str(key)
    if isinstance(raw, (str, bytes)):
        return None, None, None
    try:
        width, height = raw
    except (TypeError, ValueError):
        return None, None, None
    return width, height, None


def _check_row_height(row_height_px: float) -> None:
    if not isinstance(row_height_px, (int, float)) or isinstance(row_height_px, bool):
        raise InvalidArgument("row_height_px must be a number")
    if not math.isfinite(row_height_px) or row_height_px <= 0:
        raise InvalidArgument("row_height_px must be > 0")


def build_items(
    raw_items: Iterable[Any],
    *,
    row_height_px: float,
    width_key: str = "width",
    height_key: str = "height",
) -> List[AspectItem]:
    """Build the ordered item list for one layout context.

    Each raw entry is either a mapping (dimensions under ``width_key`` and
    ``height_key``, optional ``"key"``) or a ``(width, height)`` pair. Entries
    whose width or height is missing, non-numeric or not positive are dropped.
    Source order is preserved.
    """

    _check_row_height(row_height_px)

    items: List[AspectItem] = []
    for position, raw in enumerate(raw_items):
        raw_width, raw_height, key = _split_record(raw, width_key, height_key)
        width = _parse_dimension(raw_width)
        height = _parse_dimension(raw_height)
        if width is None or height is None:
            logger.debug(
                "Skipping entry %d (%r): no usable dimensions (width=%r, height=%r)",
                position,
                key,
                raw_width,
                raw_height,
            )
            continue

        items.append(
            AspectItem(
                width=width,
                height=height,
                normalized_width=width * (row_height_px / height),
                key=key,
            )
        )

    return items


def renormalize(items: Iterable[AspectItem], row_height_px: float) -> List[AspectItem]:
    """Recompute normalized widths for a new nominal row height."""

    _check_row_height(row_height_px)
    return [
        replace(item, normalized_width=item.width * (row_height_px / item.height))
        for item in items
    ]
