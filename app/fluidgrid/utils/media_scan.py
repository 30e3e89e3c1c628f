"""Find gallery images on disk and read their intrinsic dimensions."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from PIL import Image

logger = logging.getLogger(__name__)

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"}

_EXIF_ORIENTATION = 0x0112
# Orientations 5-8 rotate the image by 90 degrees, swapping width and height.
_TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


def scan_image_paths(folder: str | Path, *, hide_dot: bool = True) -> list[Path]:
    root = Path(folder)
    if not root.exists() or not root.is_dir():
        return []

    candidates: list[Path] = []
    for root_dir, dirs, files in os.walk(root, followlinks=True):
        curr_root = Path(root_dir)
        if hide_dot:
            # Prune in place so os.walk never descends into hidden directories.
            dirs[:] = [d for d in dirs if not d.startswith(".")]

        for f in files:
            if hide_dot and f.startswith("."):
                continue
            p = curr_root / f
            if p.suffix.lower() in IMAGE_EXTS:
                candidates.append(p)

    candidates.sort(key=lambda p: p.as_posix().casefold())
    return candidates


def read_image_size(path: str | Path) -> Optional[tuple[int, int]]:
    """Return the displayed (width, height) of an image, or None if unreadable.

    Only the header is read; pixel data is never decoded.
    """

    try:
        with Image.open(path) as img:
            width, height = img.size
            orientation = img.getexif().get(_EXIF_ORIENTATION)
    except (OSError, Image.DecompressionBombError) as exc:
        logger.debug("Cannot read image size for %s: %s", path, exc)
        return None

    if orientation in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return int(width), int(height)


def collect_records(paths: Iterable[str | Path]) -> Iterator[dict]:
    """Yield ``{"key", "width", "height"}`` records for build_items.

    Unreadable files still yield a record (with None dimensions) so the item
    store applies its usual skip policy.
    """

    for p in paths:
        size = read_image_size(p)
        width, height = size if size is not None else (None, None)
        yield {"key": str(p), "width": width, "height": height}
