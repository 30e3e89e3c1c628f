from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a caller passes layout parameters that cannot produce a layout."""
