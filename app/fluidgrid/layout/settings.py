"""Grid configuration.

Defaults match the classic fluid grid: 250px nominal rows, no gutter, orphans
at the average height of the rows above them.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.justified import OrphanHeightPolicy, orphan_policy


@dataclass(frozen=True)
class GridSettings:
    row_height_px: int = 250
    gutter_px: int = 0
    orphan_policy: str = "average"
    width_key: str = "width"
    height_key: str = "height"
    width_fudge_px: int = 1

    def __post_init__(self) -> None:
        if self.row_height_px <= 0:
            raise InvalidArgument("row_height_px must be > 0")
        if self.gutter_px < 0:
            raise InvalidArgument("gutter_px must be >= 0")
        if self.width_fudge_px < 0:
            raise InvalidArgument("width_fudge_px must be >= 0")
        orphan_policy(self.orphan_policy)
        if not self.width_key or not self.height_key:
            raise InvalidArgument("width_key and height_key must be non-empty")

    @property
    def orphan_height(self) -> OrphanHeightPolicy:
        return orphan_policy(self.orphan_policy)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "GridSettings":
        """Build settings from loosely typed values (QSettings, CLI, JSON).

        Unknown keys are ignored; missing or empty values keep their default.
        """

        kwargs: dict[str, Any] = {}
        for field in fields(cls):
            raw = values.get(field.name)
            if raw is None or raw == "":
                continue
            if isinstance(field.default, int):
                try:
                    kwargs[field.name] = int(str(raw).strip())
                except ValueError:
                    raise InvalidArgument(f"{field.name} must be an integer, got {raw!r}") from None
            else:
                kwargs[field.name] = str(raw).strip()
        return cls(**kwargs)
