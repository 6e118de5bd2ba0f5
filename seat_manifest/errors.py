from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger


class SeatManifestError(Exception):
    pass


class ConfigurationError(SeatManifestError):
    """Venue/section configuration that cannot produce a manifest at all."""


class InputError(SeatManifestError, ValueError):
    pass


class GeometryError(SeatManifestError):
    pass


class WarningKind(str, Enum):
    row_outside_polygon = "row_outside_polygon"
    row_under_capacity = "row_under_capacity"
    section_under_capacity = "section_under_capacity"
    identifiers_exhausted = "identifiers_exhausted"
    invalid_polygon = "invalid_polygon"
    radial_overflow = "radial_overflow"
    leftover_identifiers = "leftover_identifiers"


@dataclass(frozen=True)
class GeometryWarning:
    """
    A non-fatal shortfall. The affected row/section was skipped or truncated
    and generation carried on.
    """

    kind: WarningKind
    message: str
    section: Optional[str] = None
    row: Optional[str] = None
    expected: Optional[int] = None
    placed: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "section": self.section,
            "row": self.row,
            "expected": self.expected,
            "placed": self.placed,
        }


def geometry_warning(kind: WarningKind, message: str, **fields) -> GeometryWarning:
    w = GeometryWarning(kind=kind, message=message, **fields)
    logger.warning(f"[{kind.value.upper()}] {message}")
    return w
