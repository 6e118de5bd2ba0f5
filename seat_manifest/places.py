from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import NORMALIZED_SCALE
from .models import Place


@dataclass(frozen=True)
class ParsedPlaceId:
    section: Optional[str]
    row: Optional[str]
    seat: Optional[str]
    original: Optional[str] = None

    def to_dict(self) -> dict:
        return {"section": self.section, "row": self.row, "seat": self.seat, "original": self.original}


@dataclass
class SectionBucket:
    name: str
    places: list[Place] = field(default_factory=list)
    count: int = 0
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    def add(self, place: Place) -> None:
        self.places.append(place)
        self.count += 1
        price = _place_price(place)
        if price > 0:
            self.price_min = price if self.price_min is None else min(self.price_min, price)
            self.price_max = price if self.price_max is None else max(self.price_max, price)

    @property
    def price_range(self) -> tuple[float, float]:
        if self.price_min is None or self.price_max is None:
            return 0.0, 0.0
        return self.price_min, self.price_max

    def to_dict(self) -> dict:
        lo, hi = self.price_range
        return {
            "name": self.name,
            "count": self.count,
            "price_range": {"min": lo, "max": hi},
            "places": [p.model_dump() for p in self.places],
        }


def _place_price(place: Place) -> float:
    pricing = getattr(place, "pricing", None)
    if pricing is None:
        return 0.0
    return pricing.current_price or pricing.base_price or 0.0


def parse_place_id(place_id: Optional[str]) -> ParsedPlaceId:
    """
    Best-effort guess at section/seat tokens inside an opaque identifier.

    Identifiers of 10+ characters are split positionally: the first ~60%
    (at most 8 characters) is taken as the section key and the remainder as
    the seat key. This is lossy and only meant for identifiers that arrive
    without coordinates or section names.
    """
    if not place_id or not isinstance(place_id, str):
        return ParsedPlaceId(section=None, row=None, seat=None)

    section = None
    seat = None
    if len(place_id) >= 10:
        section = place_id[: min(8, len(place_id) * 3 // 5)]
        remaining = place_id[len(section) :]
        if len(remaining) >= 2:
            seat = remaining

    return ParsedPlaceId(section=section or "UNKNOWN", row=None, seat=seat or place_id, original=place_id)


def group_places_by_section(places: Sequence[Place]) -> dict[str, SectionBucket]:
    groups: dict[str, SectionBucket] = {}
    for place in places:
        name = place.section or "DEFAULT"
        if name not in groups:
            groups[name] = SectionBucket(name=name)
        groups[name].add(place)
    return groups


def detect_sections(places: Sequence[Place]) -> dict[str, SectionBucket]:
    """Group places by the section key parsed out of their identifiers."""
    groups: dict[str, SectionBucket] = {}
    for place in places:
        name = parse_place_id(place.place_id).section or "DEFAULT"
        if name not in groups:
            groups[name] = SectionBucket(name=name)
        groups[name].add(place)
    return groups


def normalize_coordinates(places: Sequence[Place], scale: float = NORMALIZED_SCALE) -> list[Place]:
    """
    Rescale x/y linearly into [0, scale]. Places without coordinates are left
    as they are. If every x or every y is the same the input comes back
    unscaled.
    """
    xs = [p.x for p in places if p.x is not None]
    ys = [p.y for p in places if p.y is not None]
    if not xs or not ys:
        return list(places)
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    if min_x == max_x or min_y == max_y:
        return list(places)

    out: list[Place] = []
    for p in places:
        update = {}
        if p.x is not None:
            update["x"] = (p.x - min_x) / (max_x - min_x) * scale
        if p.y is not None:
            update["y"] = (p.y - min_y) / (max_y - min_y) * scale
        out.append(p.model_copy(update=update))
    return out
