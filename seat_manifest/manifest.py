from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .config import DEFAULT_CURRENCY
from .errors import ConfigurationError
from .identifiers import generate_place_ids
from .models import Manifest, ManifestPlace, NormalizedManifest, PlaceGeneration, Pricing
from .places import parse_place_id


@dataclass(frozen=True)
class ManifestDiff:
    changed: bool
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"changed": self.changed}
        if self.changed:
            out.update(added=self.added, removed=self.removed, modified=self.modified)
        if self.reason:
            out["reason"] = self.reason
        return out


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_update_hash(place_ids: Sequence[str]) -> Optional[str]:
    """MD5 over the compact JSON of the sorted identifiers; order-independent."""
    if not place_ids:
        return None
    payload = json.dumps(sorted(place_ids), separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def generate_manifest(
    place_ids: Sequence[str],
    event_id: Optional[str] = None,
    update_time: Optional[int] = None,
) -> Manifest:
    if not place_ids:
        raise ConfigurationError("place_ids is required and cannot be empty")
    stamp = update_time if update_time is not None else now_ms()
    return Manifest(
        event_id=event_id or f"MANIFEST-{stamp}",
        update_hash=generate_update_hash(place_ids),
        update_time=stamp,
        place_ids=list(place_ids),
    )


def compare_manifests(old: Optional[Manifest], new: Optional[Manifest]) -> ManifestDiff:
    if old is None or new is None:
        return ManifestDiff(changed=True, reason="missing manifest data")
    if old.update_hash is not None and old.update_hash == new.update_hash:
        return ManifestDiff(changed=False)

    old_ids = old.identifier_set()
    new_ids = new.identifier_set()
    if old_ids == new_ids:
        return ManifestDiff(changed=False)
    return ManifestDiff(
        changed=True,
        added=sorted(new_ids - old_ids),
        removed=sorted(old_ids - new_ids),
    )


def normalize_manifest_data(manifest: Manifest, venue_id: Optional[str] = None) -> NormalizedManifest:
    """
    Expand a bare identifier manifest into place records with pricing and
    availability stubs, ready to hand to persistence.
    """
    if not manifest.place_ids:
        raise ConfigurationError("invalid manifest data: place_ids is required")

    places = []
    for i, place_id in enumerate(manifest.place_ids):
        parsed = parse_place_id(place_id)
        places.append(
            ManifestPlace(
                place_id=place_id,
                section=parsed.section,
                row=parsed.row,
                seat=parsed.seat,
                pricing=Pricing(currency=DEFAULT_CURRENCY),
                metadata={"source": "generated", "original_index": i},
            )
        )

    return NormalizedManifest(
        venue=venue_id,
        name=f"Manifest for {manifest.event_id or 'Venue'}",
        update_hash=manifest.update_hash,
        update_time=manifest.update_time,
        places=places,
        external_event_id=manifest.event_id or None,
    )


def validate_manifest_structure(data: Any) -> tuple[bool, list[str]]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return False, ["manifest must be an object"]

    place_ids = data.get("place_ids")
    if not isinstance(place_ids, list) or not place_ids:
        errors.append("place_ids array is required and cannot be empty")
    elif not all(isinstance(p, str) and p for p in place_ids):
        errors.append("place_ids must be non-empty strings")
    elif len(set(place_ids)) != len(place_ids):
        errors.append("place_ids must be unique")

    update_hash = data.get("update_hash")
    if update_hash is not None and not isinstance(update_hash, str):
        errors.append("update_hash must be a string")

    update_time = data.get("update_time")
    if update_time is not None and (isinstance(update_time, bool) or not isinstance(update_time, (int, float))):
        errors.append("update_time must be a number")

    return not errors, errors


def create_manifest_from_scratch(
    venue_id: Optional[str] = None,
    event_id: Optional[str] = None,
    place_generation: Optional[PlaceGeneration] = None,
    total_places: int = 100,
) -> NormalizedManifest:
    gen = place_generation or PlaceGeneration()
    place_ids = generate_place_ids(
        prefix=gen.prefix,
        count=total_places,
        pattern=gen.pattern,
        pattern_config=gen.pattern_config,
    )
    return normalize_manifest_data(generate_manifest(place_ids, event_id=event_id), venue_id)
