from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from seat_manifest.config import NORMALIZED_SCALE
from seat_manifest.models import Manifest, ManifestPlace


class CompareRequest(BaseModel):
    old: Optional[Manifest] = None
    new: Optional[Manifest] = None


class ParseRequest(BaseModel):
    place_ids: list[str] = Field(min_length=1)


class PlacesRequest(BaseModel):
    places: list[ManifestPlace] = Field(default_factory=list)
    # Group by the section key parsed from each identifier instead of place.section.
    detect: bool = False


class NormalizeRequest(BaseModel):
    places: list[ManifestPlace] = Field(default_factory=list)
    scale: float = Field(default=NORMALIZED_SCALE, gt=0)
