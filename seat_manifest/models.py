from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .errors import GeometryWarning

# Row length when neither the row nor its section says otherwise.
DEFAULT_SEATS_PER_ROW = 20


class SectionShape(str, Enum):
    rectangle = "rectangle"
    polygon = "polygon"


class PresentationStyle(str, Enum):
    flat = "flat"
    cone = "cone"
    left_fixed = "left_fixed"
    right_fixed = "right_fixed"


class NumberingDirection(str, Enum):
    left_to_right = "left-to-right"
    right_to_left = "right-to-left"


class CurveDirection(str, Enum):
    frown = "frown"  # edges toward the stage (lower y)
    smile = "smile"


class IdPattern(str, Enum):
    sequential = "sequential"
    grid = "grid"
    custom = "custom"


class SectionNamingPattern(str, Enum):
    numeric = "numeric"
    alphabetic = "alphabetic"
    alphanumeric = "alphanumeric"
    custom = "custom"


class LayoutAlgorithm(str, Enum):
    grid = "grid"
    curved = "curved"
    general = "general"
    manual = "manual"


class CapacityMode(str, Enum):
    manual = "manual"
    auto = "auto"  # capacity derived from area * density_per_unit


class Point(BaseModel):
    x: float
    y: float


class Bounds(BaseModel):
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 100.0
    y2: float = 100.0

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1


class Obstruction(BaseModel):
    shape: SectionShape = SectionShape.rectangle
    bounds: Optional[Bounds] = None
    polygon: list[Point] = Field(default_factory=list)


class RowConfig(BaseModel):
    row_number: Optional[int] = None
    row_label: Optional[str] = None
    seat_count: Optional[int] = Field(default=None, ge=0)
    start_seat_number: int = 1
    aisle_left: int = Field(default=0, ge=0)
    aisle_right: int = Field(default=0, ge=0)
    offset_x: float = 0.0
    # Strings such as "12.5" are coerced; blanks count as no offset.
    offset_y: float = 0.0
    blocked_seats: list[int] = Field(default_factory=list)

    @field_validator("offset_x", "offset_y", mode="before")
    @classmethod
    def _blank_offset(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        return v


class SpacingConfig(BaseModel):
    """
    Per-section tuning. Unset values resolve to shape/style-dependent
    defaults inside the manual layout.
    """

    seat_spacing_multiplier: Optional[float] = None
    row_spacing_multiplier: Optional[float] = None
    curve_depth_multiplier: Optional[float] = None
    curve_direction: Optional[CurveDirection] = None
    # Degrees. None means auto-estimate from the polygon edges.
    rotation_angle: Optional[float] = None
    top_padding: Optional[float] = None
    top_margin_y: Optional[float] = None
    bottom_margin_y: Optional[float] = None


class Section(BaseModel):
    name: str = "Unknown"
    shape: SectionShape = SectionShape.rectangle
    bounds: Optional[Bounds] = None
    polygon: list[Point] = Field(default_factory=list)

    rows: Optional[int] = Field(default=None, ge=0)
    seats_per_row: Optional[int] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, ge=0)
    row_config: list[RowConfig] = Field(default_factory=list)

    seat_numbering_direction: NumberingDirection = NumberingDirection.left_to_right
    obstructions: list[Obstruction] = Field(default_factory=list)
    presentation_style: PresentationStyle = PresentationStyle.flat
    spacing_config: SpacingConfig = Field(default_factory=SpacingConfig)
    price_tier: Optional[str] = None

    def row_seat_count(self, row: RowConfig) -> int:
        if row.seat_count is not None:
            return row.seat_count
        return self.seats_per_row or DEFAULT_SEATS_PER_ROW

    def row_config_capacity(self) -> int:
        return sum(self.row_seat_count(r) for r in self.row_config)

    def effective_capacity(self) -> int:
        if self.row_config:
            return self.row_config_capacity()
        if self.capacity:
            return self.capacity
        return (self.rows or 0) * (self.seats_per_row or 0)


class LayoutSpacing(BaseModel):
    seat_spacing: float = 2.0
    row_spacing: float = 3.0


class Place(BaseModel):
    place_id: str
    x: Optional[float] = None
    y: Optional[float] = None
    row: Optional[str] = None
    seat: Optional[str] = None
    section: Optional[str] = None
    zone: Optional[str] = None
    # False when a seat was accepted outside its section geometry.
    in_bounds: bool = True


class Pricing(BaseModel):
    base_price: float = 0.0
    currency: str = "EUR"
    current_price: float = 0.0


class ManifestPlace(Place):
    pricing: Pricing = Field(default_factory=Pricing)
    available: bool = True
    status: str = "available"
    metadata: dict = Field(default_factory=dict)


class Manifest(BaseModel):
    event_id: str
    update_hash: Optional[str] = None
    update_time: int
    place_ids: list[str] = Field(default_factory=list)
    places: list[ManifestPlace] = Field(default_factory=list)

    def identifier_set(self) -> set[str]:
        if self.place_ids:
            return set(self.place_ids)
        return {p.place_id for p in self.places}


class NormalizedManifest(BaseModel):
    venue: Optional[str] = None
    name: str
    update_hash: Optional[str] = None
    update_time: Optional[int] = None
    places: list[ManifestPlace] = Field(default_factory=list)
    coordinate_source: str = "pattern_inference"
    layout_algorithm: Optional[LayoutAlgorithm] = None
    external_event_id: Optional[str] = None


class SectionNaming(BaseModel):
    pattern: SectionNamingPattern = SectionNamingPattern.numeric
    custom_names: list[str] = Field(default_factory=list)


class GridLayoutConfig(BaseModel):
    total_seats: Optional[int] = Field(default=None, ge=0)
    sections: int = Field(default=1, ge=1)
    seats_per_row: int = Field(default=20, ge=1)
    section_width: float = 100.0
    seat_spacing: float = 2.0
    row_spacing: float = 3.0
    section_naming: SectionNaming = Field(default_factory=SectionNaming)


class RadialLayoutConfig(BaseModel):
    center_x: float = 500.0
    center_y: float = 500.0
    base_radius: float = 100.0
    row_spacing: float = 20.0
    seats_per_row: int = Field(default=30, ge=1)
    total_rows: int = Field(default=20, ge=0)


class ZoneConfig(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    bounds: Optional[Bounds] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    capacity_mode: CapacityMode = CapacityMode.manual
    density_per_unit: float = Field(default=0.0, ge=0)


class GeneralAdmissionConfig(BaseModel):
    capacity: int = Field(default=1000, ge=0)
    zones: list[ZoneConfig] = Field(default_factory=list)


class Zone(BaseModel):
    zone_id: str
    name: str
    bounds: Bounds
    capacity: int
    places: list[Place] = Field(default_factory=list)


class PlaceGeneration(BaseModel):
    prefix: str = ""
    pattern: IdPattern = IdPattern.sequential
    pattern_config: dict = Field(default_factory=dict)


@dataclass(frozen=True)
class LayoutResult:
    places: list[Place] = field(default_factory=list)
    warnings: list[GeometryWarning] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)
