from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field

from .config import DEFAULT_TOTAL_PLACES
from .errors import ConfigurationError, GeometryWarning, InputError
from .identifiers import generate_place_ids
from .manifest import generate_manifest, normalize_manifest_data, now_ms
from .manual_layout import generate_manual_section_layout, total_capacity
from .models import (
    GeneralAdmissionConfig,
    GridLayoutConfig,
    LayoutAlgorithm,
    LayoutResult,
    LayoutSpacing,
    Manifest,
    ManifestPlace,
    PlaceGeneration,
    RadialLayoutConfig,
    Section,
    SectionNaming,
    Zone,
)
from .seatmap import generate_general_admission_layout, generate_grid_layout, generate_radial_layout


class GenerateRequest(BaseModel):
    event_id: Optional[str] = None
    venue_id: Optional[str] = None
    layout_algorithm: Optional[LayoutAlgorithm] = None
    # Validated against the chosen algorithm's config model.
    layout_config: dict = Field(default_factory=dict)
    sections: list[Section] = Field(default_factory=list)
    total_places: Optional[int] = None
    place_ids: list[str] = Field(default_factory=list)
    place_generation: PlaceGeneration = Field(default_factory=PlaceGeneration)
    section_naming: Optional[SectionNaming] = None
    update_time: Optional[int] = None


@dataclass(frozen=True)
class GenerationResult:
    manifest: Manifest
    layout_algorithm: Optional[LayoutAlgorithm]
    coordinate_source: str
    zones: list[Zone] = field(default_factory=list)
    warnings: list[GeometryWarning] = field(default_factory=list)
    # In the manifest (and its hash) but given no seat by a seat-placing layout.
    unplaced_ids: list[str] = field(default_factory=list)

    @property
    def places(self) -> list[ManifestPlace]:
        return self.manifest.places

    def to_dict(self) -> dict:
        return {
            "manifest": self.manifest.model_dump(mode="json"),
            "layout_algorithm": self.layout_algorithm.value if self.layout_algorithm else None,
            "coordinate_source": self.coordinate_source,
            "zones": [z.model_dump(mode="json") for z in self.zones],
            "warnings": [w.to_dict() for w in self.warnings],
            "unplaced_ids": self.unplaced_ids,
        }


def _identifiers(req: GenerateRequest, manual: bool) -> list[str]:
    gen = req.place_generation
    if manual:
        count = total_capacity(req.sections)
        if count <= 0:
            raise ConfigurationError("configured sections have zero capacity")
        if len(req.place_ids) >= count:
            return list(req.place_ids)
        if req.place_ids:
            logger.info(f"[GENERATE] {len(req.place_ids)} supplied identifiers < capacity {count}; regenerating")
    else:
        if req.place_ids:
            return list(req.place_ids)
        count = DEFAULT_TOTAL_PLACES if req.total_places is None else req.total_places
        if count <= 0:
            raise ConfigurationError(f"total_places must be positive, got {count}")

    return generate_place_ids(prefix=gen.prefix, count=count, pattern=gen.pattern, pattern_config=gen.pattern_config)


def _run_layout(req: GenerateRequest, algorithm: Optional[LayoutAlgorithm], place_ids: list[str]) -> LayoutResult:
    if algorithm == LayoutAlgorithm.manual:
        spacing = LayoutSpacing.model_validate(req.layout_config)
        return generate_manual_section_layout(req.sections, place_ids, spacing)
    if algorithm == LayoutAlgorithm.grid:
        cfg = dict(req.layout_config, total_seats=len(place_ids))
        if req.section_naming is not None:
            cfg["section_naming"] = req.section_naming
        return generate_grid_layout(GridLayoutConfig.model_validate(cfg), place_ids)
    if algorithm == LayoutAlgorithm.curved:
        return generate_radial_layout(RadialLayoutConfig.model_validate(req.layout_config), place_ids)
    if algorithm == LayoutAlgorithm.general:
        return generate_general_admission_layout(GeneralAdmissionConfig.model_validate(req.layout_config), place_ids)
    return LayoutResult()


def generate(req: GenerateRequest) -> GenerationResult:
    """
    Identifiers -> layout -> hashed manifest.

    Sections, when present, always select the manual layout and fix the
    identifier count at their total capacity; otherwise `total_places`
    identifiers are laid out with `layout_algorithm` (or left without
    coordinates when none is given).
    """
    manual = bool(req.sections)
    if req.layout_algorithm == LayoutAlgorithm.manual and not manual:
        raise ConfigurationError("no sections configured")
    algorithm = LayoutAlgorithm.manual if manual else req.layout_algorithm

    place_ids = _identifiers(req, manual)
    if len(set(place_ids)) != len(place_ids):
        raise InputError("place_ids must be unique")

    stamp = req.update_time if req.update_time is not None else now_ms()
    event_id = req.event_id
    if not event_id and req.venue_id:
        event_id = f"VENUE-{req.venue_id}-{stamp}"
    manifest = generate_manifest(place_ids, event_id=event_id, update_time=stamp)
    stubs = normalize_manifest_data(manifest, req.venue_id).places

    layout = _run_layout(req, algorithm, place_ids)
    coords = {p.place_id: p for p in layout.places}

    if algorithm == LayoutAlgorithm.manual:
        by_id = {s.place_id: s for s in stubs}
        places = [
            by_id[p.place_id].model_copy(
                update={
                    "x": p.x,
                    "y": p.y,
                    "row": p.row,
                    "seat": p.seat,
                    "section": p.section,
                    "zone": p.zone,
                    "in_bounds": p.in_bounds,
                }
            )
            for p in layout.places
        ]
        coordinate_source = "manual"
    else:
        places = []
        for stub in stubs:
            p = coords.get(stub.place_id)
            if p is None:
                places.append(stub)
                continue
            places.append(
                stub.model_copy(update={"x": p.x, "y": p.y, "row": p.row, "seat": p.seat, "section": p.section})
            )
        coordinate_source = "pattern_inference"

    unplaced: list[str] = []
    if algorithm in (LayoutAlgorithm.manual, LayoutAlgorithm.grid, LayoutAlgorithm.curved):
        unplaced = [i for i in place_ids if i not in coords]

    logger.info(
        f"[GENERATE] event={manifest.event_id} algorithm={algorithm.value if algorithm else None} "
        f"identifiers={len(place_ids)} placed={len(layout.places)} unplaced={len(unplaced)} "
        f"warnings={len(layout.warnings)}"
    )
    return GenerationResult(
        manifest=manifest.model_copy(update={"places": places}),
        layout_algorithm=algorithm,
        coordinate_source=coordinate_source,
        zones=layout.zones,
        warnings=layout.warnings,
        unplaced_ids=unplaced,
    )
