"""
Parametric layouts: grid (arena), radial (theater curve) and general
admission zones. Unlike the manual layout these ignore venue geometry and
place identifiers purely by their position in the input list.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from loguru import logger

from .errors import WarningKind, geometry_warning
from .models import (
    Bounds,
    CapacityMode,
    GeneralAdmissionConfig,
    GridLayoutConfig,
    LayoutResult,
    Place,
    RadialLayoutConfig,
    SectionNaming,
    SectionNamingPattern,
    Zone,
)


def section_name(index: int, naming: Optional[SectionNaming] = None) -> str:
    naming = naming or SectionNaming()
    pattern = naming.pattern

    if pattern == SectionNamingPattern.custom and naming.custom_names:
        return naming.custom_names[index % len(naming.custom_names)] or f"Section {index + 1}"

    if pattern == SectionNamingPattern.alphabetic:
        # A..Z, AA, AB, ...
        out = ""
        num = index
        while True:
            out = chr(65 + num % 26) + out
            num = num // 26 - 1
            if num < 0:
                return out

    if pattern == SectionNamingPattern.alphanumeric:
        # A1..A10, B1..B10, ...
        return f"{chr(65 + index // 10)}{index % 10 + 1}"

    return f"Section {index + 1}"


def generate_grid_layout(config: GridLayoutConfig, place_ids: Sequence[str]) -> LayoutResult:
    if not place_ids:
        return LayoutResult()

    total = config.total_seats if config.total_seats is not None else len(place_ids)
    rows_per_section = max(1, math.ceil((total / config.sections) / config.seats_per_row))
    per_section = rows_per_section * config.seats_per_row

    places: list[Place] = []
    for i, place_id in enumerate(place_ids):
        section_idx, in_section = divmod(i, per_section)
        row_idx, seat_idx = divmod(in_section, config.seats_per_row)
        places.append(
            Place(
                place_id=place_id,
                x=section_idx * config.section_width + seat_idx * config.seat_spacing,
                y=row_idx * config.row_spacing,
                row=f"R{row_idx + 1}",
                seat=f"{seat_idx + 1}",
                section=section_name(section_idx, config.section_naming),
            )
        )
    logger.debug(f"[GRID-LAYOUT] {len(places)} seats, {rows_per_section} rows/section")
    return LayoutResult(places=places)


def generate_radial_layout(config: RadialLayoutConfig, place_ids: Sequence[str]) -> LayoutResult:
    if not place_ids:
        return LayoutResult()

    places: list[Place] = []
    dropped = 0
    for i, place_id in enumerate(place_ids):
        row_idx, seat_idx = divmod(i, config.seats_per_row)
        if row_idx >= config.total_rows:
            dropped += 1
            continue
        radius = config.base_radius + row_idx * config.row_spacing
        angle = (seat_idx / config.seats_per_row) * 2 * math.pi - math.pi
        places.append(
            Place(
                place_id=place_id,
                x=config.center_x + radius * math.cos(angle),
                y=config.center_y + radius * math.sin(angle),
                row=f"R{row_idx + 1}",
                seat=f"{seat_idx + 1}",
                section="Main",
            )
        )

    warnings = []
    if dropped:
        warnings.append(
            geometry_warning(
                WarningKind.radial_overflow,
                f"{dropped} identifiers exceed {config.total_rows} rows x {config.seats_per_row} seats and were not placed",
                section="Main",
                expected=len(place_ids),
                placed=len(places),
            )
        )
    return LayoutResult(places=places, warnings=warnings)


def generate_general_admission_layout(
    config: GeneralAdmissionConfig, place_ids: Sequence[str] = ()
) -> LayoutResult:
    """
    Zone descriptors only. Standing areas are not seat-addressable, so no
    identifier receives coordinates and every zone's place list is empty.
    """
    zones: list[Zone] = []
    share = config.capacity // len(config.zones) if config.zones else 0
    for i, z in enumerate(config.zones):
        bounds = z.bounds or Bounds()
        if z.capacity_mode == CapacityMode.auto:
            capacity = max(0, int(round(abs(bounds.width * bounds.height) * z.density_per_unit)))
        elif z.capacity:
            capacity = z.capacity
        else:
            capacity = share
        zones.append(
            Zone(
                zone_id=z.id or f"Zone{i + 1}",
                name=z.name or f"Zone {i + 1}",
                bounds=bounds,
                capacity=capacity,
            )
        )
    return LayoutResult(zones=zones)
