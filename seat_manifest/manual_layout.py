"""
Manual section layout.

Places identifiers inside venue-configured sections. Sections are rectangles
or polygons; their rows are either a uniform rows x seats_per_row grid or a
per-row `row_config` with variable seat counts, aisles, offsets, blocked
positions and a presentation style (flat, cone, left/right fixed).

The row_config path always places exactly the configured number of seats when
enough identifiers are supplied. Obstructed or blocked grid positions are
skipped and the scan moves on; positions that land outside the section are
still accepted and flagged with `in_bounds=False`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from loguru import logger

from .errors import ConfigurationError, GeometryWarning, WarningKind, geometry_warning
from .geometry import (
    BBox,
    Span,
    as_tuples,
    bounding_box,
    bounds_box,
    estimate_rotation_deg,
    point_in_obstruction,
    polygon_contains_point,
    polygon_covers_point,
    polygon_span_at_y,
    rotate_point,
)
from .models import (
    DEFAULT_SEATS_PER_ROW,
    Bounds,
    CurveDirection,
    LayoutResult,
    LayoutSpacing,
    NumberingDirection,
    Place,
    PresentationStyle,
    RowConfig,
    Section,
    SectionShape,
)

@dataclass(frozen=True)
class SectionLayout:
    consumed: int
    places: list[Place] = field(default_factory=list)
    warnings: list[GeometryWarning] = field(default_factory=list)


@dataclass(frozen=True)
class _Frame:
    """Resolved per-section geometry shared by every row of a row_config layout."""

    box: BBox
    polygon: Optional[list[tuple[float, float]]]
    style: PresentationStyle
    seat_spacing: float
    margin_x: float
    max_positions: int
    chain_start_y: float
    uniform_start_y: float
    row_pitch: float
    curve_depth: float
    curve_direction: CurveDirection
    top_limit_y: float
    bottom_limit_y: float
    rotation_deg: float


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _sorted_rows(section: Section) -> list[RowConfig]:
    return sorted(section.row_config, key=lambda r: r.row_number or 0)


def _max_positions(rows: Sequence[RowConfig], section: Section) -> int:
    return max(section.row_seat_count(r) + r.aisle_left + r.aisle_right for r in rows)


def _pick(value: Optional[float], default: float) -> float:
    return default if value is None else float(value)


def _rectangle_frame(section: Section, rows: list[RowConfig], spacing: LayoutSpacing) -> _Frame:
    cfg = section.spacing_config
    style = section.presentation_style
    cone = style == PresentationStyle.cone
    box = bounds_box(section.bounds or Bounds())

    seat_mult = _clamp(_pick(cfg.seat_spacing_multiplier, 0.75 if cone else 0.65), 0.01, 1.0)
    row_mult = min(1.0, _pick(cfg.row_spacing_multiplier, 0.75))
    curve_mult = _pick(cfg.curve_depth_multiplier, 0.7)
    top_padding = _pick(cfg.top_padding, 40.0)
    top_margin = _pick(cfg.top_margin_y, 10.0 if cone else 5.0)
    bottom_margin = _pick(cfg.bottom_margin_y, 10.0 if cone else 5.0)

    if seat_mult < 0.3:
        margin_x = 5.0
    else:
        margin_x = spacing.seat_spacing if spacing.seat_spacing > 1 else 20.0
    available_width = box.width - margin_x * 2
    max_positions = _max_positions(rows, section)
    if max_positions > 1:
        seat_spacing = available_width / (max_positions - 1) * seat_mult
    else:
        seat_spacing = available_width * seat_mult

    n = len(rows)
    row_pitch = 0.0
    if n > 1:
        row_pitch = (box.height - top_padding - spacing.row_spacing * 2) / (n - 1) * row_mult

    return _Frame(
        box=box,
        polygon=None,
        style=style,
        seat_spacing=seat_spacing,
        margin_x=margin_x,
        max_positions=max_positions,
        chain_start_y=box.min_y + top_padding,
        uniform_start_y=box.min_y + top_padding + spacing.row_spacing,
        row_pitch=row_pitch,
        curve_depth=max(15.0, row_pitch * curve_mult) if cone else 0.0,
        curve_direction=(cfg.curve_direction or CurveDirection.frown) if cone else CurveDirection.frown,
        top_limit_y=box.min_y + top_margin,
        bottom_limit_y=box.max_y - bottom_margin,
        rotation_deg=cfg.rotation_angle or 0.0,
    )


def _polygon_frame(section: Section, rows: list[RowConfig], poly: list[tuple[float, float]]) -> _Frame:
    cfg = section.spacing_config
    style = section.presentation_style
    cone = style == PresentationStyle.cone
    box = bounding_box(poly)

    seat_mult = _clamp(_pick(cfg.seat_spacing_multiplier, 1.0), 0.01, 1.0)
    row_mult = min(1.0, _pick(cfg.row_spacing_multiplier, 1.0))
    curve_mult = _pick(cfg.curve_depth_multiplier, 0.7)
    curve_direction = (cfg.curve_direction or CurveDirection.frown) if cone else CurveDirection.frown
    top_padding = _pick(cfg.top_padding, 5.0)
    top_margin = _pick(cfg.top_margin_y, 10.0 if cone else 5.0)
    bottom_margin = _pick(cfg.bottom_margin_y, 10.0 if cone else 5.0)

    margin_x = max(2.0, box.width * 0.02)
    spacing_margin_x = 5.0 if seat_mult < 0.3 else margin_x
    available_width = box.width - spacing_margin_x * 2
    effective_width = available_width * (1.0 if seat_mult < 0.3 else 0.99)
    max_positions = _max_positions(rows, section)
    if max_positions > 1:
        seat_spacing = effective_width / (max_positions - 1) * seat_mult
    else:
        seat_spacing = effective_width * seat_mult

    # Room for the cone curve, reserved on the side the edges bend towards.
    reserve = 0.0
    if cone:
        top = polygon_span_at_y(poly, box.min_y + top_margin + 5)
        bottom = polygon_span_at_y(poly, box.max_y - bottom_margin - 5)
        if top and bottom:
            avg_row_width = ((top.right_x - top.left_x) + (bottom.right_x - bottom.left_x)) / 2
        else:
            avg_row_width = available_width
        reserve = max(15.0, avg_row_width * curve_mult / 10)
    reserve_top = reserve if curve_direction == CurveDirection.frown else 0.0
    reserve_bottom = reserve if curve_direction == CurveDirection.smile else 0.0

    if cone:
        first_row_y = box.min_y + top_margin + top_padding + reserve_top
    else:
        first_row_y = box.min_y + reserve_top
    last_row_y = box.max_y - bottom_margin - reserve_bottom
    n = len(rows)
    row_pitch = (last_row_y - first_row_y) / (n - 1) * row_mult if n > 1 else 0.0

    curve_depth = 0.0
    if cone:
        max_grid_width = (max_positions - 1) * seat_spacing
        curve_depth = _clamp(max_grid_width * 0.025 * curve_mult, 10.0, 50.0)

    if cfg.rotation_angle is None:
        rotation = estimate_rotation_deg(poly)
    else:
        rotation = float(cfg.rotation_angle)

    return _Frame(
        box=box,
        polygon=poly,
        style=style,
        seat_spacing=seat_spacing,
        margin_x=margin_x,
        max_positions=max_positions,
        chain_start_y=first_row_y,
        uniform_start_y=first_row_y,
        row_pitch=row_pitch,
        curve_depth=curve_depth,
        curve_direction=curve_direction,
        top_limit_y=box.min_y + top_margin,
        bottom_limit_y=box.max_y - bottom_margin,
        rotation_deg=rotation,
    )


def _row_base_ys(frame: _Frame, rows: list[RowConfig]) -> list[float]:
    """
    Offset-chaining when any row carries a vertical offset (each row sits its
    own offset below the previous one), otherwise uniform spacing with the
    offset added as a fine-tune.
    """
    if any(r.offset_y != 0 for r in rows):
        ys: list[float] = []
        y = frame.chain_start_y
        for r in rows:
            y += r.offset_y
            ys.append(y)
        return ys
    return [frame.uniform_start_y + i * frame.row_pitch + r.offset_y for i, r in enumerate(rows)]


def _row_extent(frame: _Frame, y: float) -> Optional[Span]:
    if frame.polygon is None:
        return Span(frame.box.min_x + frame.margin_x, frame.box.max_x - frame.margin_x)
    span = polygon_span_at_y(frame.polygon, y)
    if span is None:
        return None
    return Span(span.left_x + frame.margin_x, span.right_x - frame.margin_x)


def _row_start_x(frame: _Frame, extent: Span, row_width: float) -> float:
    style = frame.style
    if style in (PresentationStyle.flat, PresentationStyle.cone):
        return frame.box.center[0] - row_width / 2
    if style == PresentationStyle.left_fixed:
        return extent.left_x
    if style == PresentationStyle.right_fixed:
        return extent.right_x - row_width
    raise ConfigurationError(f"unhandled presentation style: {style}")


def _curve_offset(frame: _Frame, base_y: float, normalized: float) -> float:
    if frame.curve_depth <= 0:
        return 0.0
    if frame.curve_direction == CurveDirection.smile:
        offset = frame.curve_depth * normalized * normalized
        if base_y + offset > frame.bottom_limit_y:
            offset = frame.bottom_limit_y - base_y
        return offset
    offset = -frame.curve_depth * normalized * normalized
    if base_y + offset < frame.top_limit_y:
        offset = frame.top_limit_y - base_y
    return offset


def _in_bounds(frame: _Frame, x: float, y: float) -> bool:
    if frame.polygon is not None:
        return polygon_covers_point(frame.polygon, x, y)
    b = frame.box
    return b.min_x <= x <= b.max_x and b.min_y <= y <= b.max_y


def _number_row(
    section: Section,
    frame: _Frame,
    label: str,
    start_number: int,
    seats: list[tuple[str, float, float, int]],
) -> list[Place]:
    # seats: (place_id, x, y, grid_position), unrotated
    ordered = sorted(seats, key=lambda s: (s[1], s[3]))
    if section.seat_numbering_direction == NumberingDirection.right_to_left:
        ordered.reverse()

    cx, cy = frame.box.center
    out: list[Place] = []
    for i, (place_id, x, y, _) in enumerate(ordered):
        fx, fy = rotate_point(x, y, cx, cy, frame.rotation_deg)
        out.append(
            Place(
                place_id=place_id,
                x=fx,
                y=fy,
                row=label,
                seat=f"{start_number + i}",
                section=section.name,
                zone=section.price_tier,
                in_bounds=_in_bounds(frame, fx, fy),
            )
        )
    return out


def _layout_row_config(
    section: Section, place_ids: Sequence[str], frame: _Frame, rows: list[RowConfig], seat_offset: int
) -> SectionLayout:
    places: list[Place] = []
    warnings: list[GeometryWarning] = []
    cursor = 0

    logger.debug(
        f"[MANUAL-LAYOUT] {section.name}: {len(rows)} rows, style={frame.style.value}, "
        f"spacing={frame.seat_spacing:.2f}, pitch={frame.row_pitch:.2f}, curve={frame.curve_depth:.2f}"
    )

    for idx, (row, base_y) in enumerate(zip(rows, _row_base_ys(frame, rows))):
        label = row.row_label or f"R{row.row_number or idx + 1}"
        seat_count = section.row_seat_count(row)

        extent = _row_extent(frame, base_y)
        if extent is None:
            warnings.append(
                geometry_warning(
                    WarningKind.row_outside_polygon,
                    f"section {section.name} row {label}: y={base_y:.2f} is outside the polygon "
                    f"({frame.box.min_y:.2f}..{frame.box.max_y:.2f}); row skipped",
                    section=section.name,
                    row=label,
                    expected=seat_count,
                    placed=0,
                )
            )
            continue

        positions = seat_count + row.aisle_left + row.aisle_right
        row_width = (positions - 1) * frame.seat_spacing if positions > 1 else 0.0
        start_x = _row_start_x(frame, extent, row_width)

        first_seat = row.aisle_left
        seat_center = first_seat + (seat_count - 1) / 2
        max_distance = max(1.0, (seat_count - 1) / 2)
        blocked = set(row.blocked_seats)
        # Skipped positions push the row outward; the extra seat_count
        # positions bound the scan when an obstruction swallows the row.
        last_position = first_seat + seat_count + row.aisle_right + len(blocked) + seat_count

        seats: list[tuple[str, float, float, int]] = []
        exhausted = False
        for grid_pos in range(first_seat, last_position):
            if len(seats) >= seat_count:
                break
            if grid_pos in blocked:
                continue
            if cursor >= len(place_ids):
                exhausted = True
                break

            x = start_x + grid_pos * frame.seat_spacing + row.offset_x
            normalized = min(1.0, abs(grid_pos - seat_center) / max_distance)
            y = base_y + _curve_offset(frame, base_y, normalized)

            if point_in_obstruction(x, y, section.obstructions):
                continue

            seats.append((place_ids[cursor], x, y, grid_pos))
            cursor += 1

        places.extend(_number_row(section, frame, label, row.start_seat_number + seat_offset, seats))

        if exhausted:
            remaining = len(rows) - idx - 1
            warnings.append(
                geometry_warning(
                    WarningKind.identifiers_exhausted,
                    f"section {section.name} row {label}: ran out of identifiers after {len(seats)}/{seat_count} seats; "
                    f"{remaining} later rows left empty",
                    section=section.name,
                    row=label,
                    expected=seat_count,
                    placed=len(seats),
                )
            )
            break
        if len(seats) < seat_count:
            warnings.append(
                geometry_warning(
                    WarningKind.row_under_capacity,
                    f"section {section.name} row {label}: obstructions left room for {len(seats)}/{seat_count} seats",
                    section=section.name,
                    row=label,
                    expected=seat_count,
                    placed=len(seats),
                )
            )

    return SectionLayout(consumed=cursor, places=places, warnings=warnings)


def _uniform_grid(section: Section, count: int) -> tuple[int, int]:
    rows = section.rows or math.ceil(math.sqrt(count / (section.seats_per_row or DEFAULT_SEATS_PER_ROW)))
    rows = max(1, rows)
    seats_per_row = section.seats_per_row or math.ceil(count / rows)
    return rows, seats_per_row


def _layout_uniform(
    section: Section,
    place_ids: Sequence[str],
    spacing: LayoutSpacing,
    seat_offset: int,
    poly: Optional[list[tuple[float, float]]] = None,
) -> SectionLayout:
    if not place_ids:
        return SectionLayout(consumed=0)

    box = bounding_box(poly) if poly is not None else bounds_box(section.bounds or Bounds())
    rows, seats_per_row = _uniform_grid(section, len(place_ids))
    if seats_per_row <= 0:
        return SectionLayout(consumed=0)

    seat_pitch = (box.width - spacing.seat_spacing * 2) / max(seats_per_row - 1, 1)
    row_pitch = (box.height - spacing.row_spacing * 2) / max(rows - 1, 1)

    places: list[Place] = []
    cursor = 0
    for r in range(rows):
        if cursor >= len(place_ids):
            break
        y = box.min_y + spacing.row_spacing + r * row_pitch
        for s in range(seats_per_row):
            if cursor >= len(place_ids):
                break
            x = box.min_x + spacing.seat_spacing + s * seat_pitch
            if poly is not None and not polygon_contains_point(poly, x, y):
                continue
            if point_in_obstruction(x, y, section.obstructions):
                continue
            places.append(
                Place(
                    place_id=place_ids[cursor],
                    x=x,
                    y=y,
                    row=f"R{r + 1}",
                    seat=f"{seat_offset + cursor + 1}",
                    section=section.name,
                    zone=section.price_tier,
                )
            )
            cursor += 1

    warnings: list[GeometryWarning] = []
    if cursor < len(place_ids):
        warnings.append(
            geometry_warning(
                WarningKind.section_under_capacity,
                f"section {section.name}: placed {cursor} of {len(place_ids)} seats "
                f"in a {rows}x{seats_per_row} grid",
                section=section.name,
                expected=len(place_ids),
                placed=cursor,
            )
        )
    return SectionLayout(consumed=cursor, places=places, warnings=warnings)


def layout_section(
    section: Section,
    place_ids: Sequence[str],
    spacing: Optional[LayoutSpacing] = None,
    seat_offset: int = 0,
) -> SectionLayout:
    """Lay out one section, consuming identifiers from the front of `place_ids`."""
    spacing = spacing or LayoutSpacing()
    rows = _sorted_rows(section)

    if section.shape == SectionShape.polygon:
        if not section.polygon:
            raise ConfigurationError(f"section {section.name} is a polygon with no points")
        poly = as_tuples(section.polygon)
        if len(poly) < 3:
            w = geometry_warning(
                WarningKind.invalid_polygon,
                f"section {section.name}: polygon needs at least 3 points, got {len(poly)}",
                section=section.name,
                expected=section.effective_capacity(),
                placed=0,
            )
            return SectionLayout(consumed=0, warnings=[w])
        if rows:
            return _layout_row_config(section, place_ids, _polygon_frame(section, rows, poly), rows, seat_offset)
        return _layout_uniform(section, place_ids, spacing, seat_offset, poly=poly)

    if section.shape == SectionShape.rectangle:
        if rows:
            return _layout_row_config(section, place_ids, _rectangle_frame(section, rows, spacing), rows, seat_offset)
        return _layout_uniform(section, place_ids, spacing, seat_offset)

    raise ConfigurationError(f"unhandled section shape: {section.shape}")


def total_capacity(sections: Sequence[Section]) -> int:
    return sum(s.effective_capacity() for s in sections)


def generate_manual_section_layout(
    sections: Sequence[Section],
    place_ids: Sequence[str],
    spacing: Optional[LayoutSpacing] = None,
) -> LayoutResult:
    """
    Distribute identifiers over the configured sections and lay each one out.

    row_config sections take exactly their configured capacity; the rest get a
    proportional share. Identifiers still unassigned afterwards go to the last
    section with seat numbering continued.
    """
    if not sections:
        raise ConfigurationError("no sections configured")
    if not place_ids:
        return LayoutResult()

    spacing = spacing or LayoutSpacing()
    total = total_capacity(sections)
    logger.info(f"[MANUAL-LAYOUT] {len(sections)} sections, capacity={total}, identifiers={len(place_ids)}")

    places: list[Place] = []
    warnings: list[GeometryWarning] = []
    placed_in_last = 0
    cursor = 0
    for i, section in enumerate(sections):
        capacity = section.effective_capacity()
        if capacity == 0:
            continue
        if section.row_config:
            allocation = min(capacity, len(place_ids) - cursor)
        else:
            allocation = math.floor(capacity / total * len(place_ids))
        result = layout_section(section, place_ids[cursor : cursor + allocation], spacing)
        cursor += allocation
        places.extend(result.places)
        warnings.extend(result.warnings)
        if i == len(sections) - 1:
            placed_in_last = len(result.places)

    if cursor < len(place_ids):
        last = sections[-1]
        leftover = place_ids[cursor:]
        warnings.append(
            geometry_warning(
                WarningKind.leftover_identifiers,
                f"{len(leftover)} identifiers beyond the sections' allocation were assigned to section {last.name}",
                section=last.name,
                expected=len(leftover),
            )
        )
        result = layout_section(last, leftover, spacing, seat_offset=placed_in_last)
        places.extend(result.places)
        warnings.extend(result.warnings)

    return LayoutResult(places=places, warnings=warnings)
