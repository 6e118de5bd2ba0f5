from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from shapely.geometry import Point as ShapelyPoint, Polygon as ShapelyPolygon

from .errors import GeometryError
from .models import Bounds, Obstruction, Point, SectionShape


@dataclass(frozen=True)
class BBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0


@dataclass(frozen=True)
class Span:
    left_x: float
    right_x: float


def _deg_to_rad(d: float) -> float:
    return d * math.pi / 180.0


def _rad_to_deg(r: float) -> float:
    return r * 180.0 / math.pi


def as_tuples(points: Iterable[Point]) -> list[tuple[float, float]]:
    return [(float(p.x), float(p.y)) for p in points]


def _shapely_polygon(poly_points: Sequence[tuple[float, float]]) -> ShapelyPolygon:
    # close polygon if needed
    pts = list(poly_points)
    if pts[0] != pts[-1]:
        pts = pts + [pts[0]]
    return ShapelyPolygon(pts)


def polygon_contains_point(poly_points: Sequence[tuple[float, float]], x: float, y: float) -> bool:
    if len(poly_points) < 3:
        return False
    return _shapely_polygon(poly_points).contains(ShapelyPoint(x, y))


def polygon_covers_point(poly_points: Sequence[tuple[float, float]], x: float, y: float) -> bool:
    # Like contains, but the boundary counts as inside.
    if len(poly_points) < 3:
        return False
    return _shapely_polygon(poly_points).covers(ShapelyPoint(x, y))


def bounding_box(poly_points: Sequence[tuple[float, float]]) -> BBox:
    if not poly_points:
        raise GeometryError("cannot take the bounding box of an empty polygon")
    xs = [p[0] for p in poly_points]
    ys = [p[1] for p in poly_points]
    return BBox(min(xs), min(ys), max(xs), max(ys))


def bounds_box(bounds: Bounds) -> BBox:
    return BBox(bounds.x1, bounds.y1, bounds.x2, bounds.y2)


def polygon_span_at_y(poly_points: Sequence[tuple[float, float]], y: float) -> Optional[Span]:
    """
    Leftmost/rightmost polygon boundary crossing at height y.

    Scans every edge rather than using the bounding box, so trapezoids and
    irregular shapes narrow correctly. Returns None when y misses the polygon.
    """
    if len(poly_points) < 3:
        return None

    xs: list[float] = []
    n = len(poly_points)
    for i in range(n):
        x1, y1 = poly_points[i]
        x2, y2 = poly_points[(i + 1) % n]
        if not (min(y1, y2) <= y <= max(y1, y2)):
            continue
        if abs(y1 - y2) < 0.001:
            # horizontal edge
            xs.extend((x1, x2))
        else:
            t = (y - y1) / (y2 - y1)
            xs.append(x1 + t * (x2 - x1))

    if len(xs) < 2:
        return None
    return Span(left_x=min(xs), right_x=max(xs))


def point_in_obstruction(x: float, y: float, obstructions: Sequence[Obstruction]) -> bool:
    for ob in obstructions:
        if ob.shape == SectionShape.polygon and len(ob.polygon) >= 3:
            if polygon_contains_point(as_tuples(ob.polygon), x, y):
                return True
        elif ob.bounds is not None:
            b = ob.bounds
            if min(b.x1, b.x2) <= x <= max(b.x1, b.x2) and min(b.y1, b.y2) <= y <= max(b.y1, b.y2):
                return True
    return False


def rotate_point(x: float, y: float, cx: float, cy: float, angle_deg: float) -> tuple[float, float]:
    if angle_deg == 0:
        return x, y
    a = _deg_to_rad(angle_deg)
    cos_a = math.cos(a)
    sin_a = math.sin(a)
    tx = x - cx
    ty = y - cy
    return tx * cos_a - ty * sin_a + cx, tx * sin_a + ty * cos_a + cy


def estimate_rotation_deg(poly_points: Sequence[tuple[float, float]], inset: float = 10.0) -> float:
    """
    Average slope of the polygon's left and right sides, sampled `inset` units
    inside its top and bottom, as an angle in degrees.
    """
    if len(poly_points) < 3:
        return 0.0
    box = bounding_box(poly_points)
    if box.height <= 0:
        return 0.0
    top = polygon_span_at_y(poly_points, box.min_y + inset)
    bottom = polygon_span_at_y(poly_points, box.max_y - inset)
    if top is None or bottom is None:
        return 0.0
    left_slope = (bottom.left_x - top.left_x) / box.height
    right_slope = (bottom.right_x - top.right_x) / box.height
    angle = _rad_to_deg(math.atan((left_slope + right_slope) / 2.0))
    # symmetric shapes cancel out up to float noise
    if abs(angle) < 1e-9:
        return 0.0
    return angle
