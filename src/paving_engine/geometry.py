"""
Planar helpers shared by the planners.

Everything here works on plain point sequences (``Point``, tuples or
``Ring``) and never raises for degenerate input.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np

from paving_engine.contracts import BBox, Point, PoolPlacement, Ring

PolygonLike = Iterable[Sequence[float]]


def as_ring(points: PolygonLike) -> Ring:
    return Ring.from_points(points)


def ring_array(points: PolygonLike) -> np.ndarray:
    """(N, 2) float array of an open ring."""
    ring = as_ring(points)
    if not ring.points:
        return np.zeros((0, 2), dtype=float)
    return np.asarray(ring.points, dtype=float)


def bounding_box(points: PolygonLike) -> Optional[BBox]:
    arr = ring_array(points)
    if len(arr) == 0:
        return None
    return BBox(
        min_x=float(arr[:, 0].min()),
        min_y=float(arr[:, 1].min()),
        max_x=float(arr[:, 0].max()),
        max_y=float(arr[:, 1].max()),
    )


def trapezoid_sum(points: PolygonLike) -> float:
    """Sum of (x[i+1] - x[i]) * (y[i+1] + y[i]) over the closed ring.

    Negative means clockwise on a Y-down canvas.
    """
    arr = ring_array(points)
    if len(arr) < 3:
        return 0.0
    nxt = np.roll(arr, -1, axis=0)
    return float(np.sum((nxt[:, 0] - arr[:, 0]) * (nxt[:, 1] + arr[:, 1])))


def is_clockwise(points: PolygonLike) -> bool:
    return trapezoid_sum(points) < 0


def polygon_area(points: PolygonLike) -> float:
    return abs(trapezoid_sum(points)) / 2.0


def points_in_polygon(points: np.ndarray, polygon: PolygonLike) -> np.ndarray:
    """Even-odd test of many points against one polygon.

    Args:
        points: (M, 2) array.
        polygon: ring, open or closed.

    Returns:
        (M,) bool array.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    poly = ring_array(polygon)
    inside = np.zeros(len(pts), dtype=bool)
    if len(poly) < 3 or len(pts) == 0:
        return inside
    px = pts[:, 0]
    py = pts[:, 1]
    n = len(poly)
    j = n - 1
    for i in range(n):
        xi, yi = poly[i]
        xj, yj = poly[j]
        straddles = (yi > py) != (yj > py)
        if yj != yi:
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            inside ^= straddles & (px < x_cross)
        j = i
    return inside


def point_in_polygon(point: Sequence[float], polygon: PolygonLike) -> bool:
    return bool(points_in_polygon(np.asarray([point[0], point[1]], dtype=float), polygon)[0])


def point_segment_distance(point: Sequence[float], start: Sequence[float], end: Sequence[float]) -> float:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point[0] - start[0], point[1] - start[1])
    t = ((point[0] - start[0]) * dx + (point[1] - start[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point[0] - (start[0] + t * dx), point[1] - (start[1] + t * dy))


def rotate(point: Sequence[float], angle_deg: float) -> Point:
    rad = math.radians(angle_deg)
    cos, sin = math.cos(rad), math.sin(rad)
    return Point(point[0] * cos - point[1] * sin, point[0] * sin + point[1] * cos)


def local_to_world(point: Sequence[float], placement: PoolPlacement) -> Point:
    """Pool-local mm to world units."""
    scaled = (point[0] * placement.scale, point[1] * placement.scale)
    rotated = rotate(scaled, placement.rotation_deg)
    return Point(rotated.x + placement.position.x, rotated.y + placement.position.y)


def direction_to_world(vector: Sequence[float], placement: PoolPlacement) -> Point:
    """Rotate a pool-local direction into world space (no scale, no translation)."""
    return rotate(vector, placement.rotation_deg)


def transform_points(points: PolygonLike, position: Sequence[float], rotation_deg: float) -> List[Point]:
    """Rotate local points about the origin, then translate to ``position``."""
    out = []
    for p in as_ring(points):
        r = rotate(p, rotation_deg)
        out.append(Point(r.x + position[0], r.y + position[1]))
    return out


def rectangle(x: float, y: float, width: float, height: float) -> List[Point]:
    return [
        Point(x, y),
        Point(x + width, y),
        Point(x + width, y + height),
        Point(x, y + height),
    ]
