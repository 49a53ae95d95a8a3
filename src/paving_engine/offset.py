"""Outward polygon offset used for coping-band outlines."""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from paving_engine.contracts import Point, Ring, to_point
from paving_engine.geometry import PolygonLike, is_clockwise

MIN_MITER_COS = 0.3
PARALLEL_EPS = 1e-10
EQUAL_DISTANCE_EPS = 0.01

Vec = Tuple[float, float]


def polygon_winding(points: PolygonLike) -> str:
    """``"cw"`` or ``"ccw"`` as seen on a Y-down canvas."""
    return "cw" if is_clockwise(points) else "ccw"


def expand_polygon(points: PolygonLike, distance: float) -> List[Point]:
    """Offset every edge outward by ``distance`` (negative insets).

    Vertices move along the bisector of the adjacent outward normals; sharp
    corners are mitred up to ``1 / MIN_MITER_COS`` times the distance.
    """
    raw = [to_point(p) for p in points]
    ring = Ring.from_points(raw)
    if ring.is_degenerate:
        return raw
    cw = is_clockwise(ring)
    pts = ring.points
    n = len(pts)

    out: List[Point] = []
    for i in range(n):
        prev, cur, nxt = pts[i - 1], pts[i], pts[(i + 1) % n]
        e_in = _unit(prev, cur)
        e_out = _unit(cur, nxt)
        out.append(_bisector_offset(cur, e_in, e_out, distance, cw))
    return out


def expand_polygon_per_edge(points: PolygonLike, distances: Sequence[float]) -> List[Point]:
    """Offset edge ``i -> i+1`` outward by ``distances[i]``.

    Each vertex is the intersection of its two offset edge lines. Missing
    distances count as zero.
    """
    raw = [to_point(p) for p in points]
    ring = Ring.from_points(raw)
    if ring.is_degenerate:
        return raw
    cw = is_clockwise(ring)
    pts = ring.points
    n = len(pts)
    dist = [float(d) for d in list(distances)[:n]]
    dist += [0.0] * (n - len(dist))

    out: List[Point] = []
    for i in range(n):
        prev, cur, nxt = pts[i - 1], pts[i], pts[(i + 1) % n]
        d_in = dist[i - 1]
        d_out = dist[i]
        e_in = _unit(prev, cur)
        e_out = _unit(cur, nxt)

        if abs(d_in - d_out) < EQUAL_DISTANCE_EPS:
            out.append(_bisector_offset(cur, e_in, e_out, d_out, cw))
            continue

        n_in = _outward_normal(e_in, cw)
        n_out = _outward_normal(e_out, cw)
        a = (cur.x + n_in[0] * d_in, cur.y + n_in[1] * d_in)
        b = (cur.x + n_out[0] * d_out, cur.y + n_out[1] * d_out)
        cross = _cross(e_in, e_out)
        if abs(cross) < PARALLEL_EPS:
            out.append(Point((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0))
            continue
        t = _cross((b[0] - a[0], b[1] - a[1]), e_out) / cross
        out.append(Point(a[0] + e_in[0] * t, a[1] + e_in[1] * t))
    return out


def _unit(a: Point, b: Point) -> Vec:
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0:
        return 0.0, 0.0
    return dx / length, dy / length


def _outward_normal(direction: Vec, clockwise: bool) -> Vec:
    dx, dy = direction
    if clockwise:
        return dy, -dx
    return -dy, dx


def _cross(a: Vec, b: Vec) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _bisector_offset(cur: Point, e_in: Vec, e_out: Vec, distance: float, cw: bool) -> Point:
    n_in = _outward_normal(e_in, cw)
    n_out = _outward_normal(e_out, cw)
    bx = n_in[0] + n_out[0]
    by = n_in[1] + n_out[1]
    length = math.hypot(bx, by)
    if length < PARALLEL_EPS:
        # hairpin: push the tip forward along the incoming edge
        return Point(cur.x + e_in[0] * distance, cur.y + e_in[1] * distance)
    bx /= length
    by /= length
    cos_half = bx * n_in[0] + by * n_in[1]
    scale = distance / max(MIN_MITER_COS, abs(cos_half))
    return Point(cur.x + bx * scale, cur.y + by * scale)
