"""
Ray casting against the boundary-capable components of a scene snapshot.

Hits are plain values; they are only meaningful against the snapshot they
were computed from.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from paving_engine.contracts import BoundaryHit, Point, Segment, to_point
from paving_engine.geometry import rectangle, rotate, transform_points
from paving_engine.scene import LINEAR_TYPES, POLYGON_TYPES, RECTANGLE_TYPES, SceneComponent

logger = logging.getLogger(__name__)

PARALLEL_EPS = 1e-10


def ray_segment_intersection(
    origin: Sequence[float],
    direction: Sequence[float],
    start: Sequence[float],
    end: Sequence[float],
) -> Optional[Tuple[float, Point]]:
    """Solve ``origin + t*direction = start + u*(end - start)``.

    Returns ``(t, point)`` for ``t >= 0`` and ``0 <= u <= 1``; None when the
    ray misses or runs parallel to the segment.
    """
    ox, oy = origin[0], origin[1]
    rx, ry = direction[0], direction[1]
    dx = end[0] - start[0]
    dy = end[1] - start[1]

    det = rx * dy - ry * dx
    if abs(det) < PARALLEL_EPS:
        return None

    t = ((start[0] - ox) * dy - (start[1] - oy) * dx) / det
    u = ((start[0] - ox) * ry - (start[1] - oy) * rx) / det
    if t >= 0 and 0 <= u <= 1:
        return t, Point(ox + t * rx, oy + t * ry)
    return None


def component_segments(component: SceneComponent) -> List[Segment]:
    """World-space edges a ray can hit; empty for non-boundary components."""
    ctype = component.type
    if ctype in LINEAR_TYPES:
        length = component.linear_length
        tip = rotate((length, 0.0), component.rotation)
        start = component.position
        return [Segment(start, Point(start.x + tip.x, start.y + tip.y))]

    if ctype in POLYGON_TYPES:
        pts = transform_points(component.points, component.position, component.rotation)
    elif ctype in RECTANGLE_TYPES:
        local = rectangle(0.0, 0.0, component.width, component.height)
        pts = transform_points(local, component.position, component.rotation)
    else:
        return []

    if len(pts) < 2:
        return []
    return [Segment(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]


def find_nearest_boundary(
    origin: Sequence[float],
    direction: Sequence[float],
    components: Iterable[SceneComponent],
    exclude_id: Optional[str] = None,
) -> Optional[BoundaryHit]:
    """Closest boundary hit with ``t > 0`` along the ray.

    ``distance`` is measured in multiples of ``direction``, so a unit
    direction gives world distance. Ties keep the first hit found.
    """
    origin = to_point(origin)
    direction = to_point(direction)
    nearest: Optional[BoundaryHit] = None

    for component in components:
        if not component.is_boundary_capable or component.id == exclude_id:
            continue
        for segment in component_segments(component):
            hit = ray_segment_intersection(origin, direction, segment.start, segment.end)
            if hit is None:
                continue
            t, point = hit
            if t > 0 and (nearest is None or t < nearest.distance):
                nearest = BoundaryHit(
                    component_id=component.id,
                    component_type=component.type.value,
                    distance=t,
                    intersection=point,
                    segment=segment,
                )

    if nearest is not None:
        logger.debug(
            "Ray from %s hit %s %s at %.2f",
            tuple(origin), nearest.component_type, nearest.component_id, nearest.distance,
        )
    return nearest
