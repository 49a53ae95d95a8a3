"""
Polygon guard for extension tiles.

Obstacles (fences, walls, drainage, houses, paving areas) must not contain any
tile corner; a property ``boundary`` must contain all of them. Tiles are
checked row by row and the first failure stops the walk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import Polygon

from paving_engine.contracts import PaverRect, Point, PoolPlacement
from paving_engine.geometry import local_to_world
from paving_engine.scene import ComponentType, SceneComponent, component_polygon

logger = logging.getLogger(__name__)

OBSTACLE_TYPES = frozenset({
    ComponentType.FENCE,
    ComponentType.WALL,
    ComponentType.DRAINAGE,
    ComponentType.HOUSE,
    ComponentType.PAVING_AREA,
})


@dataclass(frozen=True)
class ExtensionValidation:
    valid_pavers: List[PaverRect] = field(default_factory=list)
    hit_boundary: bool = False
    boundary_id: Optional[str] = None


def paver_to_world(rect: PaverRect, placement: PoolPlacement) -> List[Point]:
    """Corners of a pool-local tile in world units."""
    return [local_to_world(corner, placement) for corner in rect.corners()]


def validate_extension_pavers(
    pavers: Sequence[PaverRect],
    placement: PoolPlacement,
    components: Iterable[SceneComponent],
    exclude_id: Optional[str] = None,
) -> ExtensionValidation:
    """Keep tiles in ascending row order up to the first invalid one."""
    if not pavers:
        return ExtensionValidation()

    obstacles, boundaries = _collect_polygons(components, exclude_id)
    ordered = sorted(pavers, key=lambda p: p.meta.row_index if p.meta else 0)

    valid: List[PaverRect] = []
    for paver in ordered:
        corners = np.asarray(paver_to_world(paver, placement), dtype=float)
        failed = _first_violation(corners, obstacles, boundaries)
        if failed is not None:
            row = paver.meta.row_index if paver.meta else 0
            logger.debug("Tile in row %d blocked by %s", row, failed)
            return ExtensionValidation(valid_pavers=valid, hit_boundary=True, boundary_id=failed)
        valid.append(paver)

    return ExtensionValidation(valid_pavers=valid)


def _collect_polygons(
    components: Iterable[SceneComponent],
    exclude_id: Optional[str],
) -> Tuple[List[Tuple[str, Polygon]], List[Tuple[str, Polygon]]]:
    obstacles = []
    boundaries = []
    for component in components:
        if component.id == exclude_id:
            continue
        if component.type not in OBSTACLE_TYPES and component.type is not ComponentType.BOUNDARY:
            continue
        outline = component_polygon(component)
        if outline is None:
            continue
        polygon = Polygon(outline)
        if not polygon.is_valid:
            polygon = polygon.buffer(0)
        shapely.prepare(polygon)
        if component.type is ComponentType.BOUNDARY:
            boundaries.append((component.id, polygon))
        else:
            obstacles.append((component.id, polygon))
    return obstacles, boundaries


def _first_violation(
    corners: np.ndarray,
    obstacles: List[Tuple[str, Polygon]],
    boundaries: List[Tuple[str, Polygon]],
) -> Optional[str]:
    xs, ys = corners[:, 0], corners[:, 1]
    for component_id, polygon in obstacles:
        if shapely.contains_xy(polygon, xs, ys).any():
            return component_id
    for component_id, polygon in boundaries:
        if not shapely.intersects_xy(polygon, xs, ys).all():
            return component_id
    return None
