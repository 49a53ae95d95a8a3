"""
Exclude zones: regions a paving-area fill must leave empty.

A pool excludes its coping outer edge when it has coping, otherwise its
waterline. Houses exclude their footprint.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from paving_engine.contracts import (
    CopingConfig,
    CopingEdgeId,
    EdgeExtensionState,
    ExcludeZone,
    Point,
    PoolPlacement,
    PoolSpec,
    Ring,
)
from paving_engine.geometry import bounding_box, local_to_world, point_segment_distance, rectangle
from paving_engine.offset import expand_polygon, expand_polygon_per_edge
from paving_engine.pool_coping import build_coping_pavers
from paving_engine.scene import ComponentType, SceneComponent, component_polygon

logger = logging.getLogger(__name__)


def deep_end_edge_index(outline: Ring, deep_end: Optional[Point]) -> int:
    """Index of the outline edge nearest the deep-end marker, or -1."""
    if deep_end is None or outline.is_degenerate:
        return -1
    best, best_dist = -1, float("inf")
    for i, (a, b) in enumerate(outline.edges()):
        dist = point_segment_distance(deep_end, a, b)
        if dist < best_dist:
            best, best_dist = i, dist
    return best


def pool_coping_outline(pool: PoolSpec, config: CopingConfig) -> List[Point]:
    """Outer edge of the coping band in pool-local mm.

    Every edge is pushed out by ``tile_inward * rows_sides + grout``; the edge
    nearest the deep-end marker by ``tile_inward * rows_deep + grout``.
    """
    outline = pool.waterline
    band = config.tile_inward * config.rows_sides + config.grout
    deep_band = config.tile_inward * config.rows_deep + config.grout
    deep_idx = deep_end_edge_index(outline, pool.deep_end)

    if deep_idx < 0 or deep_band <= band:
        return expand_polygon(outline, band)
    distances = [deep_band if i == deep_idx else band for i in range(len(outline))]
    return expand_polygon_per_edge(outline, distances)


def pool_exclude_zone(
    pool: PoolSpec,
    placement: PoolPlacement,
    config: Optional[CopingConfig] = None,
    edges_state: Optional[Dict[CopingEdgeId, EdgeExtensionState]] = None,
    owner_id: Optional[str] = None,
) -> ExcludeZone:
    """World-space exclude zone of a placed pool.

    Without coping this is the waterline. With coping it is the coping outer
    edge, or, once any edge has extension pavers, the bounding rectangle of
    the coping ring and all extension pavers.
    """
    if config is None:
        local = list(pool.waterline)
    elif edges_state and any(state.pavers for state in edges_state.values()):
        local = _extended_outline(pool, config, edges_state)
    else:
        local = pool_coping_outline(pool, config)

    world = [local_to_world(p, placement) for p in local]
    return ExcludeZone(outline=Ring.from_points(world), owner_id=owner_id or pool.pool_id)


def house_exclude_zone(component: SceneComponent) -> Optional[ExcludeZone]:
    if component.type is not ComponentType.HOUSE:
        return None
    polygon = component_polygon(component)
    if polygon is None:
        return None
    return ExcludeZone.from_points(polygon, component.id)


def scene_exclude_zones(
    components: Iterable[SceneComponent],
    exclude_id: Optional[str] = None,
) -> List[ExcludeZone]:
    """House footprints of a scene snapshot, skipping ``exclude_id``."""
    zones = []
    for component in components:
        if component.id == exclude_id:
            continue
        zone = house_exclude_zone(component)
        if zone is not None:
            zones.append(zone)
    return zones


def _extended_outline(
    pool: PoolSpec,
    config: CopingConfig,
    edges_state: Dict[CopingEdgeId, EdgeExtensionState],
) -> List[Point]:
    corners = []
    for rect in build_coping_pavers(pool, config):
        corners.extend(rect.corners())
    for state in edges_state.values():
        for rect in state.pavers:
            corners.extend(rect.corners())
    bbox = bounding_box(corners)
    logger.debug("Extended exclude zone for %s: %s", pool.pool_id, bbox)
    return rectangle(bbox.min_x, bbox.min_y, bbox.width, bbox.height)
