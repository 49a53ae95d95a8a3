"""Public API for the pool paving layout engine."""

from paving_engine.area_fill import (
    BoundaryValidation,
    PavingStatistics,
    calculate_statistics,
    covered_area,
    fill_area,
    fill_area_from_origin,
    fill_area_from_vertex,
    validate_boundary,
)
from paving_engine.axis_plan import layout_axis, plan_axis
from paving_engine.boundary_ray import component_segments, find_nearest_boundary
from paving_engine.contracts import (
    AxisPlan,
    BoundaryHit,
    CentreMode,
    CopingConfig,
    CopingEdgeId,
    CopingPlan,
    DragPreview,
    EdgeDragSession,
    EdgeExtensionState,
    ExcludeZone,
    ExtensionConfig,
    PaverMeta,
    PaverRect,
    Point,
    PoolPlacement,
    PoolSpec,
    Ring,
)
from paving_engine.exclude_zones import house_exclude_zone, pool_coping_outline, pool_exclude_zone
from paving_engine.extension import ExtensionRowBuilder, initial_edges_state, rows_from_distance
from paving_engine.offset import expand_polygon, expand_polygon_per_edge
from paving_engine.pool_coping import build_coping_pavers, coping_area_m2, plan_pool_coping
from paving_engine.scene import ComponentType, SceneComponent
from paving_engine.tiling_frame import TilingFrame, create_frame, ensure_frame
from paving_engine.validation import ExtensionValidation, validate_extension_pavers

__all__ = [
    "AxisPlan",
    "BoundaryHit",
    "BoundaryValidation",
    "CentreMode",
    "ComponentType",
    "CopingConfig",
    "CopingEdgeId",
    "CopingPlan",
    "DragPreview",
    "EdgeDragSession",
    "EdgeExtensionState",
    "ExcludeZone",
    "ExtensionConfig",
    "ExtensionRowBuilder",
    "ExtensionValidation",
    "PaverMeta",
    "PaverRect",
    "PavingStatistics",
    "Point",
    "PoolPlacement",
    "PoolSpec",
    "Ring",
    "SceneComponent",
    "TilingFrame",
    "build_coping_pavers",
    "calculate_statistics",
    "component_segments",
    "coping_area_m2",
    "covered_area",
    "create_frame",
    "ensure_frame",
    "expand_polygon",
    "expand_polygon_per_edge",
    "fill_area",
    "fill_area_from_origin",
    "fill_area_from_vertex",
    "find_nearest_boundary",
    "house_exclude_zone",
    "initial_edges_state",
    "layout_axis",
    "plan_axis",
    "plan_pool_coping",
    "pool_coping_outline",
    "pool_exclude_zone",
    "rows_from_distance",
    "validate_boundary",
    "validate_extension_pavers",
]
