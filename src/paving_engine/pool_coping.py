"""
Four-sided coping for a rectangular pool.

Long sides (left/right) share the length-axis plan, ends (shallow/deep) share
the width-axis plan. The ends own the corners: their effective length wraps
around the outer face of the side bands, joints between side rows included.

Geometry is emitted in the pool-local frame (Y down, waterline
``[0, length] x [0, width]``).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from paving_engine.axis_plan import layout_axis, plan_axis
from paving_engine.contracts import (
    AxisPlan,
    CopingConfig,
    CopingEdgeId,
    CopingPlan,
    EdgeTotals,
    PaverMeta,
    PaverRect,
    PoolSpec,
)

logger = logging.getLogger(__name__)

EDGE_ORDER = (
    CopingEdgeId.LEFT_SIDE,
    CopingEdgeId.RIGHT_SIDE,
    CopingEdgeId.SHALLOW_END,
    CopingEdgeId.DEEP_END,
)


def width_axis_length(pool: PoolSpec, config: CopingConfig, side_rows: Optional[int] = None) -> float:
    """End-band length including the corner wrap of the side bands."""
    rows = config.rows_sides if side_rows is None else side_rows
    return pool.width + 2 * (rows * config.tile_inward + max(0, rows - 1) * config.grout)


def plan_pool_coping(pool: PoolSpec, config: CopingConfig) -> CopingPlan:
    """Plan coping for all four edges of a rectangular pool."""
    length_axis = plan_axis(pool.length, config.tile_along, config.grout, config.axis_min_cut)
    width_axis = plan_axis(
        width_axis_length(pool, config), config.tile_along, config.grout, config.axis_min_cut,
    )

    left = EdgeTotals.from_plan(length_axis, config.rows_sides)
    right = EdgeTotals.from_plan(length_axis, config.rows_sides)
    shallow = EdgeTotals.from_plan(width_axis, config.rows_shallow)
    deep = EdgeTotals.from_plan(width_axis, config.rows_deep)

    edges = (left, right, shallow, deep)
    total_full = sum(e.full_pavers for e in edges)
    total_partial = sum(e.partial_pavers for e in edges)

    logger.debug(
        "Coping plan %s: %d full, %d partial", pool.pool_id, total_full, total_partial,
    )
    return CopingPlan(
        length_axis=length_axis,
        width_axis=width_axis,
        left_side=left,
        right_side=right,
        shallow_end=shallow,
        deep_end=deep,
        total_full_pavers=total_full,
        total_partial_pavers=total_partial,
        total_pavers=total_full + total_partial,
    )


def row_offset(row_index: int, row_pitch_depth: float, grout: float) -> float:
    """Distance from the waterline to the inner face of row ``row_index``."""
    return row_index * (row_pitch_depth + grout)


def along_origin(edge: CopingEdgeId, pool: PoolSpec, plan: AxisPlan) -> float:
    """Pool-local coordinate where the edge's axis layout starts.

    Sides start at the waterline corner; ends are centred on the pool width so
    their corner wrap reaches equally past both sides.
    """
    if edge.is_side:
        return 0.0
    return -(plan.edge_length - pool.width) / 2.0


def project_row(
    edge: CopingEdgeId,
    plan: AxisPlan,
    pool: PoolSpec,
    offset: float,
    depth: float,
    row_index: int,
    is_boundary_cut_row: bool = False,
) -> List[PaverRect]:
    """Project one row of ``plan`` onto ``edge``.

    Args:
        offset: waterline to the row's inner face.
        depth: row depth in the outward direction.
    """
    meta = PaverMeta(edge=edge, row_index=row_index, is_boundary_cut_row=is_boundary_cut_row)
    start = along_origin(edge, pool, plan)
    rects: List[PaverRect] = []

    for span in layout_axis(plan):
        along = start + span.start
        if edge is CopingEdgeId.LEFT_SIDE:
            rect = PaverRect(along, -offset - depth, span.length, depth, span.is_partial, meta=meta)
        elif edge is CopingEdgeId.RIGHT_SIDE:
            rect = PaverRect(along, pool.width + offset, span.length, depth, span.is_partial, meta=meta)
        elif edge is CopingEdgeId.SHALLOW_END:
            rect = PaverRect(-offset - depth, along, depth, span.length, span.is_partial, meta=meta)
        else:
            rect = PaverRect(pool.length + offset, along, depth, span.length, span.is_partial, meta=meta)
        rects.append(rect)
    return rects


def build_coping_pavers(
    pool: PoolSpec,
    config: CopingConfig,
    plan: Optional[CopingPlan] = None,
) -> List[PaverRect]:
    """Absolute tile rectangles of the base coping ring, pool-local mm."""
    if plan is None:
        plan = plan_pool_coping(pool, config)

    pavers: List[PaverRect] = []
    for edge in EDGE_ORDER:
        axis = plan.length_axis if edge.is_side else plan.width_axis
        for row in range(config.rows_for(edge)):
            offset = row_offset(row, config.tile_inward, config.grout)
            pavers.extend(project_row(edge, axis, pool, offset, config.tile_inward, row))
    return pavers


def coping_area_m2(pool: PoolSpec, config: CopingConfig) -> float:
    """Gross coping band area in m² (band length x inward x rows, mm²)."""
    ends_length = width_axis_length(pool, config)
    area_mm2 = (
        2 * pool.length * config.tile_inward * config.rows_sides
        + ends_length * config.tile_inward * config.rows_shallow
        + ends_length * config.tile_inward * config.rows_deep
    )
    return area_mm2 / 1_000_000
