"""
Drag-to-extend coping rows.

Each coping edge carries an ``EdgeExtensionState``. A drag on an edge is an
explicit ``EdgeDragSession``: ``start_drag`` snapshots the edge, ``move_drag``
computes a preview from the drag distance and the nearest boundary ahead of
the edge, ``end_drag`` commits the preview and ``cancel_drag`` restores the
snapshot. Rows are laid with the same corner-first axis plan as the coping
ring, so extension tiles line up with the coping tiles beneath them.

Pool geometry is in pool-local mm; rays are cast in world units through the
pool's ``PoolPlacement``.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from paving_engine.axis_plan import plan_axis
from paving_engine.boundary_ray import find_nearest_boundary
from paving_engine.contracts import (
    AxisPlan,
    BoundaryHit,
    CopingConfig,
    CopingEdgeId,
    DragPreview,
    EdgeDragSession,
    EdgeExtensionState,
    ExtensionConfig,
    PaverRect,
    Point,
    PoolPlacement,
    PoolSpec,
    RowFill,
)
from paving_engine.geometry import direction_to_world, local_to_world
from paving_engine.pool_coping import EDGE_ORDER, project_row, row_offset, width_axis_length
from paving_engine.scene import SceneComponent
from paving_engine.tiles import GROUT_MM, MIN_BOUNDARY_CUT_ROW_MM
from paving_engine.validation import ExtensionValidation, validate_extension_pavers

logger = logging.getLogger(__name__)

EdgesState = Dict[CopingEdgeId, EdgeExtensionState]

_OUTWARD = {
    CopingEdgeId.LEFT_SIDE: (0.0, -1.0),
    CopingEdgeId.RIGHT_SIDE: (0.0, 1.0),
    CopingEdgeId.SHALLOW_END: (-1.0, 0.0),
    CopingEdgeId.DEEP_END: (1.0, 0.0),
}


def rows_from_distance(
    distance: float,
    reached_boundary: bool,
    row_depth: float,
    grout: float = GROUT_MM,
    min_boundary_cut_row: float = MIN_BOUNDARY_CUT_ROW_MM,
) -> RowFill:
    """Convert an outward distance into full rows plus an optional cut row.

    A cut row is only laid when the boundary was reached and the leftover is
    at least ``grout + min_boundary_cut_row``; otherwise one full row is given
    back and the leftover retested.
    """
    unit = row_depth + grout
    if unit <= 0 or distance <= 0:
        return RowFill(full_rows=0)

    full = int(math.floor(distance / unit))
    remaining = distance - full * unit
    if not reached_boundary:
        return RowFill(full_rows=full)

    threshold = grout + min_boundary_cut_row
    if remaining >= threshold:
        return RowFill(full_rows=full, cut_row_depth=remaining - grout)
    if full > 0:
        full -= 1
        remaining = distance - full * unit
        if remaining >= threshold:
            return RowFill(full_rows=full, cut_row_depth=remaining - grout)
    return RowFill(full_rows=full)


def along_and_depth(config: CopingConfig) -> Tuple[float, float]:
    """Tile size parallel to an edge and in its outward direction.

    Tiles keep one orientation around the whole pool, so sides and ends
    share the same pair.
    """
    return config.tile_along, config.tile_inward


def initial_edges_state(config: CopingConfig) -> EdgesState:
    """Fresh per-edge state; the coping ring's rows count as existing rows."""
    return {edge: EdgeExtensionState(current_rows=config.rows_for(edge)) for edge in EDGE_ORDER}


def dynamic_edge_length(
    edge: CopingEdgeId,
    pool: PoolSpec,
    config: CopingConfig,
    edges_state: EdgesState,
) -> float:
    """Edge length including the corner wrap of the current side rows."""
    if edge.is_side:
        return pool.length
    side_rows = max(
        _current_rows(edges_state, CopingEdgeId.LEFT_SIDE, config),
        _current_rows(edges_state, CopingEdgeId.RIGHT_SIDE, config),
    )
    return width_axis_length(pool, config, side_rows)


def axis_plan_for_edge(
    edge: CopingEdgeId,
    pool: PoolSpec,
    config: CopingConfig,
    edges_state: EdgesState,
) -> AxisPlan:
    along, _ = along_and_depth(config)
    length = dynamic_edge_length(edge, pool, config, edges_state)
    return plan_axis(length, along, config.grout, config.axis_min_cut)


def outer_face_offset(rows: int, row_depth: float, grout: float) -> float:
    """Waterline to the outer face of ``rows`` stacked full rows."""
    if rows <= 0:
        return 0.0
    return rows * row_depth + (rows - 1) * grout


def build_row_pavers(
    edge: CopingEdgeId,
    plan: AxisPlan,
    row_index: int,
    row_depth: float,
    is_boundary_cut_row: bool,
    pool: PoolSpec,
    config: CopingConfig,
) -> List[PaverRect]:
    """One row at absolute ``row_index``; a cut row keeps the full-row pitch."""
    _, full_depth = along_and_depth(config)
    offset = row_offset(row_index, full_depth, config.grout)
    return project_row(edge, plan, pool, offset, row_depth, row_index, is_boundary_cut_row)


def build_extension_rows(
    edge: CopingEdgeId,
    pool: PoolSpec,
    config: CopingConfig,
    edges_state: EdgesState,
    fill: RowFill,
) -> List[PaverRect]:
    """Tiles for ``fill`` laid outward from the edge's current rows."""
    plan = axis_plan_for_edge(edge, pool, config, edges_state)
    _, depth = along_and_depth(config)
    start = edges_state[edge].current_rows

    pavers: List[PaverRect] = []
    for i in range(fill.full_rows):
        pavers.extend(build_row_pavers(edge, plan, start + i, depth, False, pool, config))
    if fill.cut_row_depth is not None and fill.cut_row_depth > 0:
        row = start + fill.full_rows
        pavers.extend(build_row_pavers(edge, plan, row, fill.cut_row_depth, True, pool, config))
    return pavers


def edge_ray(
    edge: CopingEdgeId,
    pool: PoolSpec,
    placement: PoolPlacement,
    config: CopingConfig,
    state: EdgeExtensionState,
) -> Tuple[Point, Point]:
    """World-space ray from the middle of the edge's outer face, pointing outward."""
    _, depth = along_and_depth(config)
    offset = outer_face_offset(state.current_rows, depth, config.grout)
    if edge is CopingEdgeId.LEFT_SIDE:
        local = (pool.length / 2.0, -offset)
    elif edge is CopingEdgeId.RIGHT_SIDE:
        local = (pool.length / 2.0, pool.width + offset)
    elif edge is CopingEdgeId.SHALLOW_END:
        local = (-offset, pool.width / 2.0)
    else:
        local = (pool.length + offset, pool.width / 2.0)
    return local_to_world(local, placement), direction_to_world(_OUTWARD[edge], placement)


def nearest_boundary_for_edge(
    edge: CopingEdgeId,
    pool: PoolSpec,
    placement: PoolPlacement,
    config: CopingConfig,
    state: EdgeExtensionState,
    components: Iterable[SceneComponent],
) -> Optional[BoundaryHit]:
    """Nearest boundary ahead of the edge, with ``distance`` in mm."""
    origin, direction = edge_ray(edge, pool, placement, config, state)
    hit = find_nearest_boundary(origin, direction, components, exclude_id=pool.pool_id)
    if hit is None or placement.scale <= 0:
        return hit
    return replace(hit, distance=hit.distance / placement.scale)


class ExtensionRowBuilder:
    """Owns the per-edge extension state of one placed pool.

    Only one drag session may be open per edge. Previews never touch state;
    only ``end_drag`` and ``cancel_drag`` do.
    """

    def __init__(
        self,
        pool: PoolSpec,
        config: CopingConfig,
        placement: PoolPlacement = PoolPlacement(),
        edges_state: Optional[EdgesState] = None,
        extension: ExtensionConfig = ExtensionConfig(),
    ):
        self.pool = pool
        self.config = config
        self.placement = placement
        self.extension = extension
        self.edges_state: EdgesState = edges_state if edges_state is not None else initial_edges_state(config)
        for edge in EDGE_ORDER:
            self.edges_state.setdefault(edge, EdgeExtensionState(current_rows=config.rows_for(edge)))
        self._sessions: Dict[CopingEdgeId, EdgeDragSession] = {}

    def state(self, edge: CopingEdgeId) -> EdgeExtensionState:
        return self.edges_state[edge]

    def all_pavers(self) -> List[PaverRect]:
        """Committed extension tiles of every edge, in edge order."""
        pavers: List[PaverRect] = []
        for edge in EDGE_ORDER:
            pavers.extend(self.edges_state[edge].pavers)
        return pavers

    def is_dragging(self, edge: CopingEdgeId) -> bool:
        return edge in self._sessions

    def start_drag(self, edge: CopingEdgeId) -> EdgeDragSession:
        if edge in self._sessions:
            raise ValueError(f"Edge {edge.value} already has a drag in progress")
        session = EdgeDragSession(edge=edge, snapshot=copy.deepcopy(self.edges_state[edge]))
        self._sessions[edge] = session
        logger.debug("Drag started on %s", edge.value)
        return session

    def move_drag(
        self,
        session: EdgeDragSession,
        drag_distance: float,
        components: Iterable[SceneComponent] = (),
    ) -> DragPreview:
        """Preview for ``drag_distance`` mm past the edge's current outer face."""
        self._check_owned(session)
        edge = session.edge
        state = self.edges_state[edge]
        _, depth = along_and_depth(self.config)

        hit = nearest_boundary_for_edge(
            edge, self.pool, self.placement, self.config, state, components,
        )
        drag = max(0.0, float(drag_distance))
        if hit is not None:
            boundary = max(0.0, hit.distance - self.extension.boundary_clearance)
            max_distance = min(drag, boundary)
            reached = drag >= boundary
        else:
            max_distance = drag
            reached = False

        fill = rows_from_distance(
            max_distance, reached, depth, self.config.grout, self.extension.min_boundary_cut_row,
        )
        pavers = build_extension_rows(edge, self.pool, self.config, self.edges_state, fill)
        preview = DragPreview(
            edge=edge,
            full_rows_to_add=fill.full_rows,
            cut_row_depth=fill.cut_row_depth,
            reached_boundary=reached,
            boundary_id=hit.component_id if hit is not None else None,
            drag_distance=drag,
            max_distance=max_distance,
            pavers=tuple(pavers),
        )
        session.preview = preview
        logger.debug(
            "Drag %s: %.1fmm -> %d rows, cut %s, boundary %s",
            edge.value, drag, fill.full_rows, fill.cut_row_depth, preview.boundary_id,
        )
        return preview

    def validate_preview(
        self,
        session: EdgeDragSession,
        components: Iterable[SceneComponent],
    ) -> ExtensionValidation:
        """Check the session's preview tiles against obstacles and the property line."""
        self._check_owned(session)
        pavers = list(session.preview.pavers) if session.preview is not None else []
        result = validate_extension_pavers(
            pavers, self.placement, components, exclude_id=self.pool.pool_id,
        )
        if result.hit_boundary:
            logger.warning(
                "Extension on %s truncated at %s: %d of %d tiles valid",
                session.edge.value, result.boundary_id, len(result.valid_pavers), len(pavers),
            )
        return result

    def end_drag(self, session: EdgeDragSession) -> List[PaverRect]:
        """Commit the session's last preview and return the tiles added."""
        self._check_owned(session)
        edge = session.edge
        preview = session.preview
        del self._sessions[edge]

        if preview is None or (preview.full_rows_to_add == 0 and not preview.has_cut_row):
            logger.debug("Drag on %s ended without new rows", edge.value)
            return []

        state = self.edges_state[edge]
        if state.cut_row_depth is not None:
            state.pavers = [p for p in state.pavers if not (p.meta and p.meta.is_boundary_cut_row)]
            state.cut_row_depth = None

        fill = RowFill(full_rows=preview.full_rows_to_add, cut_row_depth=preview.cut_row_depth)
        added = build_extension_rows(edge, self.pool, self.config, self.edges_state, fill)
        state.pavers.extend(added)
        state.current_rows += fill.full_rows
        state.cut_row_depth = fill.cut_row_depth
        state.reached_boundary = preview.reached_boundary
        state.boundary_id = preview.boundary_id if preview.reached_boundary else None

        logger.info(
            "Committed %d rows%s on %s (%d tiles)",
            fill.full_rows,
            " + cut row" if fill.has_cut_row else "",
            edge.value,
            len(added),
        )
        return added

    def cancel_drag(self, session: EdgeDragSession) -> None:
        """Restore the edge to its state when the drag started."""
        self._check_owned(session)
        self.edges_state[session.edge] = copy.deepcopy(session.snapshot)
        del self._sessions[session.edge]
        logger.info("Drag on %s cancelled", session.edge.value)

    def _check_owned(self, session: EdgeDragSession) -> None:
        if self._sessions.get(session.edge) is not session:
            raise ValueError(f"Session for {session.edge.value} is not active on this builder")


def _current_rows(edges_state: EdgesState, edge: CopingEdgeId, config: CopingConfig) -> int:
    state = edges_state.get(edge)
    if state is None:
        return config.rows_for(edge)
    return state.current_rows
