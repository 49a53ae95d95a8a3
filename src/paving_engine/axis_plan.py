"""
Corner-first tile layout along one straight edge.

Tiles are laid from both corners toward the middle at pitch ``U = A + G``;
whatever length is left at the middle is absorbed by a centre group:

    perfect      g0 = G                     (one joint, no cut)
    single cut   g0 = 2G + c                c >= min_cut
    double cut   g0 = 3G + cL + cR          cL, cR >= min_cut

with ``g0 = L - 2pU + 2G`` the centre gap before any cut. When ``g0`` cannot
host a legal cut, one tile is taken off each corner run (``g0 += 2U``) and the
decision is retried. Layouts are symmetric about the edge midpoint.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from paving_engine.contracts import AxisPlan, AxisSpan, CentreMode
from paving_engine.tiles import GROUT_MM, MIN_CUT_MM

logger = logging.getLogger(__name__)

PERFECT_TOLERANCE_MM = 1.0

_CENTRE_JOINTS = {
    CentreMode.PERFECT: 1,
    CentreMode.SINGLE_CUT: 2,
    CentreMode.DOUBLE_CUT: 3,
}


def axis_min_cut(tile_along: float) -> float:
    """Per-axis minimum cut: max(200, floor(along / 2)), so 600-along gives 300."""
    return max(MIN_CUT_MM, float(math.floor(tile_along / 2)))


def plan_axis(
    edge_length: float,
    tile_along: float,
    grout: float = GROUT_MM,
    min_cut: Optional[float] = None,
) -> AxisPlan:
    """Plan one tile row along an edge of length ``edge_length``.

    Args:
        edge_length: L, corner to corner.
        tile_along: A, tile size parallel to the edge.
        grout: G, joint width.
        min_cut: smallest acceptable cut tile; defaults to ``axis_min_cut(A)``.

    Returns:
        AxisPlan. ``meets_min_cut`` is False when no legal cut fits; the plan
        is still a renderable best effort.
    """
    L = max(0.0, float(edge_length))
    A = max(0.0, float(tile_along))
    G = max(0.0, float(grout))
    if min_cut is None:
        min_cut = axis_min_cut(A)
    min_cut = float(min_cut)
    U = A + G

    p = int(math.floor((L + G) / (2 * U))) if U > 0 else 0
    p = max(0, p)
    g0 = L - 2 * p * U + 2 * G
    removed = 0

    while p > 0 and g0 > 0 and g0 < 2 * G + min_cut:
        p -= 1
        removed += 1
        g0 += 2 * U

    centre_mode, cut_sizes = _resolve_centre(g0, G, min_cut)
    meets_min_cut = all(c >= min_cut for c in cut_sizes)

    if not meets_min_cut:
        logger.warning(
            "Edge %.1f with %.1f tiles cannot meet min cut %.1f (cuts %s)",
            L, A, min_cut, list(cut_sizes),
        )

    full_total = 2 * p
    partial_total = len(cut_sizes)
    plan = AxisPlan(
        edge_length=L,
        tile_along=A,
        grout=G,
        min_cut=min_cut,
        pavers_per_corner=p,
        centre_mode=centre_mode,
        cut_sizes=cut_sizes,
        centre_joints=_CENTRE_JOINTS[centre_mode],
        removed_from_each_side=removed,
        gap_before_cuts=g0,
        meets_min_cut=meets_min_cut,
        full_pavers_total=full_total,
        partial_pavers_total=partial_total,
        pavers_total=full_total + partial_total,
    )
    logger.debug(
        "plan_axis L=%.1f A=%.1f G=%.1f -> p=%d %s cuts=%s",
        L, A, G, p, centre_mode.value, list(cut_sizes),
    )
    return plan


def centre_width(plan: AxisPlan) -> float:
    """Length of the centre group, joints included."""
    return plan.centre_joints * plan.grout + sum(plan.cut_sizes)


def layout_axis(plan: AxisPlan) -> List[AxisSpan]:
    """Tile spans along ``[0, edge_length]``, ordered by start.

    This is the only place tile positions along an edge are derived; coping
    rings and extension rows project these spans into their own frames.
    """
    A = plan.tile_along
    G = plan.grout
    U = A + G
    L = plan.edge_length
    spans: List[AxisSpan] = []

    for i in range(plan.pavers_per_corner):
        spans.append(AxisSpan(start=i * U, length=A, is_partial=False))

    c_start = (L - centre_width(plan)) / 2.0
    cursor = c_start + G
    for cut in plan.cut_sizes:
        if cut > 0:
            spans.append(AxisSpan(start=cursor, length=cut, is_partial=True))
        cursor += cut + G

    for i in reversed(range(plan.pavers_per_corner)):
        spans.append(AxisSpan(start=L - (i + 1) * U + G, length=A, is_partial=False))

    return spans


def _is_perfect(g0: float, grout: float) -> bool:
    return abs(g0 - grout) <= PERFECT_TOLERANCE_MM


def _resolve_centre(g0: float, G: float, min_cut: float) -> Tuple[CentreMode, Tuple[float, ...]]:
    if _is_perfect(g0, G):
        return CentreMode.PERFECT, ()
    if g0 >= 3 * G + 2 * min_cut:
        total = g0 - 3 * G
        left = float(math.floor(total / 2))
        right = total - left
        return CentreMode.DOUBLE_CUT, (left, right)
    if g0 >= 2 * G + min_cut:
        return CentreMode.SINGLE_CUT, (g0 - 2 * G,)
    return CentreMode.SINGLE_CUT, (max(0.0, g0 - 2 * G),)
