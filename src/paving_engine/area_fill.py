"""
Tile grid masking for free-form paved areas.

A rectangular grid is laid over the boundary's bounding box, phase-locked to
an origin, and every cell is classified by testing its four corners and its
centroid against the boundary (even-odd) and against exclude zones. Samples
lying exactly on an outline count as inside it, but a cell is only kept when
at least one sample is strictly inside the boundary. The grid
phase depends only on the origin, so editing a boundary reveals or hides
existing cells instead of re-laying them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import shapely
from shapely.geometry import LinearRing, Polygon, box
from shapely.ops import unary_union

from paving_engine.contracts import ExcludeZone, PaverRect, Point, Ring
from paving_engine.geometry import PolygonLike, bounding_box, points_in_polygon, polygon_area
from paving_engine.tiles import GROUT_MM, TileSizeLike, tile_dimensions

logger = logging.getLogger(__name__)

LINE_PRECISION = 3          # grid lines rounded to 0.001 units
ALIGN_TOLERANCE = 2.0       # corners this close to a zone edge are seam-aligned
MIN_EXPOSED_PERCENT = 10.0
MAX_AREA_MM2 = 1e10         # 10 000 m²

CORNERS = ("top-left", "top-right", "bottom-left", "bottom-right")

OriginLike = Optional[Sequence[Optional[float]]]


@dataclass(frozen=True)
class _ZoneOverlap:
    drop: bool = False
    is_edge: bool = False
    exposed_percent: float = 100.0


_NO_OVERLAP = _ZoneOverlap()


@dataclass(frozen=True)
class PavingStatistics:
    full_pavers: int
    edge_pavers: int
    total_pavers: int
    total_area_m2: float
    order_quantity: int
    wastage_percent: float


@dataclass(frozen=True)
class BoundaryValidation:
    valid: bool
    error: Optional[str] = None


def fill_area_from_origin(
    boundary: PolygonLike,
    tile_size: TileSizeLike,
    orientation: str = "vertical",
    show_edge_tiles: bool = True,
    exclude_zones: Iterable[ExcludeZone] = (),
    origin: OriginLike = None,
    grout: float = 0.0,
    seam_x: Iterable[float] = (),
    seam_y: Iterable[float] = (),
    scale: float = 1.0,
) -> List[PaverRect]:
    """Mask a phase-locked tile grid against ``boundary``.

    Args:
        boundary: area outline in world units, open or closed.
        tile_size: catalogue key or ``(width_mm, height_mm)``.
        orientation: ``"vertical"`` or ``"horizontal"`` (swaps width/height).
        show_edge_tiles: include cut tiles; full tiles are always included.
        exclude_zones: regions where no tile may be placed.
        origin: ``(x, y)`` grid phase anchor; either coordinate may be None,
            in which case the bounding-box minimum is used for that axis.
        grout: joint width in mm.
        seam_x, seam_y: extra grid lines, to line up with a neighbouring area.
        scale: world units per mm.

    Returns:
        Cells (tile plus trailing joint) in row-major order. Identical inputs
        always give identical output.
    """
    ring = Ring.from_points(boundary)
    if ring.is_degenerate:
        return []

    tile_w, tile_h = tile_dimensions(tile_size, orientation)
    step_x = (tile_w + grout) * scale
    step_y = (tile_h + grout) * scale
    if step_x <= 0 or step_y <= 0:
        return []

    bbox = bounding_box(ring)
    origin_x, origin_y = _resolve_origin(origin, bbox.min_x, bbox.min_y)
    xs = _grid_lines(origin_x, step_x, bbox.min_x, bbox.max_x, seam_x)
    ys = _grid_lines(origin_y, step_y, bbox.min_y, bbox.max_y, seam_y)
    if len(xs) < 2 or len(ys) < 2:
        return []

    x0, y0 = np.meshgrid(xs[:-1], ys[:-1])
    x1, y1 = np.meshgrid(xs[1:], ys[1:])
    samples = _cell_samples(x0.ravel(), y0.ravel(), x1.ravel(), y1.ravel())  # (5, N, 2)
    n_cells = samples.shape[1]

    flat = samples.reshape(-1, 2)
    interior, closed = _membership(flat, ring)
    interior = interior.reshape(5, n_cells)
    closed = closed.reshape(5, n_cells)

    zones = [z for z in exclude_zones if not z.outline.is_degenerate]
    in_zones = [_membership(flat, z.outline)[1].reshape(5, n_cells) for z in zones]
    zone_rings = [LinearRing(z.outline.points) for z in zones]

    if in_zones:
        in_any_zone = np.logical_or.reduce(in_zones)
    else:
        in_any_zone = np.zeros_like(interior)
    visible = (interior & ~in_any_zone).any(axis=0)

    pavers: List[PaverRect] = []
    for idx in range(n_cells):
        # touching the outline from outside does not count
        if not interior[:, idx].any():
            continue
        if not visible[idx]:
            continue

        overlap = _zone_overlap(idx, samples, in_zones, zone_rings)
        if overlap.drop:
            continue

        corners_outside = 4 - int(closed[:4, idx].sum())
        boundary_edge = corners_outside > 0
        is_edge = boundary_edge or overlap.is_edge
        cut_percentage = 0
        if overlap.is_edge:
            cut_percentage = int(round(100 - overlap.exposed_percent))
        elif boundary_edge:
            cut_percentage = int(round(corners_outside / 4 * 100))

        if is_edge and not show_edge_tiles:
            continue
        cx0, cy0 = samples[0, idx]
        cx1, cy1 = samples[2, idx]
        pavers.append(PaverRect(
            x=float(cx0),
            y=float(cy0),
            width=float(cx1 - cx0),
            height=float(cy1 - cy0),
            is_partial=is_edge,
            cut_percentage=cut_percentage,
        ))

    logger.debug("Masked %d cells to %d tiles", n_cells, len(pavers))
    return pavers


def fill_area(
    boundary: PolygonLike,
    tile_size: TileSizeLike,
    orientation: str = "vertical",
    show_edge_tiles: bool = True,
    exclude_zones: Iterable[ExcludeZone] = (),
    grout: float = GROUT_MM,
    scale: float = 1.0,
) -> List[PaverRect]:
    """Fill with the grid anchored on the boundary's own bounding box."""
    return fill_area_from_origin(
        boundary, tile_size, orientation, show_edge_tiles, exclude_zones,
        origin=None, grout=grout, scale=scale,
    )


def fill_area_from_vertex(
    boundary: PolygonLike,
    tile_size: TileSizeLike,
    orientation: str,
    corner: str,
    show_edge_tiles: bool = True,
    grout: float = GROUT_MM,
    scale: float = 1.0,
) -> List[PaverRect]:
    """Fill with grid lines passing through the polygon vertex nearest ``corner``.

    The cell in that corner is a full cell flush with the vertex; for right
    and bottom corners its trailing joint, not the tile, meets the vertex.
    """
    ring = Ring.from_points(boundary)
    if ring.is_degenerate:
        return []
    vertex = find_corner_vertex(ring, corner)
    return fill_area_from_origin(
        ring, tile_size, orientation, show_edge_tiles,
        origin=(vertex.x, vertex.y), grout=grout, scale=scale,
    )


def find_corner_vertex(boundary: PolygonLike, corner: str, tolerance: float = 1.0) -> Point:
    """Vertex best representing a bounding-box corner.

    Takes the leftmost (or rightmost) vertices first, then the topmost (or
    bottommost) among them.
    """
    if corner not in CORNERS:
        raise ValueError(f"Unknown corner {corner!r}; expected one of {CORNERS}")
    ring = Ring.from_points(boundary)
    bbox = bounding_box(ring)
    target_x = bbox.max_x if corner.endswith("right") else bbox.min_x
    column = [p for p in ring if abs(p.x - target_x) < tolerance]
    if corner.startswith("top"):
        return min(column, key=lambda p: p.y)
    return max(column, key=lambda p: p.y)


def calculate_statistics(
    pavers: Sequence[PaverRect],
    tile_size_mm: Tuple[float, float],
    wastage_percentage: float = 0.0,
) -> PavingStatistics:
    """Bill-of-materials counts for a filled area."""
    edge = sum(1 for p in pavers if p.is_partial)
    total = len(pavers)
    tile_area_m2 = tile_size_mm[0] * tile_size_mm[1] / 1_000_000
    wastage = int(math.ceil(total * wastage_percentage / 100.0))
    return PavingStatistics(
        full_pavers=total - edge,
        edge_pavers=edge,
        total_pavers=total,
        total_area_m2=tile_area_m2 * total,
        order_quantity=total + wastage,
        wastage_percent=wastage_percentage,
    )


def covered_area(
    pavers: Sequence[PaverRect],
    boundary: PolygonLike,
    exclude_zones: Iterable[ExcludeZone] = (),
) -> float:
    """Area actually paved: cells clipped to the boundary, minus exclude zones."""
    ring = Ring.from_points(boundary)
    if ring.is_degenerate or not pavers:
        return 0.0
    outline = Polygon(ring.points)
    if not outline.is_valid:
        outline = outline.buffer(0)
    cells = unary_union([box(p.x, p.y, p.x + p.width, p.y + p.height) for p in pavers])
    paved = cells.intersection(outline)
    holes = [Polygon(z.outline.points) for z in exclude_zones if not z.outline.is_degenerate]
    if holes:
        paved = paved.difference(unary_union(holes).buffer(0))
    return float(paved.area)


def validate_boundary(
    points: PolygonLike,
    tile_size: Optional[TileSizeLike] = None,
    orientation: Optional[str] = None,
    scale: float = 1.0,
) -> BoundaryValidation:
    """Check a drawn outline before it is used as a paving boundary."""
    ring = Ring.from_points(points)
    if ring.is_degenerate:
        return BoundaryValidation(False, "Need at least 3 points")
    if not LinearRing(ring.points).is_simple:
        return BoundaryValidation(False, "Boundary lines cannot cross each other")

    area_mm2 = polygon_area(ring) / (scale * scale) if scale > 0 else 0.0
    if area_mm2 > MAX_AREA_MM2:
        return BoundaryValidation(False, "Area too large (maximum 10,000 m²)")

    if tile_size is not None:
        tile_w, tile_h = tile_dimensions(tile_size, orientation or "vertical")
        bbox = bounding_box(ring)
        if bbox.width < tile_w * scale or bbox.height < tile_h * scale:
            return BoundaryValidation(
                False,
                f"Area too small to fit a tile (needs at least {tile_w:.0f}×{tile_h:.0f}mm)",
            )
    return BoundaryValidation(True)


# ─── Internal helpers ────────────────────────────────────────────────────────


def _resolve_origin(origin: OriginLike, default_x: float, default_y: float) -> Tuple[float, float]:
    if origin is None:
        return default_x, default_y
    ox = origin[0] if origin[0] is not None else default_x
    oy = origin[1] if origin[1] is not None else default_y
    return float(ox), float(oy)


def _grid_lines(
    origin: float, step: float, lo: float, hi: float, seams: Iterable[float],
) -> np.ndarray:
    """Grid coordinates ``origin + k*step`` covering [lo, hi] plus one step each side."""
    k_start = math.floor((lo - origin) / step) - 1
    k_end = math.ceil((hi - origin) / step) + 1
    lines = {round(origin + k * step, LINE_PRECISION) for k in range(k_start, k_end + 1)}
    first = origin + k_start * step
    last = origin + k_end * step
    for seam in seams:
        if first - step <= seam <= last + step:
            lines.add(round(float(seam), LINE_PRECISION))
    return np.asarray(sorted(lines), dtype=float)


def _membership(points: np.ndarray, ring: Ring) -> Tuple[np.ndarray, np.ndarray]:
    """(interior, closed) masks: even-odd inside, with points on an edge split out."""
    inside = points_in_polygon(points, ring)
    on_edge = shapely.intersects_xy(LinearRing(ring.points), points[:, 0], points[:, 1])
    return inside & ~on_edge, inside | on_edge


def _cell_samples(x0: np.ndarray, y0: np.ndarray, x1: np.ndarray, y1: np.ndarray) -> np.ndarray:
    """Four corners then centroid for every cell: shape (5, N, 2)."""
    return np.stack([
        np.stack([x0, y0], axis=-1),
        np.stack([x1, y0], axis=-1),
        np.stack([x1, y1], axis=-1),
        np.stack([x0, y1], axis=-1),
        np.stack([(x0 + x1) / 2.0, (y0 + y1) / 2.0], axis=-1),
    ])


def _zone_overlap(
    idx: int,
    samples: np.ndarray,
    in_zones: List[np.ndarray],
    zone_rings: List[LinearRing],
) -> _ZoneOverlap:
    """Classify one cell against the exclude zones; the first overlapping zone decides."""
    for inside, ring in zip(in_zones, zone_rings):
        corners_in = int(inside[:4, idx].sum())
        centre_in = bool(inside[4, idx])
        if corners_in == 4 and centre_in:
            return _ZoneOverlap(drop=True)
        if corners_in == 0 and not centre_in:
            continue

        distances = shapely.distance(ring, shapely.points(samples[:4, idx]))
        near_edge = int(np.count_nonzero(distances <= ALIGN_TOLERANCE))
        if near_edge > 0 and not centre_in and corners_in <= 2:
            return _NO_OVERLAP

        inside_percent = corners_in / 4 * 100
        if centre_in:
            inside_percent = min(100.0, inside_percent + 25)
        exposed = max(MIN_EXPOSED_PERCENT, 100 - inside_percent)
        return _ZoneOverlap(is_edge=True, exposed_percent=exposed)
    return _NO_OVERLAP
