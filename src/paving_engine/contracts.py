"""Value types and configuration for the paving layout engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from paving_engine.tiles import COPING_OPTIONS, GROUT_MM, MIN_BOUNDARY_CUT_ROW_MM, MIN_CUT_MM


class Point(NamedTuple):
    """Planar coordinate. Units are fixed by the caller (mm or canvas units)."""

    x: float
    y: float


def to_point(value: Sequence[float]) -> Point:
    if isinstance(value, Point):
        return value
    if hasattr(value, "x") and hasattr(value, "y"):
        return Point(float(value.x), float(value.y))
    return Point(float(value[0]), float(value[1]))


_DUPLICATE_TOL = 1e-9


@dataclass(frozen=True)
class Ring:
    """Immutable polygon ring, always stored open (no closing duplicate)."""

    points: Tuple[Point, ...] = ()

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "Ring":
        if isinstance(points, Ring):
            return points
        cleaned: List[Point] = []
        for raw in points:
            pt = to_point(raw)
            if cleaned and _same_point(cleaned[-1], pt):
                continue
            cleaned.append(pt)
        while len(cleaned) > 1 and _same_point(cleaned[0], cleaned[-1]):
            cleaned.pop()
        return cls(tuple(cleaned))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def is_degenerate(self) -> bool:
        return len(self.points) < 3

    def closed(self) -> List[Point]:
        """Points with the first vertex repeated at the end."""
        if not self.points:
            return []
        return list(self.points) + [self.points[0]]

    def edges(self) -> List[Tuple[Point, Point]]:
        n = len(self.points)
        if n < 2:
            return []
        return [(self.points[i], self.points[(i + 1) % n]) for i in range(n)]


def _same_point(a: Point, b: Point) -> bool:
    return abs(a.x - b.x) <= _DUPLICATE_TOL and abs(a.y - b.y) <= _DUPLICATE_TOL


@dataclass(frozen=True)
class BBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class Segment:
    start: Point
    end: Point


# ─── Coping ──────────────────────────────────────────────────────────────────


class CentreMode(Enum):
    """How the leftover length at an edge's midpoint is absorbed."""

    PERFECT = "perfect"
    SINGLE_CUT = "single_cut"
    DOUBLE_CUT = "double_cut"


class CopingEdgeId(Enum):
    """The four coping bands of a rectangular pool."""

    LEFT_SIDE = "left_side"
    RIGHT_SIDE = "right_side"
    SHALLOW_END = "shallow_end"
    DEEP_END = "deep_end"

    @property
    def is_side(self) -> bool:
        return self in (CopingEdgeId.LEFT_SIDE, CopingEdgeId.RIGHT_SIDE)

    @property
    def is_end(self) -> bool:
        return not self.is_side


@dataclass(frozen=True)
class AxisPlan:
    """Corner-first layout of one tile row along a straight edge."""

    edge_length: float
    tile_along: float
    grout: float
    min_cut: float
    pavers_per_corner: int
    centre_mode: CentreMode
    cut_sizes: Tuple[float, ...]
    centre_joints: int
    removed_from_each_side: int
    gap_before_cuts: float
    meets_min_cut: bool
    full_pavers_total: int
    partial_pavers_total: int
    pavers_total: int


@dataclass(frozen=True)
class AxisSpan:
    """One tile along an axis: ``start`` measured from the edge's first corner."""

    start: float
    length: float
    is_partial: bool


@dataclass(frozen=True)
class EdgeTotals:
    rows: int
    full_pavers: int
    partial_pavers: int
    pavers: int

    @classmethod
    def from_plan(cls, plan: AxisPlan, rows: int) -> "EdgeTotals":
        return cls(
            rows=rows,
            full_pavers=plan.full_pavers_total * rows,
            partial_pavers=plan.partial_pavers_total * rows,
            pavers=plan.pavers_total * rows,
        )


@dataclass(frozen=True)
class CopingSymmetry:
    sides_mirror: bool = True
    ends_mirror: bool = True


@dataclass(frozen=True)
class CopingPlan:
    """Four-sided coping plan; sides share one AxisPlan, ends share another."""

    length_axis: AxisPlan
    width_axis: AxisPlan
    left_side: EdgeTotals
    right_side: EdgeTotals
    shallow_end: EdgeTotals
    deep_end: EdgeTotals
    total_full_pavers: int
    total_partial_pavers: int
    total_pavers: int
    symmetry: CopingSymmetry = field(default_factory=CopingSymmetry)

    def edge_totals(self, edge: CopingEdgeId) -> EdgeTotals:
        return getattr(self, edge.value)


@dataclass(frozen=True)
class PaverMeta:
    edge: CopingEdgeId
    row_index: int
    is_boundary_cut_row: bool = False


@dataclass(frozen=True)
class PaverRect:
    """Axis-aligned tile rectangle in whichever frame the producer documents."""

    x: float
    y: float
    width: float
    height: float
    is_partial: bool = False
    cut_percentage: Optional[int] = None
    meta: Optional[PaverMeta] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    def corners(self) -> List[Point]:
        return [
            Point(self.x, self.y),
            Point(self.x + self.width, self.y),
            Point(self.x + self.width, self.y + self.height),
            Point(self.x, self.y + self.height),
        ]


@dataclass(frozen=True)
class ExcludeZone:
    """A region where no tile may be placed (another pool, a house)."""

    outline: Ring
    owner_id: str

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]], owner_id: str) -> "ExcludeZone":
        return cls(outline=Ring.from_points(points), owner_id=owner_id)


@dataclass(frozen=True)
class BoundaryHit:
    """Nearest ray hit. Only valid against the scene snapshot it came from."""

    component_id: str
    component_type: str
    distance: float
    intersection: Point
    segment: Segment


# ─── Pool inputs ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PoolSpec:
    """Pool catalogue entry. Outline is the waterline in pool-local mm."""

    length: float
    width: float
    outline: Ring = Ring()
    deep_end: Optional[Point] = None
    pool_id: str = "pool"
    name: str = ""

    @classmethod
    def rectangle(cls, length: float, width: float, pool_id: str = "pool", name: str = "") -> "PoolSpec":
        outline = Ring.from_points([(0, 0), (length, 0), (length, width), (0, width)])
        return cls(
            length=float(length),
            width=float(width),
            outline=outline,
            deep_end=Point(float(length), width / 2.0),
            pool_id=pool_id,
            name=name,
        )

    @property
    def waterline(self) -> Ring:
        if not self.outline.is_degenerate:
            return self.outline
        return Ring.from_points(
            [(0, 0), (self.length, 0), (self.length, self.width), (0, self.width)]
        )


@dataclass(frozen=True)
class PoolPlacement:
    """Maps pool-local mm into world units: ``position + R(rotation) * local * scale``."""

    position: Point = Point(0.0, 0.0)
    rotation_deg: float = 0.0
    scale: float = 1.0


@dataclass(frozen=True)
class CopingConfig:
    """Coping tile and row configuration for one pool."""

    tile_along: float = 400.0
    tile_inward: float = 400.0
    grout: float = GROUT_MM
    min_cut: Optional[float] = None
    rows_sides: int = 1
    rows_shallow: int = 1
    rows_deep: int = 2

    @classmethod
    def from_option(cls, key: str) -> "CopingConfig":
        option = COPING_OPTIONS.get(key)
        if option is None:
            raise ValueError(f"Unknown coping option {key!r}; expected one of {sorted(COPING_OPTIONS)}")
        return cls(**option)

    @property
    def axis_min_cut(self) -> float:
        """Explicit min_cut, else max(200, floor(tile_along / 2))."""
        if self.min_cut is not None:
            return float(self.min_cut)
        return max(MIN_CUT_MM, float(math.floor(self.tile_along / 2)))

    def rows_for(self, edge: CopingEdgeId) -> int:
        if edge.is_side:
            return self.rows_sides
        if edge is CopingEdgeId.SHALLOW_END:
            return self.rows_shallow
        return self.rows_deep


@dataclass(frozen=True)
class ExtensionConfig:
    """Tunables for interactive drag-to-extend."""

    min_boundary_cut_row: float = MIN_BOUNDARY_CUT_ROW_MM
    boundary_clearance: float = 0.0


# ─── Interactive extension ───────────────────────────────────────────────────


@dataclass
class EdgeExtensionState:
    """Persisted per-edge extension state, mutated only by committed drags."""

    current_rows: int = 0
    reached_boundary: bool = False
    boundary_id: Optional[str] = None
    cut_row_depth: Optional[float] = None
    pavers: List[PaverRect] = field(default_factory=list)


@dataclass(frozen=True)
class RowFill:
    full_rows: int
    cut_row_depth: Optional[float] = None

    @property
    def has_cut_row(self) -> bool:
        return self.cut_row_depth is not None


@dataclass(frozen=True)
class DragPreview:
    edge: CopingEdgeId
    full_rows_to_add: int
    cut_row_depth: Optional[float]
    reached_boundary: bool
    boundary_id: Optional[str]
    drag_distance: float
    max_distance: float
    pavers: Tuple[PaverRect, ...] = ()

    @property
    def has_cut_row(self) -> bool:
        return self.cut_row_depth is not None


@dataclass
class EdgeDragSession:
    """One in-flight drag on one edge, passed explicitly through start/move/end."""

    edge: CopingEdgeId
    snapshot: EdgeExtensionState
    preview: Optional[DragPreview] = None
