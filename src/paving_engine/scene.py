"""
Read-only snapshot of the design scene as the engine sees it.

Components are in world units. Polygon-type components keep their outline in
component-local coordinates (``points``), which are rotated about and then
translated to ``position``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from paving_engine.contracts import Point, to_point
from paving_engine.geometry import rectangle, transform_points

LINE_THICKNESS = 5.0


class ComponentType(Enum):
    POOL = "pool"
    PAVER = "paver"
    PAVING_AREA = "paving_area"
    DRAINAGE = "drainage"
    FENCE = "fence"
    WALL = "wall"
    BOUNDARY = "boundary"
    HOUSE = "house"
    REFERENCE_LINE = "reference_line"
    QUICK_MEASURE = "quick_measure"


LINEAR_TYPES = frozenset({ComponentType.FENCE, ComponentType.WALL, ComponentType.DRAINAGE})
POLYGON_TYPES = frozenset({ComponentType.BOUNDARY, ComponentType.HOUSE})
RECTANGLE_TYPES = frozenset({ComponentType.PAVER, ComponentType.PAVING_AREA})
BOUNDARY_TYPES = LINEAR_TYPES | POLYGON_TYPES | RECTANGLE_TYPES


@dataclass(frozen=True)
class SceneComponent:
    """One placed component.

    ``length`` is only meaningful for linear components; when it is missing
    the component's ``width`` is used instead.
    """

    id: str
    type: ComponentType
    position: Point = Point(0.0, 0.0)
    rotation: float = 0.0
    width: float = 0.0
    height: float = 0.0
    length: Optional[float] = None
    points: Tuple[Point, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.type, ComponentType):
            object.__setattr__(self, "type", ComponentType(self.type))
        object.__setattr__(self, "position", to_point(self.position))
        object.__setattr__(self, "points", tuple(to_point(p) for p in self.points))

    @property
    def linear_length(self) -> float:
        return self.length if self.length else self.width

    @property
    def is_boundary_capable(self) -> bool:
        return self.type in BOUNDARY_TYPES


def component_polygon(component: SceneComponent) -> Optional[List[Point]]:
    """World-space outline used for containment tests, or None.

    Linear components become thin rectangles centred on their line. A paving
    area uses its drawn outline when it has one, else its width x height box.
    """
    ctype = component.type
    if ctype in LINEAR_TYPES:
        length = component.linear_length
        if not length:
            return None
        half = LINE_THICKNESS / 2.0
        local = rectangle(0.0, -half, length, LINE_THICKNESS)
    elif ctype in POLYGON_TYPES:
        local = list(component.points)
    elif ctype is ComponentType.PAVING_AREA:
        local = list(component.points) or rectangle(0.0, 0.0, component.width, component.height)
    elif ctype is ComponentType.PAVER:
        local = rectangle(0.0, 0.0, component.width, component.height)
    else:
        return None
    if len(local) < 3:
        return None
    return transform_points(local, component.position, component.rotation)

