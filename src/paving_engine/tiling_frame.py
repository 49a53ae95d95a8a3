"""
Persisted tiling frame for a paving area.

The frame fixes the grid phase of an area. It is created around the boundary
with a margin of whole grid steps and afterwards only grows, always by whole
steps, so tiles that were already visible never move while the boundary is
being edited.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from paving_engine.contracts import BBox, Point
from paving_engine.geometry import PolygonLike, bounding_box
from paving_engine.tiles import GROUT_MM, TileSizeLike, tile_dimensions

logger = logging.getLogger(__name__)

DEFAULT_MARGIN_STEPS = 2


@dataclass(frozen=True)
class TilingFrame:
    """Square frame; ``(x, y)`` is its top-left corner and the grid phase."""

    x: float
    y: float
    side: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    def contains_bbox(self, bbox: BBox, margin_x: float = 0.0, margin_y: float = 0.0) -> bool:
        return (
            self.x <= bbox.min_x - margin_x
            and self.y <= bbox.min_y - margin_y
            and self.x + self.side >= bbox.max_x + margin_x
            and self.y + self.side >= bbox.max_y + margin_y
        )


def grid_steps(
    tile_size: TileSizeLike,
    orientation: str = "vertical",
    grout: float = GROUT_MM,
    scale: float = 1.0,
) -> Tuple[float, float]:
    """Cell pitch (tile plus joint) in boundary units."""
    tile_w, tile_h = tile_dimensions(tile_size, orientation)
    return (tile_w + grout) * scale, (tile_h + grout) * scale


def create_frame(
    boundary: PolygonLike,
    step_x: float,
    step_y: float,
    margin_steps: int = DEFAULT_MARGIN_STEPS,
) -> Optional[TilingFrame]:
    """New frame whose grid phase equals the boundary's bbox minimum."""
    bbox = bounding_box(boundary)
    if bbox is None:
        return None
    margin_x = margin_steps * step_x
    margin_y = margin_steps * step_y
    side = max(bbox.width + 2 * margin_x, bbox.height + 2 * margin_y)
    return TilingFrame(x=bbox.min_x - margin_x, y=bbox.min_y - margin_y, side=side)


def ensure_frame(
    frame: Optional[TilingFrame],
    boundary: PolygonLike,
    step_x: float,
    step_y: float,
    margin_steps: int = DEFAULT_MARGIN_STEPS,
) -> Optional[TilingFrame]:
    """Return ``frame`` if it still covers the boundary, otherwise grow it.

    Growth moves ``x`` by whole multiples of ``step_x`` and ``y`` by whole
    multiples of ``step_y``; the far edges only move outward.
    """
    if frame is None:
        return create_frame(boundary, step_x, step_y, margin_steps)
    bbox = bounding_box(boundary)
    if bbox is None:
        return frame

    margin_x = margin_steps * step_x
    margin_y = margin_steps * step_y
    if frame.contains_bbox(bbox, margin_x, margin_y):
        return frame

    x = frame.x
    need_left = bbox.min_x - margin_x
    if need_left < x and step_x > 0:
        x -= math.ceil((x - need_left) / step_x) * step_x

    y = frame.y
    need_top = bbox.min_y - margin_y
    if need_top < y and step_y > 0:
        y -= math.ceil((y - need_top) / step_y) * step_y

    right = max(frame.x + frame.side, bbox.max_x + margin_x)
    bottom = max(frame.y + frame.side, bbox.max_y + margin_y)
    grown = TilingFrame(x=x, y=y, side=max(right - x, bottom - y))
    logger.debug("Tiling frame grown from %s to %s", frame, grown)
    return grown


def translate_frame(frame: TilingFrame, dx: float, dy: float) -> TilingFrame:
    """Move the frame together with its area."""
    return TilingFrame(x=frame.x + dx, y=frame.y + dy, side=frame.side)


def reset_frame(
    boundary: PolygonLike,
    step_x: float,
    step_y: float,
    margin_steps: int = DEFAULT_MARGIN_STEPS,
) -> Optional[TilingFrame]:
    """Discard the old phase and fit a fresh frame; the only way to shrink."""
    frame = create_frame(boundary, step_x, step_y, margin_steps)
    logger.info("Tiling frame reset to %s", frame)
    return frame
