"""
Tile catalogue shared by coping, paving areas and extensions.

Sizes are in millimetres. Canvas callers work at 1:100 where one canvas unit
is 10 mm (``CANVAS_UNITS_PER_MM``).
"""

from typing import Dict, Tuple, Union

GROUT_MM = 5.0
MIN_CUT_MM = 200.0
MIN_BOUNDARY_CUT_ROW_MM = 100.0
CANVAS_UNITS_PER_MM = 0.1

# Width x height as laid with "vertical" orientation
TILE_SIZES: Dict[str, Tuple[float, float]] = {
    "400x400": (400.0, 400.0),
    "400x600": (400.0, 600.0),
    "600x400": (600.0, 400.0),
}

ORIENTATIONS = ("vertical", "horizontal")

# Coping presets: one global tile orientation per pool
COPING_OPTIONS: Dict[str, Dict[str, float]] = {
    "400x400": dict(tile_along=400.0, tile_inward=400.0, rows_sides=1, rows_shallow=1, rows_deep=2),
    "600x400": dict(tile_along=600.0, tile_inward=400.0, rows_sides=1, rows_shallow=1, rows_deep=2),
    "400x600": dict(tile_along=400.0, tile_inward=600.0, rows_sides=1, rows_shallow=1, rows_deep=2),
}

TileSizeLike = Union[str, Tuple[float, float]]


def tile_dimensions(size: TileSizeLike, orientation: str = "vertical") -> Tuple[float, float]:
    """Return (width, height) in mm for a catalogue key or explicit pair."""
    if isinstance(size, str):
        if size not in TILE_SIZES:
            raise ValueError(f"Unknown tile size {size!r}; expected one of {sorted(TILE_SIZES)}")
        width, height = TILE_SIZES[size]
    else:
        width, height = float(size[0]), float(size[1])
    if orientation == "vertical":
        return width, height
    if orientation == "horizontal":
        return height, width
    raise ValueError(f"Unknown orientation {orientation!r}; expected one of {ORIENTATIONS}")


def tile_label(size: str) -> str:
    width, height = TILE_SIZES[size]
    return f"{width:.0f}×{height:.0f}mm"
