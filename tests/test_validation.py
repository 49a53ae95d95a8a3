"""Tests for validation.py — extension tiles against obstacles and the property line."""
import pytest

from paving_engine.contracts import CopingEdgeId, PaverMeta, PaverRect, Point, PoolPlacement
from paving_engine.scene import SceneComponent
from paving_engine.validation import paver_to_world, validate_extension_pavers


def _tile(x, row):
    return PaverRect(x, 0, 100, 100, meta=PaverMeta(CopingEdgeId.DEEP_END, row))


def _polygon(component_id, component_type, points):
    return SceneComponent(id=component_id, type=component_type, position=(0, 0), points=points)


@pytest.fixture
def tiles():
    """Two rows of one tile each, stepping outward along +x."""
    return [_tile(0, 0), _tile(105, 1)]


class TestPaverToWorld:
    def test_identity(self, placement):
        assert paver_to_world(PaverRect(0, 0, 10, 20), placement) == [
            Point(0, 0), Point(10, 0), Point(10, 20), Point(0, 20),
        ]

    def test_scaled_and_moved(self):
        placement = PoolPlacement(position=Point(10, 10), scale=0.1)
        corners = paver_to_world(PaverRect(0, 0, 100, 100), placement)
        assert corners[2].x == pytest.approx(20)
        assert corners[2].y == pytest.approx(20)


class TestValidateExtensionPavers:
    def test_empty(self, placement):
        result = validate_extension_pavers([], placement, [])
        assert result.valid_pavers == []
        assert not result.hit_boundary
        assert result.boundary_id is None

    def test_open_yard(self, tiles, placement):
        result = validate_extension_pavers(tiles, placement, [])
        assert result.valid_pavers == tiles
        assert not result.hit_boundary

    def test_obstacle_stops_the_walk(self, tiles, placement):
        shed = _polygon("shed", "house", [(150, -50), (300, -50), (300, 150), (150, 150)])
        result = validate_extension_pavers(tiles, placement, [shed])
        assert result.valid_pavers == tiles[:1]
        assert result.hit_boundary
        assert result.boundary_id == "shed"

    def test_rows_checked_in_order(self, tiles, placement):
        shed = _polygon("shed", "house", [(150, -50), (300, -50), (300, 150), (150, 150)])
        result = validate_extension_pavers(list(reversed(tiles)), placement, [shed])
        assert result.valid_pavers == tiles[:1]

    def test_fence_corner_inside(self, tiles, make_fence, placement):
        fence = make_fence("fence-1", (205, -50), 200, rotation=90)
        result = validate_extension_pavers(tiles, placement, [fence])
        assert result.boundary_id == "fence-1"
        assert len(result.valid_pavers) == 1

    def test_tile_inside_property_line(self, tiles, placement):
        lot = _polygon("lot", "boundary", [(-10, -10), (500, -10), (500, 500), (-10, 500)])
        assert validate_extension_pavers(tiles, placement, [lot]).valid_pavers == tiles

    def test_corner_on_property_line_is_inside(self, tiles, placement):
        lot = _polygon("lot", "boundary", [(0, 0), (205, 0), (205, 100), (0, 100)])
        result = validate_extension_pavers(tiles, placement, [lot])
        assert not result.hit_boundary

    def test_tile_crossing_property_line(self, tiles, placement):
        lot = _polygon("lot", "boundary", [(-10, -10), (150, -10), (150, 500), (-10, 500)])
        result = validate_extension_pavers(tiles, placement, [lot])
        assert result.valid_pavers == tiles[:1]
        assert result.boundary_id == "lot"

    def test_excluded_component(self, tiles, placement):
        shed = _polygon("pool-1", "house", [(150, -50), (300, -50), (300, 150), (150, 150)])
        result = validate_extension_pavers(tiles, placement, [shed], exclude_id="pool-1")
        assert result.valid_pavers == tiles

    def test_reference_lines_are_ignored(self, tiles, placement):
        line = SceneComponent(id="ref", type="reference_line", position=(-50, 50), length=1000)
        assert validate_extension_pavers(tiles, placement, [line]).valid_pavers == tiles

    def test_placement_applied(self, tiles):
        placement = PoolPlacement(position=Point(1000, 0))
        shed = _polygon("shed", "house", [(150, -50), (300, -50), (300, 150), (150, 150)])
        assert validate_extension_pavers(tiles, placement, [shed]).valid_pavers == tiles
