"""Tests for tiling_frame.py — expand-only grid anchor."""
import pytest

from paving_engine.area_fill import fill_area_from_origin
from paving_engine.geometry import bounding_box
from paving_engine.tiling_frame import (
    TilingFrame,
    create_frame,
    ensure_frame,
    grid_steps,
    reset_frame,
    translate_frame,
)


class TestCreateFrame:
    def test_margin_of_two_steps(self, square_boundary):
        frame = create_frame(square_boundary, 400, 400)
        assert frame == TilingFrame(x=-800, y=-800, side=3600)
        assert frame.contains_bbox(bounding_box(square_boundary), 800, 800)

    def test_origin_keeps_bbox_phase(self, square_boundary):
        frame = create_frame(square_boundary, 405, 605)
        assert frame.origin.x == pytest.approx(-810)
        assert frame.origin.y == pytest.approx(-1210)

    def test_empty_boundary(self):
        assert create_frame([], 400, 400) is None

    def test_grid_steps(self):
        assert grid_steps("400x600", "vertical", 5, 0.1) == (pytest.approx(40.5), pytest.approx(60.5))
        assert grid_steps("400x600", "horizontal", 0) == (600.0, 400.0)


class TestEnsureFrame:
    def test_none_creates(self, square_boundary):
        assert ensure_frame(None, square_boundary, 400, 400) == create_frame(square_boundary, 400, 400)

    def test_unchanged_when_contained(self, square_boundary):
        frame = create_frame(square_boundary, 400, 400)
        assert ensure_frame(frame, square_boundary, 400, 400) is frame

    def test_grows_by_whole_steps(self, square_boundary):
        frame = create_frame(square_boundary, 400, 400)
        moved = [(-500, 0), (2000, 0), (2000, 2000), (0, 2000)]
        grown = ensure_frame(frame, moved, 400, 400)
        assert grown.x == -1600
        assert grown.y == -800
        assert (grown.x - frame.x) % 400 == 0
        assert grown.contains_bbox(bounding_box(moved), 800, 800)

    def test_never_shrinks(self, square_boundary):
        frame = create_frame(square_boundary, 400, 400)
        smaller = [(500, 500), (900, 500), (900, 900), (500, 900)]
        assert ensure_frame(frame, smaller, 400, 400) is frame

    def test_far_edges_only_move_outward(self, square_boundary):
        frame = create_frame(square_boundary, 400, 400)
        moved = [(0, 0), (5000, 0), (5000, 2000), (0, 2000)]
        grown = ensure_frame(frame, moved, 400, 400)
        assert grown.x == frame.x
        assert grown.y == frame.y
        assert grown.side >= frame.side
        assert grown.x + grown.side >= 5800

    def test_growth_keeps_tiles_in_place(self, square_boundary):
        step = 405
        frame = create_frame(square_boundary, step, step)
        moved = [(-1000, -700), (2000, 0), (2000, 2000), (0, 2000)]
        grown = ensure_frame(frame, moved, step, step)
        assert grown != frame
        before = fill_area_from_origin(square_boundary, "400x400", origin=frame.origin, grout=5)
        after = fill_area_from_origin(square_boundary, "400x400", origin=grown.origin, grout=5)
        assert before == after


class TestTranslateAndReset:
    def test_translate(self):
        frame = TilingFrame(x=0, y=0, side=100)
        assert translate_frame(frame, 10, -20) == TilingFrame(x=10, y=-20, side=100)

    def test_reset_can_shrink(self, square_boundary):
        big = TilingFrame(x=-5000, y=-5000, side=20000)
        fresh = reset_frame(square_boundary, 400, 400)
        assert fresh.side < big.side
        assert fresh == create_frame(square_boundary, 400, 400)
