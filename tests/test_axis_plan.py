"""Tests for axis_plan.py — corner-first layout along one edge."""
import logging

import pytest

from paving_engine.axis_plan import axis_min_cut, centre_width, layout_axis, plan_axis
from paving_engine.contracts import CentreMode


def _reconstructed_length(plan):
    return (
        plan.full_pavers_total * plan.tile_along
        + (plan.pavers_total - 1) * plan.grout
        + sum(plan.cut_sizes)
    )


class TestAxisMinCut:
    def test_small_tiles_use_floor(self):
        assert axis_min_cut(400) == 200

    def test_long_tiles_use_half(self):
        assert axis_min_cut(600) == 300

    def test_default_min_cut_follows_tile(self):
        plan = plan_axis(7000, 600, 5)
        assert plan.min_cut == 300


class TestPlanAxis:
    def test_reference_edge(self):
        """7000mm edge with 400mm tiles: 8 per corner, two cuts in the middle."""
        plan = plan_axis(7000, 400, 5, 200)
        assert plan.pavers_per_corner == 8
        assert plan.centre_mode == CentreMode.DOUBLE_CUT
        assert plan.cut_sizes == (257.0, 258.0)
        assert plan.gap_before_cuts == pytest.approx(530.0)
        assert plan.removed_from_each_side == 0
        assert plan.full_pavers_total == 16
        assert plan.partial_pavers_total == 2
        assert plan.pavers_total == 18
        assert plan.centre_joints == 3
        assert plan.meets_min_cut

    def test_perfect_fit(self):
        """Butt-jointed tiles that exactly fill the edge need no centre group."""
        plan = plan_axis(3200, 400, 0, 200)
        assert plan.centre_mode == CentreMode.PERFECT
        assert plan.pavers_per_corner == 4
        assert plan.removed_from_each_side == 0
        assert plan.cut_sizes == ()
        assert plan.pavers_total == 8
        assert plan.centre_joints == 1

    def test_single_joint_gap_gives_back_corner_tiles(self):
        """A centre gap of one joint still trades a tile per corner for two cuts."""
        plan = plan_axis(6475, 400, 5, 200)
        assert plan.removed_from_each_side == 1
        assert plan.pavers_per_corner == 7
        assert plan.gap_before_cuts == pytest.approx(815.0)
        assert plan.centre_mode == CentreMode.DOUBLE_CUT
        assert plan.cut_sizes == (400.0, 400.0)
        assert plan.pavers_total == 16
        assert plan.meets_min_cut

    def test_single_cut(self):
        plan = plan_axis(3530, 400, 5, 200)
        assert plan.centre_mode == CentreMode.SINGLE_CUT
        assert plan.pavers_per_corner == 4
        assert plan.cut_sizes == (290.0,)
        assert plan.meets_min_cut

    def test_sliver_gives_back_corner_tiles(self):
        """A 100mm centre gap is too small, so one tile per corner is removed."""
        plan = plan_axis(3330, 400, 5, 200)
        assert plan.removed_from_each_side == 1
        assert plan.pavers_per_corner == 3
        assert plan.gap_before_cuts == pytest.approx(910.0)
        assert plan.centre_mode == CentreMode.DOUBLE_CUT
        assert plan.cut_sizes == (447.0, 448.0)
        assert all(c >= plan.min_cut for c in plan.cut_sizes)

    def test_cuts_sum_to_gap(self):
        for length in (4111, 5003, 6789, 7000, 9871):
            plan = plan_axis(length, 400, 5, 200)
            expected = plan.gap_before_cuts - plan.centre_joints * plan.grout
            if plan.centre_mode != CentreMode.PERFECT:
                assert sum(plan.cut_sizes) == pytest.approx(expected)

    def test_short_edge_has_no_corner_tiles(self):
        plan = plan_axis(500, 400, 5, 200)
        assert plan.pavers_per_corner == 0
        assert plan.full_pavers_total == 0

    def test_unreachable_min_cut_is_reported(self, caplog):
        with caplog.at_level(logging.WARNING, logger="paving_engine.axis_plan"):
            plan = plan_axis(100, 400, 5, 200)
        assert plan.centre_mode == CentreMode.SINGLE_CUT
        assert plan.cut_sizes == (100.0,)
        assert not plan.meets_min_cut
        assert "min cut" in caplog.text

    def test_negative_length_is_clamped(self):
        plan = plan_axis(-50, 400, 5, 200)
        assert plan.edge_length == 0
        assert plan.pavers_per_corner == 0
        assert not plan.meets_min_cut


class TestPlanInvariants:
    @pytest.mark.parametrize("length", [1000, 2405, 3000, 4567, 7000, 8200, 12345])
    @pytest.mark.parametrize("tile", [400, 600])
    def test_even_full_count_and_length(self, length, tile):
        plan = plan_axis(length, tile, 5)
        assert plan.full_pavers_total % 2 == 0
        assert plan.pavers_total == plan.full_pavers_total + plan.partial_pavers_total
        assert _reconstructed_length(plan) == pytest.approx(length, abs=1.0)

    def test_deterministic(self):
        assert plan_axis(6543, 400, 5) == plan_axis(6543, 400, 5)


class TestLayoutAxis:
    def test_span_count_matches_plan(self):
        plan = plan_axis(7000, 400, 5, 200)
        spans = layout_axis(plan)
        assert len(spans) == plan.pavers_total
        assert sum(1 for s in spans if s.is_partial) == 2

    @pytest.mark.parametrize("length", [3235, 3530, 3330, 7000])
    def test_joints_are_one_grout_wide(self, length):
        plan = plan_axis(length, 400, 5, 200)
        spans = layout_axis(plan)
        assert spans[0].start == pytest.approx(0.0)
        assert spans[-1].start + spans[-1].length == pytest.approx(length)
        for a, b in zip(spans, spans[1:]):
            assert b.start - (a.start + a.length) == pytest.approx(5.0)

    def test_full_tiles_mirror_about_midpoint(self):
        plan = plan_axis(7000, 400, 5, 200)
        full = [(s.start, s.start + s.length) for s in layout_axis(plan) if not s.is_partial]
        mirrored = sorted((7000 - end, 7000 - start) for start, end in full)
        assert [pytest.approx(m) for m in mirrored] == sorted(full)

    def test_centre_group_is_centred(self):
        plan = plan_axis(7000, 400, 5, 200)
        cuts = [s for s in layout_axis(plan) if s.is_partial]
        left_gap = cuts[0].start - 5
        right_gap = 7000 - (cuts[-1].start + cuts[-1].length) - 5
        assert centre_width(plan) == pytest.approx(530.0)
        assert abs(left_gap - right_gap) <= 1.0

    def test_zero_cut_is_not_emitted(self):
        plan = plan_axis(0, 400, 5, 200)
        assert layout_axis(plan) == []
