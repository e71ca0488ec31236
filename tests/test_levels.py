"""Tests for pokedex.core.levels – thresholds, titles and rewards."""

from __future__ import annotations

import pytest

from pokedex.core.levels import (
    LEVEL_THRESHOLDS,
    LEVEL_TITLES,
    MAX_LEVEL,
    STREAK_CAP,
    build_level_thresholds,
    level_for_points,
    overall_progress,
    points_to_next_level,
    progress_to_next_level,
    streak_bonus,
    title_for_level,
)


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

class TestThresholds:
    def test_one_threshold_per_level(self):
        assert len(LEVEL_THRESHOLDS) == MAX_LEVEL

    def test_first_ten_thresholds(self):
        assert LEVEL_THRESHOLDS[:10] == (0, 100, 250, 450, 700, 1000, 1350, 1750, 2200, 2700)

    def test_strictly_increasing(self):
        assert all(b > a for a, b in zip(LEVEL_THRESHOLDS, LEVEL_THRESHOLDS[1:]))

    def test_gaps_never_shrink(self):
        gaps = [b - a for a, b in zip(LEVEL_THRESHOLDS, LEVEL_THRESHOLDS[1:])]
        assert all(later >= earlier for earlier, later in zip(gaps, gaps[1:]))

    def test_custom_max_level(self):
        assert build_level_thresholds(3) == (0, 100, 250)

    def test_degenerate_max_level(self):
        assert build_level_thresholds(0) == (0,)


# ---------------------------------------------------------------------------
# level_for_points
# ---------------------------------------------------------------------------

class TestLevelForPoints:
    @pytest.mark.parametrize(
        "points, expected",
        [(0, 1), (99, 1), (100, 2), (249, 2), (250, 3), (2700, 10), (2699, 9)],
    )
    def test_boundaries(self, points: int, expected: int):
        assert level_for_points(points) == expected

    def test_negative_points_clamp_to_level_one(self):
        assert level_for_points(-50) == 1

    def test_huge_points_cap_at_max_level(self):
        assert level_for_points(10 ** 9) == MAX_LEVEL

    def test_monotonic(self):
        levels = [level_for_points(p) for p in range(0, 20000, 37)]
        assert levels == sorted(levels)


# ---------------------------------------------------------------------------
# Progress helpers
# ---------------------------------------------------------------------------

class TestProgressHelpers:
    def test_points_to_next_level_from_zero(self):
        assert points_to_next_level(0) == 100

    def test_points_to_next_level_mid_level(self):
        assert points_to_next_level(175) == 75

    def test_points_to_next_level_at_max(self):
        assert points_to_next_level(LEVEL_THRESHOLDS[-1]) == 0

    def test_progress_to_next_level(self):
        assert progress_to_next_level(0) == 0
        assert progress_to_next_level(50) == 50
        assert progress_to_next_level(175) == 50

    def test_progress_at_max_is_full(self):
        assert progress_to_next_level(LEVEL_THRESHOLDS[-1] + 1000) == 100

    def test_progress_in_range(self):
        for points in range(0, 10000, 53):
            assert 0 <= progress_to_next_level(points) <= 100

    def test_overall_progress(self):
        assert overall_progress(1) == 1
        assert overall_progress(50) == 50
        assert overall_progress(MAX_LEVEL) == 100

    def test_overall_progress_clamps(self):
        assert overall_progress(0) == 1
        assert overall_progress(MAX_LEVEL + 10) == 100


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

class TestTitles:
    def test_first_and_last(self):
        assert title_for_level(1) == LEVEL_TITLES[0]
        assert title_for_level(MAX_LEVEL) == LEVEL_TITLES[-1]

    def test_band_edges(self):
        assert title_for_level(10) == LEVEL_TITLES[0]
        assert title_for_level(11) == LEVEL_TITLES[1]

    def test_every_title_is_reachable(self):
        seen = {title_for_level(level) for level in range(1, MAX_LEVEL + 1)}
        assert seen == set(LEVEL_TITLES)

    def test_out_of_range_levels_clamp(self):
        assert title_for_level(-3) == LEVEL_TITLES[0]
        assert title_for_level(1000) == LEVEL_TITLES[-1]


# ---------------------------------------------------------------------------
# Streak bonus
# ---------------------------------------------------------------------------

class TestStreakBonus:
    def test_grows_with_streak(self):
        assert streak_bonus(0) == 5
        assert streak_bonus(1) == 10
        assert streak_bonus(3) == 20

    def test_capped(self):
        assert streak_bonus(4) == STREAK_CAP
        assert streak_bonus(30) == STREAK_CAP

    def test_negative_streak(self):
        assert streak_bonus(-2) == 5
