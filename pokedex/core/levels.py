"""Level thresholds, rank titles and point rewards.

Everything here is pure and total: out-of-range input is clamped instead of
raising, because these values only feed the progress display.
"""

from __future__ import annotations

from typing import Sequence, Tuple

MAX_LEVEL = 100

DISCOVERY_BONUS = 10
FIRST_DAY_BONUS = 5
POINTS_PER_CORRECT_ANSWER = 20
STREAK_POINTS_PER_DAY = 5
STREAK_CAP = 25

# Gap growth per level in each regime.
_GENTLE_BASE_GAP = 100
_GENTLE_STEP = 50
_GENTLE_LAST_LEVEL = 10
_MODERATE_STEP = 100
_MODERATE_LAST_LEVEL = 50
_STEEP_STEP = 250

LEVEL_TITLES: Tuple[str, ...] = (
    "Pokémon Novice",
    "Pokémon Beginner",
    "Pokémon Enthusiast",
    "Pokémon Collector",
    "Pokémon Researcher",
    "Pokémon Ace Trainer",
    "Pokémon Expert",
    "Pokémon Master",
    "Pokémon Champion",
    "Pokémon Legend",
)


def _gap_for_level(level: int) -> int:
    """Points between ``level - 1`` and ``level`` (level >= 2)."""
    step = level - 1
    if level <= _GENTLE_LAST_LEVEL:
        return _GENTLE_BASE_GAP + _GENTLE_STEP * (step - 1)
    last_gentle = _gap_for_level(_GENTLE_LAST_LEVEL)
    if level <= _MODERATE_LAST_LEVEL:
        return last_gentle + _MODERATE_STEP * (level - _GENTLE_LAST_LEVEL)
    last_moderate = _gap_for_level(_MODERATE_LAST_LEVEL)
    return last_moderate + _STEEP_STEP * (level - _MODERATE_LAST_LEVEL)


def build_level_thresholds(max_level: int = MAX_LEVEL) -> Tuple[int, ...]:
    """Return the minimum cumulative points for levels ``1..max_level``.

    The first ten thresholds are 0, 100, 250, 450, 700, 1000, 1350, 1750,
    2200, 2700; gaps then widen by 100 per level up to level 50 and by 250
    per level after that.
    """
    thresholds = [0]
    for level in range(2, max(1, max_level) + 1):
        thresholds.append(thresholds[-1] + _gap_for_level(level))
    return tuple(thresholds)


LEVEL_THRESHOLDS: Tuple[int, ...] = build_level_thresholds()


def level_for_points(points: int, thresholds: Sequence[int] = LEVEL_THRESHOLDS) -> int:
    """1-based level reached with ``points``."""
    points = max(0, int(points))
    level = 1
    for index, threshold in enumerate(thresholds):
        if points >= threshold:
            level = index + 1
        else:
            break
    return level


def points_to_next_level(points: int, thresholds: Sequence[int] = LEVEL_THRESHOLDS) -> int:
    """Points still missing for the next level; 0 at the maximum level."""
    points = max(0, int(points))
    level = level_for_points(points, thresholds)
    if level >= len(thresholds):
        return 0
    return max(0, thresholds[level] - points)


def progress_to_next_level(points: int, thresholds: Sequence[int] = LEVEL_THRESHOLDS) -> int:
    """Percentage (0-100) of the way from the current level to the next."""
    points = max(0, int(points))
    level = level_for_points(points, thresholds)
    if level >= len(thresholds):
        return 100
    current = thresholds[level - 1]
    span = thresholds[level] - current
    if span <= 0:
        return 100
    percent = round((points - current) / span * 100)
    return max(0, min(100, percent))


def overall_progress(level: int, max_level: int = MAX_LEVEL) -> int:
    """Percentage of the way to ``max_level``."""
    max_level = max(1, max_level)
    level = max(1, min(int(level), max_level))
    return round(level / max_level * 100)


def title_for_level(level: int, max_level: int = MAX_LEVEL) -> str:
    """Rank name for ``level``; each title covers an equal band of levels."""
    max_level = max(1, max_level)
    level = max(1, min(int(level), max_level))
    band = (level - 1) * len(LEVEL_TITLES) // max_level
    return LEVEL_TITLES[band]


def streak_bonus(streak_days: int) -> int:
    """Bonus for extending a streak of ``streak_days`` by one more day."""
    streak_days = max(0, int(streak_days))
    return min(STREAK_CAP, (streak_days + 1) * STREAK_POINTS_PER_DAY)
