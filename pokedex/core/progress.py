from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from pokedex.core.levels import (
    DISCOVERY_BONUS,
    FIRST_DAY_BONUS,
    POINTS_PER_CORRECT_ANSWER,
    level_for_points,
    streak_bonus,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
THEMES = ("light", "dark")

QuestionId = Tuple[int, int]


@dataclass(frozen=True)
class LevelUp:
    from_level: int
    to_level: int


@dataclass(frozen=True)
class ProgressState:
    """Snapshot of everything the user has earned plus their UI preferences.

    Dict fields are never mutated in place; transitions copy them.
    """

    points: int = 0
    discovered: FrozenSet[int] = frozenset()
    favorites: FrozenSet[int] = frozenset()
    badges: FrozenSet[str] = frozenset()
    daily_streak: int = 0
    last_login_date: Optional[date] = None
    completed_quizzes: FrozenSet[int] = frozenset()
    question_ledger: Dict[QuestionId, bool] = field(default_factory=dict)
    quiz_best_score: Dict[int, int] = field(default_factory=dict)
    selected_types: FrozenSet[str] = frozenset()
    search_term: str = ""
    theme: str = "light"
    pending_level_up: Optional[LevelUp] = None

    @property
    def level(self) -> int:
        return level_for_points(self.points)


def perfect_score_badge(creature_id: int, creature_name: str = "") -> str:
    name = creature_name.strip().replace("-", " ").title()
    return f"{name} Master" if name else f"#{creature_id:03d} Master"


# ---------------------------------------------------------------------------
# Transitions: (state, ...) -> new state
# ---------------------------------------------------------------------------

def award_points(state: ProgressState, amount: int) -> ProgressState:
    amount = max(0, int(amount))
    if amount == 0:
        return state
    before = state.level
    after = level_for_points(state.points + amount)
    pending = state.pending_level_up
    if after > before:
        from_level = pending.from_level if pending else before
        pending = LevelUp(from_level=from_level, to_level=after)
        logger.info("Level up: %d -> %d", from_level, after)
    return replace(state, points=state.points + amount, pending_level_up=pending)


def clear_level_up(state: ProgressState) -> ProgressState:
    if state.pending_level_up is None:
        return state
    return replace(state, pending_level_up=None)


def record_discovery(state: ProgressState, creature_id: int) -> ProgressState:
    if creature_id in state.discovered:
        return state
    state = replace(state, discovered=state.discovered | {creature_id})
    return award_points(state, DISCOVERY_BONUS)


def _toggled(items: FrozenSet, item) -> FrozenSet:
    return items - {item} if item in items else items | {item}


def toggle_favorite(state: ProgressState, creature_id: int) -> ProgressState:
    return replace(state, favorites=_toggled(state.favorites, creature_id))


def toggle_type_filter(state: ProgressState, type_name: str) -> ProgressState:
    return replace(state, selected_types=_toggled(state.selected_types, type_name))


def set_search_term(state: ProgressState, term: str) -> ProgressState:
    return replace(state, search_term=term)


def toggle_theme(state: ProgressState) -> ProgressState:
    return replace(state, theme="light" if state.theme == "dark" else "dark")


def grant_badge(state: ProgressState, badge: str) -> ProgressState:
    if badge in state.badges:
        return state
    logger.info("Badge earned: %s", badge)
    return replace(state, badges=state.badges | {badge})


def refresh_daily_streak(state: ProgressState, today: date) -> ProgressState:
    """Count today's visit. Only the first call on a given day has an effect."""
    last = state.last_login_date
    if last == today:
        return state
    if last == today - timedelta(days=1):
        bonus = streak_bonus(state.daily_streak)
        state = replace(state, daily_streak=state.daily_streak + 1, last_login_date=today)
        return award_points(state, bonus)
    state = replace(state, daily_streak=1, last_login_date=today)
    return award_points(state, FIRST_DAY_BONUS)


def record_question_answer(
    state: ProgressState,
    creature_id: int,
    question_index: int,
    was_correct: bool,
) -> ProgressState:
    """Update the ledger. Points are paid once per question, ever."""
    question_id = (creature_id, question_index)
    already_correct = state.question_ledger.get(question_id, False)
    if already_correct:
        return state
    ledger = dict(state.question_ledger)
    ledger[question_id] = bool(was_correct)
    state = replace(state, question_ledger=ledger)
    if was_correct:
        state = award_points(state, POINTS_PER_CORRECT_ANSWER)
    return state


def update_quiz_best_score(state: ProgressState, creature_id: int, score: int) -> ProgressState:
    if score <= state.quiz_best_score.get(creature_id, 0):
        return state
    best = dict(state.quiz_best_score)
    best[creature_id] = score
    return replace(state, quiz_best_score=best)


def grant_perfect_score_badge(
    state: ProgressState,
    creature_id: int,
    score: int,
    total_questions: int,
    creature_name: str = "",
) -> ProgressState:
    if total_questions <= 0 or score != total_questions:
        return state
    state = grant_badge(state, perfect_score_badge(creature_id, creature_name))
    if creature_id not in state.completed_quizzes:
        state = replace(state, completed_quizzes=state.completed_quizzes | {creature_id})
    return state


# ---------------------------------------------------------------------------
# Persistence layout and migrations
# ---------------------------------------------------------------------------

def _parse_question_id(key: str) -> Optional[QuestionId]:
    for sep in (":", "-", "_"):
        left, found, right = key.partition(sep)
        if found:
            try:
                return int(left), int(right)
            except ValueError:
                return None
    return None


def _migrate_v0_to_v1(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Legacy browser blob: camelCase keys, optionally wrapped in ``state``."""
    inner = payload.get("state")
    source = inner if isinstance(inner, dict) else payload
    renames = {
        "userPoints": "points",
        "discoveredPokemon": "discovered",
        "dailyStreak": "daily_streak",
        "lastLoginDate": "last_login_date",
        "completedQuizzes": "completed_quizzes",
        "quizBestScore": "quiz_best_score",
        "selectedTypes": "selected_types",
        "searchTerm": "search_term",
    }
    migrated: Dict[str, Any] = {}
    for key, value in source.items():
        if key in ("state", "version"):
            continue
        migrated[renames.get(key, key)] = value
    answers = source.get("quizAnswers")
    if isinstance(answers, dict):
        ledger: Dict[str, bool] = {}
        for key, value in answers.items():
            question_id = _parse_question_id(str(key))
            if question_id is not None:
                ledger[f"{question_id[0]}:{question_id[1]}"] = value is True
        migrated["question_ledger"] = ledger
        migrated.pop("quizAnswers", None)
    migrated["version"] = 1
    return migrated


_MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0_to_v1,
}


def migrate(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a persisted payload up to ``SCHEMA_VERSION``."""
    version = payload.get("version", 0)
    if not isinstance(version, int) or isinstance(version, bool) or version < 0:
        version = 0
    # The legacy blob carries the store version next to a "state" wrapper.
    if "state" in payload:
        version = 0
    if version > SCHEMA_VERSION:
        logger.warning(
            "Progress file has schema version %d, newer than %d; loading known fields",
            version,
            SCHEMA_VERSION,
        )
        return payload
    while version < SCHEMA_VERSION:
        payload = _MIGRATIONS[version](payload)
        version += 1
    return payload


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _as_int_set(value: Any) -> FrozenSet[int]:
    if not isinstance(value, (list, tuple)):
        return frozenset()
    result = set()
    for item in value:
        if isinstance(item, bool):
            continue
        try:
            result.add(int(item))
        except (TypeError, ValueError, OverflowError):
            continue
    return frozenset(result)


def _as_str_set(value: Any) -> FrozenSet[str]:
    if not isinstance(value, (list, tuple)):
        return frozenset()
    return frozenset(item for item in value if isinstance(item, str) and item)


def _as_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def state_from_payload(payload: Dict[str, Any]) -> ProgressState:
    """Merge a (migrated) payload over defaults; bad fields fall back to defaults."""
    ledger: Dict[QuestionId, bool] = {}
    raw_ledger = payload.get("question_ledger")
    if isinstance(raw_ledger, dict):
        for key, value in raw_ledger.items():
            question_id = _parse_question_id(str(key))
            if question_id is not None:
                ledger[question_id] = value is True

    best: Dict[int, int] = {}
    raw_best = payload.get("quiz_best_score")
    if isinstance(raw_best, dict):
        for key, value in raw_best.items():
            try:
                best[int(key)] = _as_int(value)
            except (TypeError, ValueError, OverflowError):
                continue

    theme = payload.get("theme")
    search_term = payload.get("search_term")
    return ProgressState(
        points=_as_int(payload.get("points")),
        discovered=_as_int_set(payload.get("discovered")),
        favorites=_as_int_set(payload.get("favorites")),
        badges=_as_str_set(payload.get("badges")),
        daily_streak=_as_int(payload.get("daily_streak")),
        last_login_date=_as_date(payload.get("last_login_date")),
        completed_quizzes=_as_int_set(payload.get("completed_quizzes")),
        question_ledger=ledger,
        quiz_best_score=best,
        selected_types=_as_str_set(payload.get("selected_types")),
        search_term=search_term if isinstance(search_term, str) else "",
        theme=theme if theme in THEMES else "light",
    )


def state_to_payload(state: ProgressState) -> Dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "points": state.points,
        "discovered": sorted(state.discovered),
        "favorites": sorted(state.favorites),
        "badges": sorted(state.badges),
        "daily_streak": state.daily_streak,
        "last_login_date": state.last_login_date.isoformat() if state.last_login_date else "",
        "completed_quizzes": sorted(state.completed_quizzes),
        "question_ledger": {
            f"{creature_id}:{index}": correct
            for (creature_id, index), correct in sorted(state.question_ledger.items())
        },
        "quiz_best_score": {str(key): value for key, value in sorted(state.quiz_best_score.items())},
        "selected_types": sorted(state.selected_types),
        "search_term": state.search_term,
        "theme": state.theme,
    }


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ProgressStore:
    """Owns the current ProgressState and saves it after every change.

    Every mutation goes through :meth:`dispatch`, which applies a transition
    and returns the new snapshot. The file is not safe for two running
    instances: the last one to save wins.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._state = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def state(self) -> ProgressState:
        return self._state

    def dispatch(self, transition: Callable[..., ProgressState], *args: Any) -> ProgressState:
        new_state = transition(self._state, *args)
        if new_state is not self._state:
            self._state = new_state
            self._save()
        return self._state

    def award_points(self, amount: int) -> ProgressState:
        return self.dispatch(award_points, amount)

    def record_discovery(self, creature_id: int) -> ProgressState:
        return self.dispatch(record_discovery, creature_id)

    def toggle_favorite(self, creature_id: int) -> ProgressState:
        return self.dispatch(toggle_favorite, creature_id)

    def toggle_type_filter(self, type_name: str) -> ProgressState:
        return self.dispatch(toggle_type_filter, type_name)

    def set_search_term(self, term: str) -> ProgressState:
        return self.dispatch(set_search_term, term)

    def toggle_theme(self) -> ProgressState:
        return self.dispatch(toggle_theme)

    def grant_badge(self, badge: str) -> ProgressState:
        return self.dispatch(grant_badge, badge)

    def refresh_daily_streak(self, today: Optional[date] = None) -> ProgressState:
        return self.dispatch(refresh_daily_streak, today or date.today())

    def record_question_answer(
        self, creature_id: int, question_index: int, was_correct: bool
    ) -> ProgressState:
        return self.dispatch(record_question_answer, creature_id, question_index, was_correct)

    def update_quiz_best_score(self, creature_id: int, score: int) -> ProgressState:
        return self.dispatch(update_quiz_best_score, creature_id, score)

    def grant_perfect_score_badge(
        self,
        creature_id: int,
        score: int,
        total_questions: int,
        creature_name: str = "",
    ) -> ProgressState:
        return self.dispatch(
            grant_perfect_score_badge, creature_id, score, total_questions, creature_name
        )

    def consume_level_up(self) -> Optional[LevelUp]:
        """Return the pending level-up notice once, then forget it."""
        notice = self._state.pending_level_up
        self._state = clear_level_up(self._state)
        return notice

    def reset(self) -> ProgressState:
        """Clear all progress and preferences."""
        self._state = ProgressState()
        self._save()
        return self._state

    def save(self) -> None:
        self._save()

    def _load(self) -> ProgressState:
        if not self._file_path.exists():
            return ProgressState()
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return ProgressState()
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self._file_path)
            return ProgressState()
        return state_from_payload(migrate(payload))

    def _save(self) -> None:
        payload = json.dumps(state_to_payload(self._state), indent=2, ensure_ascii=False)
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
