"""Tests for pokedex.core.session – quiz session flow."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from pokedex.core.levels import POINTS_PER_CORRECT_ANSWER
from pokedex.core.progress import ProgressStore
from pokedex.core.quiz import Question
from pokedex.core.session import AnswerResult, QuizSession


def _questions(count: int = 5) -> List[Question]:
    return [
        Question(prompt=f"Question {i}?", options=("right", "wrong", "nope", "other"), correct="right")
        for i in range(count)
    ]


@pytest.fixture()
def store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress.json")


# ---------------------------------------------------------------------------
# AnswerResult dataclass
# ---------------------------------------------------------------------------

class TestAnswerResult:
    def test_creation(self):
        result = AnswerResult(correct=True, correct_answer="Electric", points_awarded=20)
        assert result.correct is True
        assert result.correct_answer == "Electric"
        assert result.points_awarded == 20

    def test_equality(self):
        assert AnswerResult(False, "A", 0) == AnswerResult(False, "A", 0)


# ---------------------------------------------------------------------------
# QuizSession – properties
# ---------------------------------------------------------------------------

class TestSessionProperties:
    def test_initial_state(self, store: ProgressStore):
        session = QuizSession(25, _questions(), store)
        assert session.creature_id == 25
        assert session.index == 0
        assert session.score == 0
        assert session.answers == []
        assert session.total_questions == 5
        assert not session.is_complete()

    def test_current_question(self, store: ProgressStore):
        questions = _questions()
        session = QuizSession(25, questions, store)
        assert session.current_question() is questions[0]

    def test_empty_session_is_complete(self, store: ProgressStore):
        session = QuizSession(25, [], store)
        assert session.is_complete()
        assert session.current_question() is None
        assert not session.is_perfect()

    def test_empty_session_finishes_once(self, store: ProgressStore, monkeypatch: pytest.MonkeyPatch):
        calls = []
        monkeypatch.setattr(
            store, "update_quiz_best_score", lambda creature_id, score: calls.append((creature_id, score))
        )
        session = QuizSession(25, [], store)
        assert calls == [(25, 0)]
        session.submit("anything")
        assert calls == [(25, 0)]
        assert store.state.badges == frozenset()


# ---------------------------------------------------------------------------
# QuizSession – answering
# ---------------------------------------------------------------------------

class TestSubmit:
    def test_correct_answer(self, store: ProgressStore):
        session = QuizSession(25, _questions(), store)
        result = session.submit("right")
        assert result == AnswerResult(True, "right", POINTS_PER_CORRECT_ANSWER)
        assert session.index == 1
        assert session.score == 1
        assert store.state.points == POINTS_PER_CORRECT_ANSWER

    def test_wrong_answer(self, store: ProgressStore):
        session = QuizSession(25, _questions(), store)
        result = session.submit("wrong")
        assert result == AnswerResult(False, "right", 0)
        assert session.score == 0
        assert session.answers == [False]
        assert store.state.question_ledger[(25, 0)] is False

    def test_scenario_d_perfect_run(self, store: ProgressStore):
        session = QuizSession(25, _questions(), store, creature_name="pikachu")
        for _ in range(5):
            session.submit("right")
        state = store.state
        assert session.is_complete()
        assert session.is_perfect()
        assert state.points == 5 * POINTS_PER_CORRECT_ANSWER
        assert state.quiz_best_score[25] == 5
        assert state.badges == {"Pikachu Master"}
        assert state.completed_quizzes == {25}

    def test_retake_earns_no_points(self, store: ProgressStore):
        first = QuizSession(25, _questions(), store, creature_name="pikachu")
        for _ in range(5):
            first.submit("right")
        points = store.state.points

        second = QuizSession(25, _questions(), store, creature_name="pikachu")
        results = [second.submit("right") for _ in range(5)]
        assert all(r.points_awarded == 0 for r in results)
        assert second.score == 5
        assert store.state.points == points
        assert store.state.badges == {"Pikachu Master"}

    def test_partial_run_keeps_best_score(self, store: ProgressStore):
        session = QuizSession(25, _questions(), store)
        for answer in ("right", "right", "wrong", "right", "wrong"):
            session.submit(answer)
        assert session.answers == [True, True, False, True, False]
        assert store.state.quiz_best_score[25] == 3
        assert store.state.badges == frozenset()

        worse = QuizSession(25, _questions(), store)
        for _ in range(5):
            worse.submit("wrong")
        assert store.state.quiz_best_score[25] == 3

    def test_submit_after_completion(self, store: ProgressStore):
        session = QuizSession(25, _questions(1), store)
        session.submit("right")
        assert session.submit("right") == AnswerResult(False, "", 0)
        assert session.score == 1
