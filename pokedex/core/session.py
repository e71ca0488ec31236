from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from pokedex.core.progress import ProgressStore
from pokedex.core.quiz import Question


@dataclass
class AnswerResult:
    """Outcome of a single quiz answer."""

    correct: bool
    correct_answer: str
    points_awarded: int


class QuizSession:
    """Walks through one creature's quiz and reports answers to the store.

    The session moves from in-progress (``index < total_questions``) to
    complete; a session without questions starts complete. Its score counts
    every correct answer, including questions that were already credited in
    an earlier quiz and therefore earn no points. Reaching the end updates
    the best score and checks for the perfect-score badge exactly once.
    """

    def __init__(
        self,
        creature_id: int,
        questions: Sequence[Question],
        store: ProgressStore,
        creature_name: str = "",
    ) -> None:
        self._creature_id = creature_id
        self._creature_name = creature_name
        self._questions = list(questions)
        self._store = store
        self._index = 0
        self._score = 0
        self._answers: List[bool] = []
        self._finished = False
        if not self._questions:
            self._finish()

    @property
    def creature_id(self) -> int:
        return self._creature_id

    @property
    def index(self) -> int:
        """Index of the current question (0-based)."""
        return self._index

    @property
    def score(self) -> int:
        return self._score

    @property
    def answers(self) -> List[bool]:
        """Right/wrong flag for every answered question, in order."""
        return list(self._answers)

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    def current_question(self) -> Optional[Question]:
        if self.is_complete():
            return None
        return self._questions[self._index]

    def is_complete(self) -> bool:
        return self._index >= len(self._questions)

    def is_perfect(self) -> bool:
        return self.is_complete() and self.total_questions > 0 and self._score == self.total_questions

    def submit(self, answer: str) -> AnswerResult:
        """Answer the current question and advance to the next one."""
        if self.is_complete():
            return AnswerResult(correct=False, correct_answer="", points_awarded=0)
        question = self._questions[self._index]
        correct = answer == question.correct
        points_before = self._store.state.points
        self._store.record_question_answer(self._creature_id, self._index, correct)
        awarded = self._store.state.points - points_before

        if correct:
            self._score += 1
        self._answers.append(correct)
        self._index += 1

        if self.is_complete():
            self._finish()
        return AnswerResult(correct=correct, correct_answer=question.correct, points_awarded=awarded)

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._store.update_quiz_best_score(self._creature_id, self._score)
        self._store.grant_perfect_score_badge(
            self._creature_id, self._score, self.total_questions, self._creature_name
        )
