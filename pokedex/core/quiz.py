"""Quiz questions derived from a creature record."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from pokedex.core.catalog import Creature, EvolutionNode

QUESTIONS_PER_QUIZ = 5
OPTIONS_PER_QUESTION = 4
NONE_OF_THESE = "None of these"
NO_EVOLUTION = "No evolution"


@dataclass(frozen=True)
class Question:
    prompt: str
    options: Tuple[str, ...]
    correct: str


def _pretty(name: str) -> str:
    return name.replace("-", " ").title()


class QuizBank:
    """Type chart and distractor pools loaded from ``data/quiz.yaml``."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or Path(__file__).resolve().parent.parent / "data" / "quiz.yaml"
        (
            self._weaknesses,
            self._type_combinations,
            self._moves,
            self._abilities,
        ) = self._load()

    @property
    def types(self) -> List[str]:
        return list(self._weaknesses)

    def weaknesses(self, types: Sequence[str]) -> List[str]:
        """Weaknesses of every type in order, without duplicates."""
        seen: Dict[str, None] = {}
        for type_name in types:
            for weakness in self._weaknesses.get(type_name, []):
                seen.setdefault(weakness, None)
        return list(seen)

    @property
    def type_combinations(self) -> List[str]:
        return list(self._type_combinations)

    @property
    def moves(self) -> List[str]:
        return list(self._moves)

    @property
    def abilities(self) -> List[str]:
        return list(self._abilities)

    def _load(self) -> Tuple[Dict[str, List[str]], List[str], List[str], List[str]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Quiz data not found: {self._path}")
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{self._path.name}: expected a YAML mapping")

        chart = raw.get("weaknesses")
        if not isinstance(chart, dict) or not chart:
            raise ValueError(f"{self._path.name}: missing or invalid 'weaknesses'")
        weaknesses: Dict[str, List[str]] = {}
        for type_name, against in chart.items():
            if not isinstance(against, list):
                raise ValueError(f"{self._path.name}: weaknesses of {type_name!r} must be a list")
            weaknesses[str(type_name)] = [str(item) for item in against]

        def _pool(key: str) -> List[str]:
            values = raw.get(key)
            if not isinstance(values, list):
                raise ValueError(f"{self._path.name}: missing or invalid '{key}'")
            items = [str(item).strip() for item in values if str(item).strip()]
            if len(items) < OPTIONS_PER_QUESTION:
                raise ValueError(
                    f"{self._path.name}: '{key}' needs at least {OPTIONS_PER_QUESTION} entries"
                )
            return items

        return weaknesses, _pool("type_combinations"), _pool("moves"), _pool("abilities")


def _with_distractors(
    correct: str,
    candidates: Sequence[str],
    rng: random.Random,
    shuffle_candidates: bool = True,
) -> Tuple[str, ...]:
    pool = [c for c in dict.fromkeys(candidates) if c != correct]
    if shuffle_candidates:
        pool = rng.sample(pool, len(pool))
    options = [correct] + pool[: OPTIONS_PER_QUESTION - 1]
    rng.shuffle(options)
    return tuple(options)


def _type_question(creature: Creature, bank: QuizBank, rng: random.Random) -> Question:
    correct = "/".join(_pretty(t) for t in creature.types)
    # Combinations match regardless of order; keep one spelling of each.
    seen = {frozenset(creature.types)}
    candidates = []
    for combo in bank.type_combinations:
        parts = [t.strip().lower() for t in combo.split("/")]
        key = frozenset(parts)
        if key in seen:
            continue
        seen.add(key)
        candidates.append("/".join(_pretty(t) for t in parts))
    return Question(
        prompt=f"What type(s) is {creature.display_name}?",
        options=_with_distractors(correct, candidates, rng),
        correct=correct,
    )


def _weakness_question(creature: Creature, bank: QuizBank, rng: random.Random) -> Question:
    weaknesses = bank.weaknesses(creature.types)
    correct = _pretty(weaknesses[0]) if weaknesses else NONE_OF_THESE
    candidates = [_pretty(t) for t in bank.types if t not in weaknesses]
    return Question(
        prompt=f"What is {creature.display_name}'s main weakness?",
        options=_with_distractors(correct, candidates, rng),
        correct=correct,
    )


def _move_question(creature: Creature, bank: QuizBank, rng: random.Random) -> Question:
    learnable = set(creature.moves)
    correct = _pretty(rng.choice(creature.moves)) if creature.moves else NONE_OF_THESE
    candidates = [_pretty(m) for m in bank.moves if m not in learnable]
    return Question(
        prompt=f"Which of these moves can {creature.display_name} learn?",
        options=_with_distractors(correct, candidates, rng),
        correct=correct,
    )


def _ability_question(creature: Creature, bank: QuizBank, rng: random.Random) -> Question:
    own = {a.name for a in creature.abilities}
    regular = [a for a in creature.abilities if not a.is_hidden] or list(creature.abilities)
    correct = _pretty(regular[0].name) if regular else NONE_OF_THESE
    candidates = [_pretty(a) for a in bank.abilities if a not in own]
    return Question(
        prompt=f"Which of these is one of {creature.display_name}'s abilities?",
        options=_with_distractors(correct, candidates, rng),
        correct=correct,
    )


def evolution_line(creature: Creature, evolution: Optional[EvolutionNode]) -> List[str]:
    if evolution is None:
        return [creature.display_name]
    return [_pretty(name) for name in evolution.primary_line()]


def _evolution_question(
    creature: Creature,
    evolution: EvolutionNode,
    rng: random.Random,
) -> Question:
    line = evolution_line(creature, evolution)
    first = line[0]
    if len(line) > 1:
        correct = " → ".join(line)
    else:
        correct = f"{first} ({NO_EVOLUTION})"
    candidates: List[str] = []
    if len(line) > 1:
        candidates.append(" → ".join(reversed(line)))
    if len(line) > 2:
        candidates.append(f"{line[0]} → {line[-1]}")
    candidates += [f"{first} → Unknown", f"{first} → Mystery", f"Unknown → {first}"]
    return Question(
        prompt=f"What is the correct evolution chain for {creature.display_name}?",
        options=_with_distractors(correct, candidates, rng, shuffle_candidates=False),
        correct=correct,
    )


def build_questions(
    creature: Creature,
    evolution: Optional[EvolutionNode],
    bank: QuizBank,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Quiz questions for ``creature`` in a fixed order.

    The evolution question comes last and is left out when the chain could
    not be loaded, so an unknown chain is never asked about or credited.
    """
    rng = rng or random.Random()
    questions = [
        _type_question(creature, bank, rng),
        _weakness_question(creature, bank, rng),
        _move_question(creature, bank, rng),
        _ability_question(creature, bank, rng),
    ]
    if evolution is not None:
        questions.append(_evolution_question(creature, evolution, rng))
    return questions
