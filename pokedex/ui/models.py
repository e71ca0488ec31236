"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pokedex.core.catalog import Creature
from pokedex.core.progress import ProgressState


@dataclass
class CardState:
    """UI state for a single creature card."""

    creature: Creature
    favorite: bool
    discovered: bool
    best_score: int = 0


def card_states(creatures: List[Creature], state: ProgressState) -> List[CardState]:
    return [
        CardState(
            creature=c,
            favorite=c.id in state.favorites,
            discovered=c.id in state.discovered,
            best_score=state.quiz_best_score.get(c.id, 0),
        )
        for c in creatures
    ]
