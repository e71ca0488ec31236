"""Tests for pokedex.ui.models – card state for the catalog grid."""

from __future__ import annotations

import pytest

from pokedex.core.catalog import Creature
from pokedex.core.progress import ProgressState
from pokedex.ui.models import CardState, card_states


def _creature(creature_id: int) -> Creature:
    return Creature(
        id=creature_id,
        name=f"creature-{creature_id}",
        types=("normal",),
        stats=(),
        height=1,
        weight=1,
        abilities=(),
        moves=(),
        artwork_url="",
        species_url="",
    )


# ===========================================================================
# CardState dataclass
# ===========================================================================

class TestCardState:
    @pytest.fixture()
    def sample_creature(self) -> Creature:
        return _creature(25)

    def test_creation(self, sample_creature: Creature):
        card = CardState(creature=sample_creature, favorite=True, discovered=False)
        assert card.creature is sample_creature
        assert card.favorite is True
        assert card.discovered is False
        assert card.best_score == 0  # default

    def test_equality(self, sample_creature: Creature):
        a = CardState(creature=sample_creature, favorite=False, discovered=True, best_score=3)
        b = CardState(creature=sample_creature, favorite=False, discovered=True, best_score=3)
        assert a == b


# ===========================================================================
# card_states
# ===========================================================================

class TestCardStates:
    def test_reflects_progress(self):
        state = ProgressState(
            favorites=frozenset({4}),
            discovered=frozenset({1, 4}),
            quiz_best_score={4: 5},
        )
        cards = card_states([_creature(1), _creature(4), _creature(7)], state)
        assert [(c.favorite, c.discovered, c.best_score) for c in cards] == [
            (False, True, 0),
            (True, True, 5),
            (False, False, 0),
        ]

    def test_keeps_order(self):
        creatures = [_creature(9), _creature(2)]
        assert [c.creature.id for c in card_states(creatures, ProgressState())] == [9, 2]

    def test_empty(self):
        assert card_states([], ProgressState()) == []
