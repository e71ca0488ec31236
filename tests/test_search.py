"""Tests for pokedex.core.search – search, type filters and paging."""

from __future__ import annotations

from typing import Tuple

import pytest

from pokedex.core.catalog import Creature
from pokedex.core.search import Page, filter_by_types, filter_creatures, paginate, search_creatures


def _creature(creature_id: int, name: str, types: Tuple[str, ...]) -> Creature:
    return Creature(
        id=creature_id,
        name=name,
        types=types,
        stats=(),
        height=1,
        weight=1,
        abilities=(),
        moves=(),
        artwork_url="",
        species_url="",
    )


ROSTER = [
    _creature(1, "bulbasaur", ("grass", "poison")),
    _creature(4, "charmander", ("fire",)),
    _creature(6, "charizard", ("fire", "flying")),
    _creature(25, "pikachu", ("electric",)),
    _creature(26, "raichu", ("electric",)),
    _creature(122, "mr-mime", ("psychic", "fairy")),
]


# ---------------------------------------------------------------------------
# search_creatures
# ---------------------------------------------------------------------------

class TestSearch:
    def test_blank_term_keeps_everything(self):
        assert search_creatures(ROSTER, "   ") == ROSTER

    def test_prefix_match(self):
        assert [c.name for c in search_creatures(ROSTER, "char")] == ["charizard", "charmander"]

    def test_case_insensitive(self):
        assert [c.id for c in search_creatures(ROSTER, "PIKA")] == [25]

    def test_substring_match(self):
        results = search_creatures(ROSTER, "chu")
        assert {c.id for c in results[:2]} == {25, 26}

    def test_number_match(self):
        assert [c.id for c in search_creatures(ROSTER, "25")] == [25]
        assert [c.id for c in search_creatures(ROSTER, "#006")] == [6]

    def test_display_name_match(self):
        assert [c.id for c in search_creatures(ROSTER, "mr mime")] == [122]

    def test_typo_still_matches(self):
        assert 25 in [c.id for c in search_creatures(ROSTER, "pikachoo")]

    def test_prefix_ranks_above_fuzzy(self):
        results = search_creatures(ROSTER, "raichu")
        assert results[0].id == 26

    def test_no_match(self):
        assert search_creatures(ROSTER, "zzzzqx") == []


# ---------------------------------------------------------------------------
# Type filters
# ---------------------------------------------------------------------------

class TestTypeFilter:
    def test_empty_selection_keeps_all(self):
        assert filter_by_types(ROSTER, []) == ROSTER

    def test_any_of_selected_types(self):
        ids = [c.id for c in filter_by_types(ROSTER, {"flying", "electric"})]
        assert ids == [6, 25, 26]

    def test_combined_with_search(self):
        ids = [c.id for c in filter_creatures(ROSTER, "char", {"flying"})]
        assert ids == [6]


# ---------------------------------------------------------------------------
# paginate
# ---------------------------------------------------------------------------

class TestPaginate:
    def test_first_page(self):
        page = paginate(list(range(45)), 1, 20)
        assert page.items == list(range(20))
        assert page.total_pages == 3
        assert page.total_items == 45
        assert not page.has_previous
        assert page.has_next

    def test_last_page_is_partial(self):
        page = paginate(list(range(45)), 3, 20)
        assert page.items == [40, 41, 42, 43, 44]
        assert page.has_previous
        assert not page.has_next

    @pytest.mark.parametrize("requested, expected", [(0, 1), (-4, 1), (9, 3)])
    def test_page_is_clamped(self, requested: int, expected: int):
        assert paginate(list(range(45)), requested, 20).page == expected

    def test_empty_input(self):
        assert paginate([], 5, 20) == Page(items=[], page=1, total_pages=1, total_items=0)
