from __future__ import annotations

import math
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Generic, Iterable, List, Sequence, TypeVar

from pokedex.core.catalog import Creature

T = TypeVar("T")

# Minimum similarity ratio for a fuzzy (non-substring) name match.
FUZZY_THRESHOLD = 0.6


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _match_score(creature: Creature, term: str) -> float:
    """0 means no match; higher is better."""
    digits = term.lstrip("#")
    if digits.isdigit():
        return 3.0 if int(digits) == creature.id else 0.0
    name = creature.name.lower()
    pretty = creature.display_name.lower()
    if name.startswith(term) or pretty.startswith(term):
        return 2.0 + len(term) / max(len(name), 1)
    if term in name or term in pretty:
        return 1.5 + len(term) / max(len(name), 1)
    ratio = max(
        SequenceMatcher(None, term, name).ratio(),
        SequenceMatcher(None, term, name[: len(term)]).ratio(),
    )
    return ratio if ratio >= FUZZY_THRESHOLD else 0.0


def search_creatures(creatures: Sequence[Creature], term: str) -> List[Creature]:
    """Fuzzy name/number search, best matches first. Blank terms match all."""
    term = term.strip().lower()
    if not term:
        return list(creatures)
    scored = []
    for creature in creatures:
        score = _match_score(creature, term)
        if score > 0:
            scored.append((score, creature))
    scored.sort(key=lambda pair: (-pair[0], pair[1].id))
    return [c for _, c in scored]


def filter_by_types(creatures: Iterable[Creature], selected_types: Iterable[str]) -> List[Creature]:
    """Keep creatures having any of ``selected_types``; empty selection keeps all."""
    wanted = set(selected_types)
    if not wanted:
        return list(creatures)
    return [c for c in creatures if wanted.intersection(c.types)]


def filter_creatures(
    creatures: Sequence[Creature],
    term: str,
    selected_types: Iterable[str],
) -> List[Creature]:
    return filter_by_types(search_creatures(creatures, term), selected_types)


def paginate(items: Sequence[T], page: int, per_page: int) -> Page[T]:
    """Slice ``items`` into pages; ``page`` is clamped into the valid range."""
    per_page = max(1, per_page)
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = max(1, min(page, total_pages))
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        total_pages=total_pages,
        total_items=len(items),
    )
