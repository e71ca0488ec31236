"""PokeAPI client: the creature roster and lazily fetched evolution chains.

Details are fetched in bounded batches on a thread pool. Completions are
collected by creature id, never by arrival order, and a failed record is
dropped from the result instead of failing the whole roster.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

_ID_FROM_URL = re.compile(r"/(\d+)/?$")


class CatalogError(Exception):
    """A catalog request failed or returned data we cannot use."""


@dataclass(frozen=True)
class Stat:
    name: str
    base_value: int


@dataclass(frozen=True)
class Ability:
    name: str
    is_hidden: bool = False


@dataclass(frozen=True)
class Creature:
    id: int
    name: str
    types: Tuple[str, ...]
    stats: Tuple[Stat, ...]
    height: int
    weight: int
    abilities: Tuple[Ability, ...]
    moves: Tuple[str, ...]
    artwork_url: str
    species_url: str

    @property
    def height_m(self) -> float:
        return self.height / 10

    @property
    def weight_kg(self) -> float:
        return self.weight / 10

    @property
    def display_name(self) -> str:
        return self.name.replace("-", " ").title()

    @property
    def number(self) -> str:
        return f"#{self.id:03d}"


@dataclass(frozen=True)
class EvolutionNode:
    name: str
    species_id: int
    min_level: Optional[int] = None
    item: Optional[str] = None
    trigger: Optional[str] = None
    evolves_to: Tuple["EvolutionNode", ...] = ()

    @property
    def requirement(self) -> str:
        """How this stage is reached, e.g. ``Level 16`` or ``Use thunder-stone``."""
        if self.min_level:
            return f"Level {self.min_level}"
        if self.item:
            return f"Use {self.item}"
        if self.trigger:
            return "Special condition"
        return ""

    def primary_line(self) -> List[str]:
        """Species names along the first branch, base form first."""
        names = [self.name]
        node = self
        while node.evolves_to:
            node = node.evolves_to[0]
            names.append(node.name)
        return names


def id_from_url(url: str) -> int:
    match = _ID_FROM_URL.search(url or "")
    if not match:
        raise ValueError(f"no numeric id in {url!r}")
    return int(match.group(1))


def parse_creature(payload: Dict[str, Any]) -> Creature:
    """Build a Creature from a ``/pokemon/{id}`` response."""
    sprites = payload.get("sprites") or {}
    artwork = ((sprites.get("other") or {}).get("official-artwork") or {}).get("front_default")
    types = sorted(payload.get("types", []), key=lambda t: t.get("slot", 0))
    return Creature(
        id=int(payload["id"]),
        name=str(payload["name"]),
        types=tuple(t["type"]["name"] for t in types),
        stats=tuple(Stat(s["stat"]["name"], int(s["base_stat"])) for s in payload.get("stats", [])),
        height=int(payload.get("height") or 0),
        weight=int(payload.get("weight") or 0),
        abilities=tuple(
            Ability(a["ability"]["name"], bool(a.get("is_hidden", False)))
            for a in payload.get("abilities", [])
        ),
        moves=tuple(m["move"]["name"] for m in payload.get("moves", [])),
        artwork_url=artwork or sprites.get("front_default") or "",
        species_url=str((payload.get("species") or {}).get("url", "")),
    )


def parse_evolution_chain(payload: Dict[str, Any]) -> EvolutionNode:
    """Build the evolution tree from an ``/evolution-chain/{id}`` response."""

    def _node(link: Dict[str, Any]) -> EvolutionNode:
        species = link["species"]
        details = link.get("evolution_details") or [{}]
        first = details[0] or {}
        return EvolutionNode(
            name=species["name"],
            species_id=id_from_url(species.get("url", "")),
            min_level=first.get("min_level"),
            item=(first.get("item") or {}).get("name"),
            trigger=(first.get("trigger") or {}).get("name"),
            evolves_to=tuple(_node(child) for child in link.get("evolves_to", [])),
        )

    return _node(payload["chain"])


class CatalogFetcher:
    """HTTP client for the creature catalog with pooled, retrying connections."""

    def __init__(
        self,
        base_url: str = "https://pokeapi.co/api/v2",
        timeout: float = 10.0,
        batch_size: int = 20,
        retries: int = 3,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._batch_size = max(1, batch_size)
        if session is None:
            session = requests.Session()
            retry = Retry(
                total=retries,
                backoff_factor=0.3,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
            )
            adapter = HTTPAdapter(
                max_retries=retry,
                pool_connections=2,
                pool_maxsize=self._batch_size,
            )
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self._session = session

    def close(self) -> None:
        self._session.close()

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise CatalogError(f"GET {url} failed: {e}") from e

    def fetch_creature(self, url: str) -> Creature:
        payload = self._get_json(url)
        try:
            return parse_creature(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogError(f"Malformed creature record at {url}: {e}") from e

    def fetch_roster(self, size: int) -> List[Creature]:
        """Return up to ``size`` creatures sorted by id.

        Raises CatalogError when the list endpoint fails or when not a single
        record could be fetched.
        """
        listing = self._get_json(f"{self._base_url}/pokemon", params={"limit": size})
        results = listing.get("results") if isinstance(listing, dict) else None
        if not isinstance(results, list):
            raise CatalogError("Roster listing has no 'results' list")
        urls = [
            entry["url"]
            for entry in results[:size]
            if isinstance(entry, dict) and entry.get("url")
        ]

        creatures: Dict[int, Creature] = {}
        for start in range(0, len(urls), self._batch_size):
            batch = urls[start:start + self._batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = {executor.submit(self.fetch_creature, url): url for url in batch}
                for future in as_completed(futures):
                    url = futures[future]
                    try:
                        creature = future.result()
                    except CatalogError as e:
                        logger.warning("Skipping creature %s: %s", url, e)
                        continue
                    creatures[creature.id] = creature

        if urls and not creatures:
            raise CatalogError(f"All {len(urls)} creature requests failed")
        if len(creatures) < len(urls):
            logger.info("Loaded %d of %d creatures", len(creatures), len(urls))
        return [creatures[key] for key in sorted(creatures)]

    def fetch_evolution_chain(self, creature: Creature) -> EvolutionNode:
        if not creature.species_url:
            raise CatalogError(f"{creature.name} has no species reference")
        species = self._get_json(creature.species_url)
        try:
            chain_url = species["evolution_chain"]["url"]
        except (KeyError, TypeError) as e:
            raise CatalogError(f"Species record for {creature.name} has no evolution chain") from e
        payload = self._get_json(chain_url)
        try:
            return parse_evolution_chain(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogError(f"Malformed evolution chain at {chain_url}: {e}") from e


class CatalogLoader:
    """Retries whole-roster loads and drops results from superseded loads.

    Call :meth:`begin` to start a load and get its generation token; any
    later ``begin`` makes the earlier token stale.
    """

    def __init__(
        self,
        fetcher: CatalogFetcher,
        roster_size: int,
        attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._fetcher = fetcher
        self._roster_size = roster_size
        self._attempts = max(1, attempts)
        self._retry_delay = retry_delay
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def fetcher(self) -> CatalogFetcher:
        return self._fetcher

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def load(self, generation: int) -> Optional[List[Creature]]:
        """Fetch the roster; None means a newer load has started."""
        last_error: Optional[CatalogError] = None
        for attempt in range(1, self._attempts + 1):
            if not self.is_current(generation):
                logger.info("Catalog load %d superseded before attempt %d", generation, attempt)
                return None
            try:
                creatures = self._fetcher.fetch_roster(self._roster_size)
            except CatalogError as e:
                last_error = e
                logger.warning("Catalog load attempt %d/%d failed: %s", attempt, self._attempts, e)
                if attempt < self._attempts and self._retry_delay > 0:
                    time.sleep(self._retry_delay * attempt)
                continue
            if not self.is_current(generation):
                logger.info("Discarding superseded catalog load %d", generation)
                return None
            return creatures
        raise CatalogError(
            f"Could not load the catalog after {self._attempts} attempts: {last_error}"
        ) from last_error
