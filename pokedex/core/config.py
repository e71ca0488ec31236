"""Runtime settings, read from ``POKEDEX_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://pokeapi.co/api/v2"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_from_env(environ: Mapping[str, str], key: str, default: int, minimum: int = 1) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", key, raw, default)
        return default
    return max(minimum, value)


def _float_from_env(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", key, raw, default)
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    api_base_url: str = DEFAULT_API_URL
    roster_size: int = 151
    batch_size: int = 20
    page_size: int = 20
    request_timeout: float = 10.0
    load_attempts: int = 3
    log_level: str = "INFO"

    @property
    def progress_file(self) -> Path:
        return self.data_dir / "progress.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        home = env.get("POKEDEX_HOME")
        data_dir = Path(home).expanduser() if home else Path.home() / ".pokedex"
        log_level = env.get("POKEDEX_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if log_level not in _LOG_LEVELS:
            logger.warning("Unknown POKEDEX_LOG_LEVEL=%r, using INFO", log_level)
            log_level = "INFO"
        return cls(
            data_dir=data_dir,
            api_base_url=(env.get("POKEDEX_API_URL") or DEFAULT_API_URL).rstrip("/"),
            roster_size=_int_from_env(env, "POKEDEX_ROSTER_SIZE", 151),
            batch_size=_int_from_env(env, "POKEDEX_BATCH_SIZE", 20),
            page_size=_int_from_env(env, "POKEDEX_PAGE_SIZE", 20),
            request_timeout=_float_from_env(env, "POKEDEX_TIMEOUT", 10.0),
            load_attempts=_int_from_env(env, "POKEDEX_LOAD_ATTEMPTS", 3),
            log_level=log_level,
        )
