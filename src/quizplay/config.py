"""Runtime settings.

Values come from ``QUIZPLAY_*`` environment variables first; command-line
flags override them. Recognised variables:

``QUIZPLAY_DB``         catalog file (default ``./quizzes.json``)
``QUIZPLAY_HOST``       bind address for the TCP and HTTP servers
``QUIZPLAY_PORT``       TCP port (default 3030)
``QUIZPLAY_HTTP_PORT``  HTTP port (default 8000)
``QUIZPLAY_SEED``       master RNG seed, for reproducible rounds
``QUIZPLAY_NO_COLOR``   any of ``1/true/yes/on`` disables colour
``QUIZPLAY_LOG_LEVEL``  logging level name (default ``WARNING``)
``QUIZPLAY_ROUND_IDLE_TIMEOUT``  seconds before an untouched HTTP round is released
``QUIZPLAY_MAX_ROUNDS``  cap on live HTTP rounds (default 1000)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .data.catalog import default_catalog_path

_PREFIX: Final = "QUIZPLAY_"
_TRUTHY: Final = frozenset({"1", "true", "yes", "on"})


def _int_or_none(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"expected an integer, got {raw!r}") from None


def _int_or(raw: str | None, default: int) -> int:
    value = _int_or_none(raw)
    return default if value is None else value


def _float_or(raw: str | None, default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"expected a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    db_path: Path
    host: str = "127.0.0.1"
    port: int = 3030
    http_port: int = 8000
    seed: int | None = None
    no_color: bool = False
    log_level: str = "WARNING"
    round_idle_timeout: float = 900.0
    max_rounds: int = 1000

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env

        def get(name: str) -> str | None:
            value = env.get(_PREFIX + name)
            return value.strip() if value is not None else None

        db = get("DB")
        return cls(
            db_path=Path(db).expanduser() if db else default_catalog_path(),
            host=get("HOST") or cls.host,
            port=_int_or(get("PORT"), cls.port),
            http_port=_int_or(get("HTTP_PORT"), cls.http_port),
            seed=_int_or_none(get("SEED")),
            no_color=(get("NO_COLOR") or "").lower() in _TRUTHY,
            log_level=(get("LOG_LEVEL") or cls.log_level).upper(),
            round_idle_timeout=_float_or(get("ROUND_IDLE_TIMEOUT"), cls.round_idle_timeout),
            max_rounds=_int_or(get("MAX_ROUNDS"), cls.max_rounds),
        )
