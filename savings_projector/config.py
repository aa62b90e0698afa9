"""
Runtime settings for the savings projector API.

Values come from ``SAVINGS_PROJECTOR_*`` environment variables; tests and
embedding code pass a ``Settings`` instance to ``create_app`` instead.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "SAVINGS_PROJECTOR_"
IN_MEMORY_DATABASE = ":memory:"

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        database: SQLite file holding saved scenarios, or ":memory:" to keep
                  them only for the life of the process.
        cors_origins: Browser origins allowed to call /api/*.
        log_level: structlog/stdlib level name.
        log_json: Render log lines as JSON instead of console text.
        palette_size: Number of chart colours; series colours cycle over it.
    """

    database: str = "scenarios.db"
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    log_json: bool = False
    palette_size: int = 5

    def __post_init__(self):
        if self.palette_size < 1:
            raise ValueError("palette_size must be at least 1")

    @property
    def uses_memory_store(self) -> bool:
        return self.database == IN_MEMORY_DATABASE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()

        origins = env.get(f"{ENV_PREFIX}CORS_ORIGINS")
        return cls(
            database=env.get(f"{ENV_PREFIX}DATABASE", defaults.database),
            cors_origins=(
                tuple(origin.strip() for origin in origins.split(",") if origin.strip())
                if origins
                else defaults.cors_origins
            ),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
            log_json=_parse_bool(env.get(f"{ENV_PREFIX}LOG_JSON", "false")),
            palette_size=int(env.get(f"{ENV_PREFIX}PALETTE_SIZE", defaults.palette_size)),
        )
