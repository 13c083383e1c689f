"""Runtime configuration, read from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Self

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

DEFAULT_DATABASE_URL = "sqlite:///gambit.db"
DEFAULT_LOG_LEVEL = "WARNING"

TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    undo_enabled: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> Self:
        """Build the settings from a mapping of environment variables, falling back to the defaults."""
        log_level = environ.get("GAMBIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {log_level!r}")

        return cls(
            database_url=environ.get("GAMBIT_DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=_as_bool(environ.get("GAMBIT_SQL_ECHO"), False),
            log_level=log_level,
            undo_enabled=_as_bool(environ.get("GAMBIT_UNDO_ENABLED"), True),
        )


def get_settings() -> Settings:
    return Settings.from_env(os.environ)


def configure_logging(level: Optional[str] = None) -> None:
    """Set up the root logger. Only the first call has an effect (logging.basicConfig)."""
    logging.basicConfig(level=level or get_settings().log_level, format=LOG_FORMAT)
