"""Runtime settings for excel_records resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVEL_ENV = "EXCEL_RECORDS_LOG_LEVEL"
LOG_DIR_ENV = "EXCEL_RECORDS_LOG_DIR"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Resolved logging configuration."""

    log_level: int = logging.INFO
    log_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from ``EXCEL_RECORDS_*`` environment variables.

        Unknown level names fall back to INFO; an empty log directory disables
        the file handler.
        """

        level_name = (_read_env(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
        level_value = getattr(logging, level_name, None)
        if not isinstance(level_value, int):
            level_value = logging.INFO
        log_dir = _read_env(LOG_DIR_ENV)
        return cls(
            log_level=level_value,
            log_dir=Path(log_dir).expanduser() if log_dir else None,
        )


def _read_env(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    return value.strip()
