"""Logging helpers for the excel_records package."""

# Module responsibilities:
# - Centralize logging configuration with stream + optional rotating file handlers.
# - Provide get_logger() that ensures configuration occurs once.

from __future__ import annotations

import logging
import logging.handlers
from typing import Optional

from ..config import Settings

ROOT_LOGGER_NAME = "excel_records"
_LOG_CONFIGURED = False


def _configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure the package logger once from the resolved settings."""
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    resolved = settings or Settings.from_env()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(resolved.log_level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(resolved.log_level)
    root_logger.addHandler(console_handler)

    if resolved.log_dir is not None:
        resolved.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            resolved.log_dir / "excel_records.log",
            maxBytes=2_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(resolved.log_level)
        root_logger.addHandler(file_handler)

    _LOG_CONFIGURED = True


def get_logger(name: str, settings: Optional[Settings] = None) -> logging.Logger:
    """Return a package-scoped logger.

    Args:
        name: Logger name suffix appended to the package root logger namespace.
        settings: Optional settings override used on first configuration only.

    Returns:
        Logger scoped under ``excel_records``.
    """

    _configure_logging(settings)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
