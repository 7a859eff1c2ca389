from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest

from excel_records.config import LOG_DIR_ENV, LOG_LEVEL_ENV, Settings
from excel_records.utils import log as log_module


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)

    settings = Settings.from_env()
    assert settings.log_level == logging.INFO
    assert settings.log_dir is None


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, " debug ")
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "logs"))

    settings = Settings.from_env()
    assert settings.log_level == logging.DEBUG
    assert settings.log_dir == tmp_path / "logs"


def test_unknown_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert Settings.from_env().log_level == logging.INFO


def test_get_logger_adds_rotating_file_handler(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    package_logger = logging.getLogger(log_module.ROOT_LOGGER_NAME)
    saved_handlers = list(package_logger.handlers)
    saved_level = package_logger.level
    monkeypatch.setattr(log_module, "_LOG_CONFIGURED", False)
    package_logger.handlers = []

    try:
        logger = log_module.get_logger("test", Settings(log_level=logging.WARNING, log_dir=tmp_path / "logs"))
        assert logger.name == "excel_records.test"
        assert package_logger.level == logging.WARNING
        file_handlers = [
            handler for handler in package_logger.handlers if isinstance(handler, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        logger.warning("written to file")
        file_handlers[0].flush()
        assert "written to file" in (tmp_path / "logs" / "excel_records.log").read_text(encoding="utf-8")

        # configuration only happens once
        log_module.get_logger("again")
        assert len(package_logger.handlers) == 2
    finally:
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers = saved_handlers
        package_logger.setLevel(saved_level)
