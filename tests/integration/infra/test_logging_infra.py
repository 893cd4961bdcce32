from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, ownership of handlers and log file rotation logic.
"""

import logging
from logging.handlers import QueueHandler
from pathlib import Path

import pytest

from codeshaper.infra.logging import LoggingConfig, configure_logging, shutdown_logging
from codeshaper.infra.logging.core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR, parse_level
from codeshaper.infra.logging.handlers import _HANDLER_TAG_ATTR, create_rotating_file_handler


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach everything the package installed before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _own_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial_handler_count = len(_own_handlers())

    configure_logging(cfg)
    assert len(_own_handlers()) == initial_handler_count == 1, "Handlers were duplicated."


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "logs" / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Stopping the listener drains the queue into the file handler
    shutdown_logging()

    assert log_file.exists()
    assert (tmp_path / "logs" / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-03: Verify that the root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    root = logging.getLogger()

    handlers = _own_handlers()
    assert len(handlers) == 1
    assert isinstance(handlers[0], QueueHandler)
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is True


def test_foreign_handlers_survive_reconfiguration() -> None:
    """TC-04: Only handlers tagged by the package are removed."""
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(level="INFO"))
        configure_logging(LoggingConfig(level="DEBUG"), force=True)
        shutdown_logging()

        assert foreign in root.handlers
        assert _own_handlers() == []
    finally:
        root.removeHandler(foreign)


def test_force_reconfigure_changes_level() -> None:
    """TC-05: force=True rebuilds the setup with the new level."""
    configure_logging(LoggingConfig(level="WARNING"))
    assert logging.getLogger().level == logging.WARNING

    configure_logging(LoggingConfig(level="DEBUG"))
    assert logging.getLogger().level == logging.WARNING

    configure_logging(LoggingConfig(level="DEBUG"), force=True)
    assert logging.getLogger().level == logging.DEBUG


def test_config_from_settings(tmp_path: Path) -> None:
    """TC-06: Persisted settings drive level and file output."""
    log_path = str(tmp_path / "app.log")

    cfg = LoggingConfig.from_settings({"log_level": "error", "save_log_file": False}, log_file=log_path)
    assert cfg.level == "error"
    assert cfg.log_file is None

    cfg = LoggingConfig.from_settings({"save_log_file": True}, debug=True, log_file=log_path)
    assert cfg.level == "DEBUG"
    assert cfg.log_file == log_path


def test_parse_level_defaults_to_info() -> None:
    assert parse_level("warn") == logging.WARNING
    assert parse_level(" debug ") == logging.DEBUG
    assert parse_level("verbose") == logging.INFO
    assert parse_level(None) == logging.INFO


def test_unwritable_log_file_degrades(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-07: A log path that cannot be opened yields no handler and a warning."""
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    handler = create_rotating_file_handler(
        str(blocker / "app.log"), logging.INFO, logging.Formatter(), 1024, 1
    )

    assert handler is None
    assert "Cannot open log file" in capsys.readouterr().err
