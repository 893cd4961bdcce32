from __future__ import annotations

"""
Logging Configuration Model.

Describes how the logging subsystem is wired for one process: severity,
console output and the optional rotating log file.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable logging setup.

    Attributes:
        level: Minimum severity level to capture.
        console: Emit records on stderr (stdout stays reserved for output text).
        log_file: Optional path of a rotating log file.
        max_bytes: Size of one log segment before rotation.
        backup_count: Number of rotated segments to keep.
        console_fmt: Format of stderr records.
        file_fmt: Format of file records.
        datefmt: Timestamp format of file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_settings(
            cls,
            app_settings: Mapping[str, Any],
            debug: bool = False,
            log_file: Optional[str] = None,
    ) -> "LoggingConfig":
        """
        Build a config from the persisted 'app_settings' section.

        `debug` forces DEBUG level; `log_file` is used only when the settings
        enable 'save_log_file'.
        """
        level = "DEBUG" if debug else str(app_settings.get("log_level") or "INFO")
        keep_file = bool(app_settings.get("save_log_file"))
        return cls(level=level, log_file=log_file if keep_file else None)
