"""Logging setup on top of loguru."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

# Silent until an application calls setup_logging().
logger.disable("phicode")


class LogManager:
    """Manage application logging with rotation and multiple outputs."""

    _instance: Optional["LogManager"] = None
    _initialized: bool = False

    def __new__(cls) -> "LogManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._log_dir: Optional[Path] = None
        self._handler_ids: list = []

    def setup(
        self,
        log_dir: Optional[Union[str, Path]] = None,
        level: str = "WARNING",
        rotation: str = "10 MB",
        retention: str = "7 days",
        format_string: Optional[str] = None,
    ):
        """Setup logging with rotation.

        Args:
            log_dir: Directory for log files; console only when None
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            rotation: Size or time for log rotation (e.g., "10 MB", "1 hour", "midnight")
            retention: How long to keep old logs (e.g., "7 days", "1 week")
            format_string: Custom format string for log messages
        """
        logger.remove()
        self._handler_ids = []
        level = level.upper()

        if format_string is None:
            format_string = (
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{message}</cyan>"
            )

        # stdout carries transpiled output, so the console sink is stderr
        self._handler_ids.append(
            logger.add(sys.stderr, level=level, format=format_string, colorize=False)
        )

        self._log_dir = None
        if log_dir is not None:
            self._log_dir = Path(log_dir)
            self._log_dir.mkdir(parents=True, exist_ok=True)
            self._handler_ids.append(logger.add(
                str(self._log_dir / "app.log"),
                level=level,
                rotation=rotation,
                retention=retention,
                format=format_string,
                encoding="utf-8",
            ))
            self._handler_ids.append(logger.add(
                str(self._log_dir / "error.log"),
                level="ERROR",
                rotation=rotation,
                retention=retention,
                format=format_string,
                encoding="utf-8",
            ))

        logger.enable("phicode")

    def log(self, level: str, message: str, **kwargs):
        """Log a message with the given level."""
        logger.opt(depth=1).log(level.upper(), message, **kwargs)

    def debug(self, message: str, **kwargs):
        logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        logger.opt(depth=1).info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        logger.opt(depth=1).error(message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log an exception with traceback."""
        logger.opt(depth=1, exception=True).error(message, **kwargs)

    @property
    def log_dir(self) -> Optional[Path]:
        """Get the log directory path."""
        return self._log_dir


# Global log manager instance
log_manager = LogManager()


def setup_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: str = "WARNING",
    rotation: str = "10 MB",
    retention: str = "7 days",
):
    """Setup application logging with sensible defaults."""
    log_manager.setup(log_dir=log_dir, level=level, rotation=rotation, retention=retention)
    return log_manager
