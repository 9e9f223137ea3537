"""Leveled logging for parse tasks and the sources they open."""

from __future__ import annotations

import logging
from typing import Any, Literal

LogLevel = Literal["debug", "info", "warn", "error"]

LOGGER_NAME = "datadroid"

LEVELS: dict[LogLevel, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class BoundLogger:
    """A ``logging.Logger`` plus a per-parser threshold.

    Each task gets its own threshold (``log_level``) while sharing the
    handlers configured on the ``datadroid`` logger tree.
    """

    def __init__(self, logger: logging.Logger | None = None, *, level: LogLevel = "info") -> None:
        self._logger = logger or _default_logger()
        self._threshold = LEVELS[level]
        self._level = level

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def child(self, name: str) -> "BoundLogger":
        return BoundLogger(self._logger.getChild(name), level=self._level)

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if level >= self._threshold:
            self._logger.log(level, msg, *args, **kwargs)


def _default_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger


def create_logger(*, logger: logging.Logger | BoundLogger | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LOGGER_NAME", "LogLevel", "create_logger"]
