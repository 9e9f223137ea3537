"""Custom exceptions raised by datadroid."""

from __future__ import annotations

from typing import Any


class DataDroidError(Exception):
    """Base error for all library failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ConnectionError(DataDroidError):
    """Raised when a remote source cannot be reached or answers with an error."""


class ParseError(DataDroidError):
    """Raised when stream content is malformed."""


class ExecutionError(DataDroidError):
    """Raised by ``retrieve`` when the background parse failed.

    The original failure is available as ``__cause__``.
    """


class TaskStateError(DataDroidError):
    """Raised when a task is driven through an illegal state transition."""


class TaskInterruptedError(DataDroidError):
    """Raised when waiting for a task gives up before it completes."""


class TaskCancelledError(DataDroidError):
    """Raised when retrieving a task that was cancelled before it ran."""


__all__ = [
    "ConnectionError",
    "DataDroidError",
    "ExecutionError",
    "ParseError",
    "TaskCancelledError",
    "TaskInterruptedError",
    "TaskStateError",
]
