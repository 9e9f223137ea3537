"""Background parse tasks.

A parse task turns a byte stream into an ordered list of records on a worker
pool. Concrete parsers subclass :class:`AbstractDataParser` and implement
``parse``; everything else (opening the source, scheduling, logging and
error propagation) is handled here.
"""

from __future__ import annotations

import io
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, wait
from typing import Any, BinaryIO, Callable, Generic, Protocol, TextIO, TypeVar, runtime_checkable

from .config import ParserOptions
from .errors import (
    DataDroidError,
    ExecutionError,
    TaskCancelledError,
    TaskInterruptedError,
    TaskStateError,
)
from .executor import default_executor
from .logger import BoundLogger, LogLevel, create_logger
from .transport import Source, http_source, is_url, open_source
from .types import ExecuteResult, TaskState

Record = TypeVar("Record")
RecordT = TypeVar("RecordT", covariant=True)
ParserT = TypeVar("ParserT", bound="AbstractDataParser[Any]")


@runtime_checkable
class DataParser(Protocol[RecordT]):
    """Contract shared by every parse task."""

    def execute(self) -> None: ...

    def retrieve(self, timeout: float | None = None) -> list[RecordT]: ...

    def execute_and_retrieve(self, timeout: float | None = None) -> list[RecordT]: ...

    def as_future(self) -> Future[Any] | None: ...


class AbstractDataParser(ABC, Generic[Record]):
    """Base class for parsers running on a worker pool.

    ``source`` may be a binary stream, ``bytes``, a filesystem path or an
    http(s) URL. It is opened on the worker thread, so no I/O happens in
    the caller's context. Streams passed in by the caller are left open.
    """

    def __init__(
        self,
        source: Source | None = None,
        *,
        executor: Executor | None = None,
        options: ParserOptions | None = None,
        logger: logging.Logger | BoundLogger | None = None,
        log_level: LogLevel = "info",
        on_progress: Callable[[Any], None] | None = None,
    ) -> None:
        self.source = source
        self.options = options or ParserOptions()
        self._executor = executor
        self._logger = create_logger(logger=logger, level=log_level).child("parser")
        self._on_progress = on_progress
        self._lock = threading.RLock()
        self._state = TaskState.CREATED
        self._future: Future[tuple[Record, ...]] | None = None
        self._callbacks: list[Callable[["AbstractDataParser[Record]"], None]] = []

    @classmethod
    def from_url(cls: type[ParserT], url: str, **kwargs: Any) -> ParserT:
        if not is_url(url):
            raise ValueError(f"Not an http(s) URL: {url}")
        return cls(url, **kwargs)

    @staticmethod
    def url_to_stream(url: str, options: ParserOptions | None = None) -> BinaryIO:
        """Open ``url`` with a GET and return a stream positioned at the body."""
        return http_source(url, options).open()

    @staticmethod
    def url_to_reader(url: str, encoding: str | None = None, options: ParserOptions | None = None) -> TextIO:
        options = options or ParserOptions()
        stream = AbstractDataParser.url_to_stream(url, options)
        return io.TextIOWrapper(stream, encoding=encoding or options.encoding)

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state.terminal

    @abstractmethod
    def parse(self, stream: BinaryIO) -> list[Record]:
        """Read the whole stream and return every record in input order."""

    def open_stream(self) -> BinaryIO:
        if self.source is None:
            raise TaskStateError(f"Parser {self.name} has no source to read from")
        return open_source(self.source, self.options, self._logger)

    def execute(self) -> None:
        with self._lock:
            if self._state is not TaskState.CREATED:
                raise TaskStateError(f"Cannot execute parser {self.name}: task is {self._state.value}")
            self._state = TaskState.RUNNING
            executor = self._executor or default_executor()
            try:
                self._future = executor.submit(self._run)
            except RuntimeError as exc:
                self._state = TaskState.CREATED
                raise TaskStateError(f"Cannot schedule parser {self.name}: {exc}") from exc
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            self._attach(callback)

    def retrieve(self, timeout: float | None = None) -> list[Record]:
        future = self._future
        if future is None:
            if self._state is TaskState.CANCELLED:
                raise TaskCancelledError(f"Parser {self.name} was cancelled")
            raise TaskStateError(f"Parser {self.name} has not been executed")

        # A TimeoutError raised by parse is a failure, not an expired wait
        finished, _ = wait([future], timeout=timeout)
        if not finished:
            raise TaskInterruptedError(
                f"Gave up waiting for parser {self.name} after {timeout}s",
                context=timeout,
            )
        if future.cancelled():
            raise TaskCancelledError(f"Parser {self.name} was cancelled")
        try:
            records = future.result()
        except Exception as exc:
            raise ExecutionError(f"Parser {self.name} failed: {exc}") from exc
        return list(records)

    def execute_and_retrieve(self, timeout: float | None = None) -> list[Record]:
        self.execute()
        return self.retrieve(timeout)

    def retrieve_safe(self, timeout: float | None = None) -> ExecuteResult[list[Record]]:
        try:
            return ExecuteResult(ok=True, data=self.retrieve(timeout))
        except DataDroidError as exc:
            return ExecuteResult(ok=False, error=exc)

    def cancel(self) -> bool:
        """Cancel the task if no worker has started it yet."""
        with self._lock:
            if self._state is TaskState.CREATED:
                self._state = TaskState.CANCELLED
                callbacks, self._callbacks = self._callbacks, []
            elif self._future is not None:
                # Future.cancel runs done callbacks inline; they must see the terminal state
                previous, self._state = self._state, TaskState.CANCELLED
                if not self._future.cancel():
                    self._state = previous
                    return False
                callbacks = []
            else:
                return False
        self._logger.debug("parser %s cancelled before execution", self.name)
        for callback in callbacks:
            callback(self)
        return True

    def as_future(self) -> Future[tuple[Record, ...]] | None:
        return self._future

    def add_done_callback(self, fn: Callable[["AbstractDataParser[Record]"], None]) -> None:
        """Call ``fn(task)`` once the task reaches a terminal state."""
        with self._lock:
            if self._future is None and not self.done:
                self._callbacks.append(fn)
                return
        if self._future is None:
            fn(self)
        else:
            self._attach(fn)

    def publish_progress(self, value: Any) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(value)
        except Exception:
            self._logger.warn("progress callback of parser %s failed", self.name, exc_info=True)

    def _attach(self, fn: Callable[["AbstractDataParser[Record]"], None]) -> None:
        assert self._future is not None
        self._future.add_done_callback(lambda _future: fn(self))

    def _run(self) -> tuple[Record, ...]:
        self._logger.info("started parser %s", self.name)
        try:
            stream = self.open_stream()
            try:
                result = tuple(self.parse(stream))
            finally:
                if stream is not self.source:
                    stream.close()
        except Exception as exc:
            self._logger.error("exception caught during parser %s: %s", self.name, exc, exc_info=True)
            self._set_state(TaskState.FAILED)
            raise
        self._logger.info("parser %s finished (%d elements)", self.name, len(result))
        self._set_state(TaskState.COMPLETED)
        return result

    def _set_state(self, state: TaskState) -> None:
        with self._lock:
            self._state = state

    def __repr__(self) -> str:
        return f"<{self.name} state={self._state.value}>"


__all__ = ["AbstractDataParser", "DataParser", "Record"]
