"""Public surface for datadroid."""

from .binder import ListBinder
from .config import ParserOptions
from .errors import (
    ConnectionError,
    DataDroidError,
    ExecutionError,
    ParseError,
    TaskCancelledError,
    TaskInterruptedError,
    TaskStateError,
)
from .executor import default_executor, shutdown_default_executor
from .parsers import ArrowParser, CsvParser, JsonParser, LineParser, RecordParser
from .task import AbstractDataParser, DataParser
from .transport import HttpSource
from .types import ExecuteResult, TaskState
from .version import __version__

__all__ = [
    "__version__",
    "AbstractDataParser",
    "ArrowParser",
    "ConnectionError",
    "CsvParser",
    "DataDroidError",
    "DataParser",
    "ExecuteResult",
    "ExecutionError",
    "HttpSource",
    "JsonParser",
    "LineParser",
    "ListBinder",
    "ParseError",
    "ParserOptions",
    "RecordParser",
    "TaskCancelledError",
    "TaskInterruptedError",
    "TaskState",
    "TaskStateError",
    "default_executor",
    "shutdown_default_executor",
]
