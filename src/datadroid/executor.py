"""Shared worker pool used by parse tasks that are not given their own executor."""

from __future__ import annotations

import atexit
import os
import threading
from concurrent.futures import Executor, ThreadPoolExecutor

MIN_WORKERS = 2
MAX_WORKERS = 8

_lock = threading.Lock()
_executor: ThreadPoolExecutor | None = None


def default_pool_size(cpu_count: int | None = None) -> int:
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    return max(MIN_WORKERS, min(cpus + 1, MAX_WORKERS))


def default_executor() -> Executor:
    """Return the process-wide pool, creating it on first use."""
    global _executor
    with _lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=default_pool_size(),
                thread_name_prefix="datadroid-parser",
            )
        return _executor


def shutdown_default_executor(wait: bool = True) -> None:
    global _executor
    with _lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait)


atexit.register(shutdown_default_executor)


__all__ = ["default_executor", "default_pool_size", "shutdown_default_executor"]
