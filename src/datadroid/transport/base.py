"""Common source abstractions."""

from __future__ import annotations

import os
from typing import BinaryIO, Literal, Protocol, Union, runtime_checkable


SourceKind = Literal["http", "file", "memory"]


@runtime_checkable
class StreamSource(Protocol):
    @property
    def kind(self) -> SourceKind: ...

    def open(self) -> BinaryIO: ...


Source = Union[StreamSource, BinaryIO, bytes, bytearray, str, "os.PathLike[str]"]


__all__ = ["Source", "SourceKind", "StreamSource"]
