"""Sources a parse task can read from."""

from .base import Source, SourceKind, StreamSource
from .http import HttpSource, ResponseStream
from .sources import http_source, is_url, open_source

__all__ = [
    "HttpSource",
    "ResponseStream",
    "Source",
    "SourceKind",
    "StreamSource",
    "http_source",
    "is_url",
    "open_source",
]
