"""Conversion of the accepted source types into binary streams."""

from __future__ import annotations

import io
import os
from typing import BinaryIO
from urllib.parse import urlparse

from ..config import ParserOptions
from ..logger import BoundLogger, create_logger
from .base import Source, StreamSource
from .http import HttpSource


def is_url(value: str) -> bool:
    return urlparse(value).scheme in {"http", "https"}


def http_source(url: str, options: ParserOptions | None = None, logger: BoundLogger | None = None) -> HttpSource:
    options = options or ParserOptions()
    return HttpSource(
        url,
        read_timeout=options.read_timeout,
        headers=options.headers,
        follow_redirects=options.follow_redirects,
        client=options.http_client,
        logger=logger,
    )


def open_source(
    source: Source,
    options: ParserOptions | None = None,
    logger: BoundLogger | None = None,
) -> BinaryIO:
    logger = logger or create_logger()
    if isinstance(source, StreamSource):
        return source.open()
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    if isinstance(source, str) and is_url(source):
        return http_source(source, options, logger).open()
    if isinstance(source, (str, os.PathLike)):
        logger.debug("Opening file %s", os.fspath(source))
        return open(source, "rb")
    if hasattr(source, "read"):
        return source
    raise TypeError(f"Unsupported source type: {type(source).__name__}")


__all__ = ["http_source", "is_url", "open_source"]
