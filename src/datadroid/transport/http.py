"""HTTP source built on top of httpx."""

from __future__ import annotations

import io
from typing import BinaryIO, Iterator, Mapping

import httpx

from ..errors import ConnectionError
from ..logger import BoundLogger, create_logger
from .base import SourceKind


class ResponseStream(io.RawIOBase):
    """Raw byte stream over the body of a streamed httpx response.

    Closing the stream closes the response, and the client when it is owned.
    """

    def __init__(self, response: httpx.Response, *, client: httpx.Client | None = None) -> None:
        super().__init__()
        self._response = response
        self._client = client
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    @property
    def response(self) -> httpx.Response:
        return self._response

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            except httpx.TimeoutException as exc:
                raise ConnectionError(f"Timed out reading {self._response.url}") from exc
            except httpx.HTTPError as exc:
                raise ConnectionError(f"Failed reading {self._response.url}: {exc}") from exc
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
            if self._client is not None:
                self._client.close()
        super().close()


class HttpSource:
    kind: SourceKind = "http"

    def __init__(
        self,
        url: str,
        *,
        read_timeout: float = 60.0,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
        client: httpx.Client | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.url = url
        self._read_timeout = read_timeout
        self._headers = dict(headers or {})
        self._follow_redirects = follow_redirects
        self._client = client
        self._logger = (logger or create_logger()).child("http")

    def open(self) -> BinaryIO:
        """Issue a GET and return a buffered stream positioned at the body."""
        owns_client = self._client is None
        client = self._client or httpx.Client(timeout=httpx.Timeout(self._read_timeout))
        request = client.build_request("GET", self.url, headers=self._headers)

        try:
            self._logger.debug("HTTP GET %s", self.url)
            response = client.send(request, stream=True, follow_redirects=self._follow_redirects)
        except httpx.TimeoutException as exc:
            if owns_client:
                client.close()
            raise ConnectionError(f"HTTP request timeout after {self._read_timeout}s") from exc
        except httpx.RequestError as exc:
            if owns_client:
                client.close()
            raise ConnectionError(f"Cannot connect to {self.url}: {exc}") from exc

        self._logger.debug("HTTP <- %s status=%s", self.url, response.status_code)
        if not response.is_success:
            response.close()
            if owns_client:
                client.close()
            raise ConnectionError(
                f"GET {self.url} answered with status {response.status_code}",
                context=response.status_code,
            )

        raw = ResponseStream(response, client=client if owns_client else None)
        return io.BufferedReader(raw)


__all__ = ["HttpSource", "ResponseStream"]
