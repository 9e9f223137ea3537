import httpx
import pytest

from datadroid import (
    AbstractDataParser,
    ConnectionError,
    CsvParser,
    ExecutionError,
    LineParser,
    ParserOptions,
)
from datadroid.transport import HttpSource, is_url, open_source


def make_options(handler) -> ParserOptions:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ParserOptions(http_client=client, headers={"X-Test": "1"})


def serve_contracts(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/contracts.csv":
        return httpx.Response(200, content=b"amount,awardee\n100,ACME\n250,Globex\n")
    if request.url.path == "/old":
        return httpx.Response(301, headers={"Location": "http://example.com/contracts.csv"})
    if request.url.path == "/chunked":
        return httpx.Response(200, content=iter([b"al", b"pha\nbe", b"ta\n"]))
    return httpx.Response(404, text="missing")


def test_from_url_fetches_and_parses(executor) -> None:
    parser = CsvParser.from_url(
        "http://example.com/contracts.csv",
        options=make_options(serve_contracts),
        executor=executor,
    )
    assert parser.execute_and_retrieve() == [
        {"amount": "100", "awardee": "ACME"},
        {"amount": "250", "awardee": "Globex"},
    ]


def test_redirects_are_followed(executor) -> None:
    parser = CsvParser("http://example.com/old", options=make_options(serve_contracts), executor=executor)
    assert len(parser.execute_and_retrieve()) == 2


def test_chunked_body_is_reassembled(executor) -> None:
    parser = LineParser("http://example.com/chunked", options=make_options(serve_contracts), executor=executor)
    assert parser.execute_and_retrieve() == ["alpha", "beta"]


def test_error_status_surfaces_as_execution_error(executor) -> None:
    parser = LineParser("http://example.com/nope", options=make_options(serve_contracts), executor=executor)
    with pytest.raises(ExecutionError) as excinfo:
        parser.execute_and_retrieve()
    cause = excinfo.value.__cause__
    assert isinstance(cause, ConnectionError)
    assert cause.context == 404


def test_url_to_stream_positions_at_body() -> None:
    options = make_options(serve_contracts)
    stream = AbstractDataParser.url_to_stream("http://example.com/contracts.csv", options)
    try:
        assert stream.readline() == b"amount,awardee\n"
        assert stream.read() == b"100,ACME\n250,Globex\n"
    finally:
        stream.close()


def test_url_to_reader_decodes_text() -> None:
    options = make_options(serve_contracts)
    reader = AbstractDataParser.url_to_reader("http://example.com/chunked", options=options)
    try:
        assert reader.read() == "alpha\nbeta\n"
    finally:
        reader.close()


def test_connection_failure_maps_to_connection_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionError):
        AbstractDataParser.url_to_stream("http://example.com/x", make_options(refuse))


def test_timeout_maps_to_connection_error() -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(ConnectionError):
        open_source("http://example.com/x", make_options(slow))


def test_configured_headers_are_sent() -> None:
    seen = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("X-Test"))
        return httpx.Response(200, content=b"")

    options = make_options(record)
    source = HttpSource(
        "http://example.com/x",
        headers=options.headers,
        client=options.http_client,
    )
    with source.open() as stream:
        assert stream.read() == b""
    assert seen == ["1"]


def test_is_url() -> None:
    assert is_url("https://example.com/data.json")
    assert not is_url("data.json")
    assert not is_url("ftp://example.com/data.json")


def test_unsupported_source_type() -> None:
    with pytest.raises(TypeError):
        open_source(12345)
