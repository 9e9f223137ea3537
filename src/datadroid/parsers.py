"""Ready-made parsers for common text and columnar formats."""

from __future__ import annotations

import csv
import io
import json
from contextlib import contextmanager
from typing import Any, BinaryIO, Callable, Iterator, TextIO

from .errors import ParseError
from .task import AbstractDataParser, Record

try:  # Optional dependency for Arrow parsing
    import pyarrow as pa

    _HAS_ARROW = True
except Exception:  # pragma: no cover - optional import
    pa = None
    _HAS_ARROW = False


@contextmanager
def text_reader(stream: BinaryIO, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Decode ``stream`` as text without taking ownership of it.

    Bytes that are not valid in ``encoding`` raise :class:`ParseError`.
    """
    reader = io.TextIOWrapper(stream, encoding=encoding, newline="")
    try:
        yield reader
    except UnicodeDecodeError as exc:
        raise ParseError(f"Content is not valid {encoding}: {exc.reason} at byte {exc.start}") from exc
    finally:
        if not reader.closed:
            reader.detach()


def parse_json_text(text: str) -> list[Any]:
    text = text.strip()
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if len(lines) < 2:
            raise ParseError(f"Invalid JSON: {exc}") from exc
        return parse_json_lines(lines)

    if isinstance(parsed, list):
        return list(parsed)
    if isinstance(parsed, dict):
        return [parsed]
    raise ParseError(f"Expected a JSON array or object, got {type(parsed).__name__}")


def parse_json_lines(lines: list[str]) -> list[Any]:
    records: list[Any] = []
    for number, line in enumerate(lines, start=1):
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON on line {number}: {exc}", context=line) from exc
    return records


def parse_arrow_to_records(data: bytes) -> list[dict[str, Any]]:
    if not _HAS_ARROW:
        raise ParseError(
            "Arrow payload received but pyarrow is not installed. "
            "Install with `pip install datadroid[arrow]`."
        )

    try:
        reader = pa.ipc.open_stream(pa.py_buffer(data))
    except Exception as exc:
        raise ParseError(f"Failed to open Arrow stream: {exc}") from exc

    records: list[dict[str, Any]] = []
    try:
        for batch in reader:
            table = batch.to_pydict()
            row_count = len(next(iter(table.values()), []))
            for idx in range(row_count):
                records.append({column: values[idx] for column, values in table.items()})
    except Exception as exc:  # pragma: no cover - pyarrow iteration
        raise ParseError(f"Failed to read Arrow batch: {exc}") from exc

    return records


class RecordParser(AbstractDataParser[Record]):
    """Parser whose raw records are handed to an optional ``record_factory``."""

    def __init__(
        self,
        source: Any = None,
        *,
        record_factory: Callable[[Any], Record] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(source, **kwargs)
        self.record_factory = record_factory

    def make_record(self, raw: Any) -> Record:
        if self.record_factory is None:
            return raw
        return self.record_factory(raw)


class LineParser(RecordParser[Record]):
    """One record per non-blank line."""

    def parse(self, stream: BinaryIO) -> list[Record]:
        records: list[Record] = []
        with text_reader(stream, self.options.encoding) as reader:
            for line in reader:
                stripped = line.strip()
                if not stripped:
                    continue
                record = self.parse_line(stripped)
                if record is not None:
                    records.append(record)
        return records

    def parse_line(self, line: str) -> Record | None:
        """Map one stripped line to a record; ``None`` skips the line."""
        return self.make_record(line)


class CsvParser(RecordParser[Record]):
    """Delimited text with a header row; rows become dicts keyed by header."""

    def __init__(self, source: Any = None, *, delimiter: str = ",", **kwargs: Any) -> None:
        super().__init__(source, **kwargs)
        self.delimiter = delimiter

    def parse(self, stream: BinaryIO) -> list[Record]:
        records: list[Record] = []
        with text_reader(stream, self.options.encoding) as reader:
            rows = csv.reader(reader, delimiter=self.delimiter)
            try:
                headers = self._read_headers(rows)
                if headers is None:
                    return []
                for row in rows:
                    if not any(value.strip() for value in row):
                        continue
                    if len(row) != len(headers):
                        raise ParseError(
                            f"Line {rows.line_num} has {len(row)} fields, expected {len(headers)}",
                            context=row,
                        )
                    values = (value.strip() for value in row)
                    records.append(self.make_record(dict(zip(headers, values))))
            except csv.Error as exc:
                raise ParseError(f"Malformed CSV near line {rows.line_num}: {exc}") from exc
        return records

    def _read_headers(self, rows: Iterator[list[str]]) -> list[str] | None:
        for row in rows:
            if any(value.strip() for value in row):
                return [value.strip().lower() for value in row]
        return None


class JsonParser(RecordParser[Record]):
    """A JSON array, a single JSON object, or newline-delimited JSON."""

    def parse(self, stream: BinaryIO) -> list[Record]:
        with text_reader(stream, self.options.encoding) as reader:
            text = reader.read()
        return [self.make_record(item) for item in parse_json_text(text)]


class ArrowParser(RecordParser[Record]):
    """Arrow IPC stream into dict rows. Needs the ``arrow`` extra."""

    def parse(self, stream: BinaryIO) -> list[Record]:
        data = stream.read()
        return [self.make_record(row) for row in parse_arrow_to_records(data)]


__all__ = [
    "ArrowParser",
    "CsvParser",
    "JsonParser",
    "LineParser",
    "RecordParser",
    "parse_json_text",
    "text_reader",
]
