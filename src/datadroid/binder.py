"""Binding of finished record lists onto display rows."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Iterator, Mapping, Union

from .task import AbstractDataParser, Record

FieldAccessor = Union[str, Callable[[Any], Any]]


class ListBinder(Generic[Record]):
    """Maps each record of a list onto a fixed set of labelled strings.

    ``fields`` maps a display label to either an attribute/key name or a
    callable receiving the record.
    """

    def __init__(self, records: Iterable[Record], fields: Mapping[str, FieldAccessor]) -> None:
        if not fields:
            raise ValueError("ListBinder needs at least one field")
        self._records = list(records)
        self._fields = dict(fields)

    @classmethod
    def from_parser(
        cls,
        parser: AbstractDataParser[Record],
        fields: Mapping[str, FieldAccessor],
        *,
        timeout: float | None = None,
    ) -> "ListBinder[Record]":
        if parser.as_future() is None:
            records = parser.execute_and_retrieve(timeout)
        else:
            records = parser.retrieve(timeout)
        return cls(records, fields)

    @property
    def item_count(self) -> int:
        return len(self._records)

    @property
    def labels(self) -> list[str]:
        return list(self._fields)

    def __len__(self) -> int:
        return self.item_count

    def record(self, index: int) -> Record:
        self._check_index(index)
        return self._records[index]

    def bind(self, index: int) -> dict[str, str]:
        record = self.record(index)
        return {label: _render(_field_value(record, accessor)) for label, accessor in self._fields.items()}

    def rows(self) -> Iterator[dict[str, str]]:
        for index in range(self.item_count):
            yield self.bind(index)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._records):
            raise IndexError(f"Row {index} out of range for {len(self._records)} records")


def _field_value(record: Any, accessor: FieldAccessor) -> Any:
    if callable(accessor):
        return accessor(record)
    if isinstance(record, Mapping):
        return record.get(accessor)
    return getattr(record, accessor, None)


def _render(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


__all__ = ["FieldAccessor", "ListBinder"]
