"""Fetch a CSV of public contracts and print it as display rows."""

from __future__ import annotations

import os
from dataclasses import dataclass

from datadroid import CsvParser, ExecutionError, ListBinder

SOURCE_URL = os.getenv("DATADROID_DEMO_URL", "https://example.com/contracts.csv")


@dataclass
class Contract:
    amount: str
    awardee: str
    subject: str


def to_contract(row: dict[str, str]) -> Contract:
    return Contract(
        amount=row.get("importo", row.get("amount", "")),
        awardee=row.get("aggiudicatario", row.get("awardee", "")),
        subject=row.get("oggetto", row.get("subject", "")),
    )


def main() -> None:
    parser = CsvParser.from_url(SOURCE_URL, delimiter=";", record_factory=to_contract, log_level="debug")
    parser.add_done_callback(lambda task: print(f"parser finished: {task.state.value}"))
    try:
        binder = ListBinder.from_parser(
            parser,
            {"Amount": "amount", "Awardee": "awardee", "Subject": "subject"},
            timeout=30,
        )
    except ExecutionError as exc:
        print(f"Could not load {SOURCE_URL}: {exc.__cause__}")
        return

    print(f"{binder.item_count} contracts")
    for row in binder.rows():
        print(" | ".join(f"{label}: {value}" for label, value in row.items()))


if __name__ == "__main__":
    main()
