import json
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Iterable, Tuple

from spendwise.domain import Entry, Kind, Totals


def entry_from_dict(d: dict) -> Entry:
    return Entry(
        id=str(d["id"]),
        kind=Kind(d["kind"]),
        label=d["label"],
        amount=Decimal(str(d["amount"])),
        occurred_on=date.fromisoformat(str(d["occurred_on"])[:10]),
        icon=d.get("icon") or None,
    )


def load_seed(path: str) -> Tuple[Entry, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return tuple(entry_from_dict(e) for e in data["entries"])


def add_entry(entries: Tuple[Entry, ...], e: Entry) -> Tuple[Entry, ...]:
    return entries + (e,)


def replace_entry(entries: Tuple[Entry, ...], updated: Entry) -> Tuple[Entry, ...]:
    return tuple(updated if e.id == updated.id else e for e in entries)


def remove_entry(entries: Tuple[Entry, ...], entry_id: str) -> Tuple[Entry, ...]:
    return tuple(e for e in entries if e.id != entry_id)


def income_entries(entries: Iterable[Entry]) -> Tuple[Entry, ...]:
    return tuple(filter(lambda e: e.kind is Kind.INCOME, entries))


def expense_entries(entries: Iterable[Entry]) -> Tuple[Entry, ...]:
    return tuple(filter(lambda e: e.kind is Kind.EXPENSE, entries))


def total_amount(entries: Iterable[Entry]) -> Decimal:
    return reduce(lambda acc, e: acc + e.amount, entries, Decimal(0))


def balance(entries: Iterable[Entry]) -> Decimal:
    return reduce(lambda acc, e: acc + e.signed_amount, entries, Decimal(0))


def totals(entries: Iterable[Entry]) -> Totals:
    entries = tuple(entries)
    return Totals(
        income=total_amount(income_entries(entries)),
        expenses=total_amount(expense_entries(entries)),
    )
