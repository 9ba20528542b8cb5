from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple, Union
from uuid import uuid4

from spendwise.domain import Entry, Kind
from spendwise.events import ENTRY_ADDED, ENTRY_DELETED, ENTRY_EDITED, Event, EventBus
from spendwise.log import get_logger
from spendwise.transforms import add_entry, load_seed, remove_entry, replace_entry

log = get_logger(__name__)

EDITABLE_FIELDS = ("label", "amount", "occurred_on", "icon")


def clean_label(label: str) -> str:
    label = label.strip()
    if not label:
        raise ValueError("Label must not be blank")
    return label


class EntryStore:
    """In-memory entry collection.

    Views only ever see tuple snapshots; all changes go through ``add``,
    ``edit`` and ``remove`` (directly or via an attached event bus).
    """

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: Tuple[Entry, ...] = ()
        for e in entries:
            self._check_unique(e.id)
            self._entries = add_entry(self._entries, e)

    @classmethod
    def from_seed(cls, path: str) -> "EntryStore":
        return cls(load_seed(path))

    def snapshot(self) -> Tuple[Entry, ...]:
        return self._entries

    def get(self, entry_id: str) -> Entry:
        for e in self._entries:
            if e.id == entry_id:
                return e
        raise KeyError(entry_id)

    def _check_unique(self, entry_id: str) -> None:
        if any(e.id == entry_id for e in self._entries):
            raise ValueError(f"Duplicate entry id {entry_id}")

    def add(
        self,
        kind: Union[Kind, str],
        label: str,
        amount: Union[Decimal, int, str],
        occurred_on: date,
        icon: Optional[str] = None,
    ) -> Entry:
        e = Entry(
            id=uuid4().hex,
            kind=Kind(kind),
            label=clean_label(label),
            amount=Decimal(str(amount)),
            occurred_on=occurred_on,
            icon=icon or None,
        )
        self._entries = add_entry(self._entries, e)
        log.info("entry_added", entry_id=e.id, kind=e.kind.value, amount=str(e.amount))
        return e

    def edit(self, entry_id: str, **changes) -> Entry:
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit fields: {', '.join(sorted(unknown))}")
        if "label" in changes:
            changes["label"] = clean_label(changes["label"])
        if "icon" in changes:
            changes["icon"] = changes["icon"] or None
        if "amount" in changes:
            changes["amount"] = Decimal(str(changes["amount"]))

        updated = replace(self.get(entry_id), **changes)
        self._entries = replace_entry(self._entries, updated)
        log.info("entry_edited", entry_id=entry_id, fields=sorted(changes))
        return updated

    def remove(self, entry_id: str) -> None:
        self.get(entry_id)
        self._entries = remove_entry(self._entries, entry_id)
        log.info("entry_removed", entry_id=entry_id)

    # event bus handlers

    def _on_added(self, event: Event, payload: dict) -> dict:
        e = self.add(**payload)
        return {"entry": e}

    def _on_edited(self, event: Event, payload: dict) -> dict:
        payload = dict(payload)
        e = self.edit(payload.pop("id"), **payload)
        return {"entry": e}

    def _on_deleted(self, event: Event, payload: dict) -> dict:
        self.remove(payload["id"])
        return {"removed": payload["id"]}

    def attach(self, bus: EventBus) -> None:
        bus.subscribe(ENTRY_ADDED, self._on_added)
        bus.subscribe(ENTRY_EDITED, self._on_edited)
        bus.subscribe(ENTRY_DELETED, self._on_deleted)
