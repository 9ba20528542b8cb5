"""Filtering, searching and sorting of entry collections.

One engine serves both the income and the expense tables; the table is
chosen by the kind filter rather than by a separate code path.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Tuple, Union

from spendwise.domain import Direction, Entry, Kind, KindFilter, SortKey
from spendwise.errors import InvalidDirection, InvalidFilter, InvalidSortKey

DEFAULT_DIRECTIONS = {
    SortKey.DATE: Direction.DESC,
    SortKey.AMOUNT: Direction.DESC,
    SortKey.LABEL: Direction.ASC,
}

_SORT_FIELDS: dict[SortKey, Callable[[Entry], object]] = {
    SortKey.DATE: lambda e: e.occurred_on,
    SortKey.LABEL: lambda e: e.label,
    SortKey.AMOUNT: lambda e: e.amount,
}


def as_filter(value: Union[KindFilter, Kind, str]) -> KindFilter:
    if isinstance(value, KindFilter):
        return value
    if isinstance(value, Kind):
        return KindFilter(value.value)
    if isinstance(value, str):
        try:
            return KindFilter(value.lower())
        except ValueError:
            pass
    raise InvalidFilter(value)


def as_sort_key(value: Union[SortKey, str]) -> SortKey:
    if isinstance(value, SortKey):
        return value
    if isinstance(value, str):
        try:
            return SortKey(value.lower())
        except ValueError:
            pass
    raise InvalidSortKey(value)


def as_direction(value: Union[Direction, str]) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.lower())
        except ValueError:
            pass
    raise InvalidDirection(value)


def by_kind(kind_filter: Union[KindFilter, Kind, str]):
    kf = as_filter(kind_filter)

    def _filter(e: Entry) -> bool:
        return kf is KindFilter.ALL or e.kind.value == kf.value

    return _filter


def by_query(query: str):
    q = (query or "").strip().lower()

    def _filter(e: Entry) -> bool:
        if not q:
            return True
        return q in e.label.lower() or q in str(e.amount) or q in e.display_icon

    return _filter


def by_date_range(start: Optional[date], end: Optional[date]):
    def _filter(e: Entry) -> bool:
        if start is not None and e.occurred_on < start:
            return False
        if end is not None and e.occurred_on > end:
            return False
        return True

    return _filter


def filter_entries(entries: Iterable[Entry], kind_filter) -> Tuple[Entry, ...]:
    return tuple(filter(by_kind(kind_filter), entries))


def search(entries: Iterable[Entry], query: str) -> Tuple[Entry, ...]:
    return tuple(filter(by_query(query), entries))


def sort_entries(entries: Iterable[Entry], sort_key, direction) -> Tuple[Entry, ...]:
    key = as_sort_key(sort_key)
    # sorted() stays stable with reverse=True, so equal keys keep input order
    return tuple(
        sorted(entries, key=_SORT_FIELDS[key], reverse=as_direction(direction) is Direction.DESC)
    )


def apply(
    entries: Iterable[Entry],
    kind_filter: Union[KindFilter, Kind, str] = KindFilter.ALL,
    sort_key: Union[SortKey, str] = SortKey.DATE,
    direction: Union[Direction, str, None] = None,
) -> Tuple[Entry, ...]:
    """Filter by kind, then sort by ``sort_key``.

    ``direction`` defaults to the key's natural direction. The filter, the key
    and the direction are validated before any work is done.
    """
    kf = as_filter(kind_filter)
    key = as_sort_key(sort_key)
    direction = DEFAULT_DIRECTIONS[key] if direction is None else as_direction(direction)
    return sort_entries(filter_entries(entries, kf), key, direction)


@dataclass(frozen=True)
class SortState:
    key: SortKey = SortKey.DATE
    direction: Direction = Direction.DESC

    def toggle(self, key: Union[SortKey, str]) -> "SortState":
        key = as_sort_key(key)
        if key is self.key:
            flipped = Direction.ASC if self.direction is Direction.DESC else Direction.DESC
            return SortState(key, flipped)
        return SortState(key, DEFAULT_DIRECTIONS[key])

    def apply(self, entries: Iterable[Entry], kind_filter=KindFilter.ALL) -> Tuple[Entry, ...]:
        return apply(entries, kind_filter, self.key, self.direction)
