from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from typing import Iterable, Optional

from spendwise.domain import Direction, Entry, KindFilter, Page, RecentFeed, SortKey, Totals
from spendwise.functional import pipe
from spendwise.paging import paginate
from spendwise.sorting import SortState, as_filter, filter_entries, search, sort_entries
from spendwise.transforms import total_amount, totals


@dataclass(frozen=True)
class TableView:
    page: Page
    sort: SortState
    kind_filter: KindFilter
    query: str
    total_amount: Decimal


class TableService:
    """Facade for the income and expense tables.

    page_size / window: paging parameters shared by every table the service renders.
    """

    def __init__(self, page_size: int = 10, window: int = 5):
        self.page_size = page_size
        self.window = window

    def view(
        self,
        entries: Iterable[Entry],
        kind_filter=KindFilter.ALL,
        query: str = "",
        sort: Optional[SortState] = None,
        page: int = 1,
    ) -> TableView:
        """Filter, search, sort and slice ``entries`` for one table render."""
        sort = sort or SortState()
        kf = as_filter(kind_filter)
        rows = pipe(
            entries,
            partial(filter_entries, kind_filter=kf),
            partial(search, query=query),
            partial(sort_entries, sort_key=sort.key, direction=sort.direction),
        )
        return TableView(
            page=paginate(rows, self.page_size, page, self.window),
            sort=sort,
            kind_filter=kf,
            query=query,
            total_amount=total_amount(rows),
        )


class DashboardService:
    """Totals cards and the recent-transactions feed."""

    def __init__(self, recent_limit: int = 6):
        self.recent_limit = recent_limit

    def summary(self, entries: Iterable[Entry]) -> Totals:
        return totals(entries)

    def recent(
        self,
        entries: Iterable[Entry],
        kind_filter=KindFilter.ALL,
        show_all: bool = False,
    ) -> RecentFeed:
        newest = sort_entries(filter_entries(entries, kind_filter), SortKey.DATE, Direction.DESC)
        shown = newest if show_all else newest[: self.recent_limit]
        return RecentFeed(items=shown, total=len(newest), hidden=len(newest) - len(shown))
