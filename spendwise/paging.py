from math import ceil
from typing import Sequence, Tuple

from spendwise.domain import Entry, Page


def total_pages(total_items: int, page_size: int) -> int:
    # never zero, so "page 1 of 1" is shown for an empty table
    return max(1, ceil(total_items / page_size))


def clamp_page(requested: int, pages: int) -> int:
    return min(max(requested, 1), pages)


def page_numbers(current: int, pages: int, window: int = 5) -> Tuple[int, ...]:
    """Page buttons to render: everything when it fits, otherwise a sliding
    window centred on ``current`` and kept inside ``1..pages``."""
    if pages <= window:
        return tuple(range(1, pages + 1))
    start = current - window // 2
    start = max(1, min(start, pages - window + 1))
    return tuple(range(start, start + window))


def paginate(view: Sequence[Entry], page_size: int, requested_page: int, window: int = 5) -> Page:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    n = len(view)
    pages = total_pages(n, page_size)
    current = clamp_page(requested_page, pages)

    start = (current - 1) * page_size
    end = min(current * page_size, n)
    items = tuple(view[start:end])

    return Page(
        items=items,
        current_page=current,
        total_pages=pages,
        total_items=n,
        first_index_shown=start + 1 if items else 0,
        last_index_shown=end,
        page_numbers=page_numbers(current, pages, window),
    )
