"""Time bucketing for the balance chart.

Every period has a fixed shape: 7 daily buckets, 4 weekly buckets or 6
monthly buckets, always ending with the bucket that contains ``today``.
Live data and placeholder data share that shape so the chart never
collapses when the data source is down.
"""

import random
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

import pandas as pd

from spendwise.domain import Bucket, Entry, Kind, Period
from spendwise.errors import AggregationSourceUnavailable

# upper bounds for placeholder values: (income, expenses)
FALLBACK_SCALES = {
    Period.DAILY: (1_000_000, 800_000),
    Period.WEEKLY: (3_000_000, 2_500_000),
    Period.MONTHLY: (10_000_000, 8_000_000),
}


class Window(NamedTuple):
    label: str
    start: date
    end: date  # inclusive

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


def as_period(value: Union[Period, str]) -> Period:
    if isinstance(value, Period):
        return value
    return Period(str(value).lower())


def _month_start(d: date, months_back: int) -> date:
    index = d.year * 12 + (d.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def _day_label(d: date) -> str:
    return f"{d.day} {d.strftime('%b')}"


def windows(period: Union[Period, str], today: Optional[date] = None) -> Tuple[Window, ...]:
    """Bucket boundaries for ``period``, oldest first."""
    period = as_period(period)
    today = today or date.today()

    if period is Period.DAILY:
        days = [today - timedelta(days=i) for i in range(6, -1, -1)]
        return tuple(Window(_day_label(d), d, d) for d in days)

    if period is Period.WEEKLY:
        out = []
        for n in range(1, 5):
            end = today - timedelta(days=7 * (4 - n))
            out.append(Window(f"Week {n}", end - timedelta(days=6), end))
        return tuple(out)

    out = []
    for back in range(5, -1, -1):
        start = _month_start(today, back)
        end = _month_start(today, back - 1) - timedelta(days=1)
        out.append(Window(start.strftime("%b"), start, end))
    return tuple(out)


def aggregate(
    entries: Iterable[Entry],
    period: Union[Period, str],
    today: Optional[date] = None,
) -> Tuple[Bucket, ...]:
    """Sum income and expenses per bucket. Entries outside every bucket are dropped."""
    wins = windows(period, today)
    income: dict[int, Decimal] = defaultdict(Decimal)
    expenses: dict[int, Decimal] = defaultdict(Decimal)

    for e in entries:
        for i, w in enumerate(wins):
            if w.contains(e.occurred_on):
                if e.kind is Kind.INCOME:
                    income[i] += e.amount
                else:
                    expenses[i] += e.amount
                break

    return tuple(
        Bucket(label=w.label, income=income[i], expenses=expenses[i])
        for i, w in enumerate(wins)
    )


def _row_date(row: Mapping, period: Period) -> Optional[date]:
    field = {Period.DAILY: "date", Period.MONTHLY: "month"}.get(period)
    raw = row.get(field) if field else None
    if raw is None:
        return None
    # accepts full timestamps as well as bare year-month values like "2026-10"
    ts = pd.Timestamp(raw)
    if pd.isna(ts):
        raise ValueError(f"Unparseable date {raw!r}")
    return ts.date()


def buckets_from_rows(
    rows: Sequence[Mapping],
    period: Union[Period, str],
    today: Optional[date] = None,
) -> Tuple[Bucket, ...]:
    """Shape rows from a period data source into the canonical buckets.

    Dated rows (``date`` for daily, ``month`` for monthly) are matched to their
    bucket; undated rows are taken positionally and must fill every bucket.
    Any ``balance`` sent by the source is ignored and recomputed.
    """
    period = as_period(period)
    wins = windows(period, today)

    try:
        dated = [(_row_date(r, period), r) for r in rows]
        income: dict[int, Decimal] = defaultdict(Decimal)
        expenses: dict[int, Decimal] = defaultdict(Decimal)

        if dated and all(d is not None for d, _ in dated):
            for d, r in dated:
                for i, w in enumerate(wins):
                    if w.contains(d):
                        income[i] += Decimal(str(r.get("income", 0)))
                        expenses[i] += Decimal(str(r.get("expenses", 0)))
                        break
        else:
            if len(rows) != len(wins):
                raise AggregationSourceUnavailable(
                    period, message=f"expected {len(wins)} rows, got {len(rows)}"
                )
            for i, r in enumerate(rows):
                income[i] = Decimal(str(r.get("income", 0)))
                expenses[i] = Decimal(str(r.get("expenses", 0)))
    except AggregationSourceUnavailable:
        raise
    except (ArithmeticError, AttributeError, TypeError, ValueError) as e:
        raise AggregationSourceUnavailable(period, cause=e) from e

    return tuple(
        Bucket(label=w.label, income=income[i], expenses=expenses[i])
        for i, w in enumerate(wins)
    )


def synthesize_fallback(
    period: Union[Period, str],
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[Bucket, ...]:
    """Placeholder buckets with the live shape and labels.

    Values are random within the period's scale; pass a seeded ``rng`` for
    repeatable output.
    """
    period = as_period(period)
    rng = rng or random.Random()
    max_income, max_expenses = FALLBACK_SCALES[period]
    return tuple(
        Bucket(
            label=w.label,
            income=Decimal(rng.randint(0, max_income)),
            expenses=Decimal(rng.randint(0, max_expenses)),
        )
        for w in windows(period, today)
    )
