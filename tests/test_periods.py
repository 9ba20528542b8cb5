import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from spendwise.domain import Entry, Kind, Period
from spendwise.errors import AggregationSourceUnavailable
from spendwise.periods import aggregate, buckets_from_rows, synthesize_fallback, windows
from spendwise.transforms import balance

TODAY = date(2026, 10, 19)


def make_entry(id, kind, amount, day):
    return Entry(id=id, kind=kind, label="x", amount=Decimal(amount), occurred_on=day)


def labels(buckets):
    return [b.label for b in buckets]


def test_daily_scenario():
    d1 = TODAY - timedelta(days=5)
    d2 = TODAY - timedelta(days=3)
    d3 = TODAY
    entries = [
        make_entry("i1", Kind.INCOME, 100, d1),
        make_entry("i2", Kind.INCOME, 200, d2),
        make_entry("i3", Kind.INCOME, 300, d3),
        make_entry("x1", Kind.EXPENSE, 50, d2),
        make_entry("x2", Kind.EXPENSE, 150, d3),
    ]

    buckets = aggregate(entries, Period.DAILY, TODAY)

    assert len(buckets) == 7
    assert labels(buckets) == ["13 Oct", "14 Oct", "15 Oct", "16 Oct", "17 Oct", "18 Oct", "19 Oct"]
    pairs = [(b.income, b.expenses) for b in buckets]
    assert pairs[1] == (100, 0)
    assert pairs[3] == (200, 50)
    assert pairs[6] == (300, 150)
    assert [pairs[i] for i in (0, 2, 4, 5)] == [(0, 0)] * 4
    assert sum(b.balance for b in buckets) == 400


def test_daily_excludes_entries_outside_window():
    entries = [
        make_entry("old", Kind.INCOME, 999, TODAY - timedelta(days=7)),
        make_entry("future", Kind.INCOME, 999, TODAY + timedelta(days=1)),
        make_entry("in", Kind.EXPENSE, 10, TODAY - timedelta(days=6)),
    ]

    buckets = aggregate(entries, "daily", TODAY)
    assert sum(b.income for b in buckets) == 0
    assert buckets[0].expenses == 10


def test_weekly_windows():
    wins = windows(Period.WEEKLY, TODAY)

    assert [w.label for w in wins] == ["Week 1", "Week 2", "Week 3", "Week 4"]
    assert wins[-1].end == TODAY
    assert wins[0].start == TODAY - timedelta(days=27)
    for a, b in zip(wins, wins[1:]):
        assert b.start == a.end + timedelta(days=1)


def test_monthly_buckets():
    entries = [
        make_entry("a", Kind.INCOME, 1000, date(2026, 5, 31)),
        make_entry("b", Kind.EXPENSE, 400, date(2026, 10, 1)),
        make_entry("c", Kind.INCOME, 50, date(2026, 4, 30)),
    ]

    buckets = aggregate(entries, Period.MONTHLY, TODAY)

    assert labels(buckets) == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    assert buckets[0].income == 1000
    assert buckets[-1].expenses == 400
    assert buckets[-1].balance == -400


def test_monthly_crosses_year_boundary():
    wins = windows(Period.MONTHLY, date(2026, 2, 10))
    assert [w.label for w in wins] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert wins[3].start == date(2025, 12, 1)
    assert wins[3].end == date(2025, 12, 31)


@pytest.mark.parametrize("period", list(Period))
def test_bucket_sum_matches_balance(period):
    rng = random.Random(7)
    span = {Period.DAILY: 6, Period.WEEKLY: 27, Period.MONTHLY: 150}[period]
    entries = [
        make_entry(
            str(i),
            rng.choice([Kind.INCOME, Kind.EXPENSE]),
            rng.randint(0, 500),
            TODAY - timedelta(days=rng.randint(0, span)),
        )
        for i in range(60)
    ]

    buckets = aggregate(entries, period, TODAY)
    assert sum(b.balance for b in buckets) == balance(entries)


def test_buckets_from_dated_rows():
    rows = [
        {"date": "2026-10-19T00:00:00", "income": 500, "expenses": 120, "balance": 9999},
        {"date": "2026-10-14", "income": "10.5", "expenses": 0},
    ]

    buckets = buckets_from_rows(rows, Period.DAILY, TODAY)

    assert len(buckets) == 7
    assert buckets[-1].income == 500
    assert buckets[-1].balance == 380
    assert buckets[1].income == Decimal("10.5")


def test_buckets_from_year_month_rows():
    rows = [
        {"month": "2026-05", "income": 100, "expenses": 40},
        {"month": "2026-10", "income": 900, "expenses": 300},
        {"month": "2026-09-01T00:00:00.000Z", "income": 50, "expenses": 5},
    ]
    buckets = buckets_from_rows(rows, Period.MONTHLY, TODAY)

    assert labels(buckets) == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    assert buckets[0].balance == 60
    assert buckets[4].income == 50
    assert buckets[-1].income == 900
    assert buckets[-1].balance == 600


def test_buckets_from_positional_rows():
    rows = [{"income": i * 10, "expenses": i} for i in range(4)]
    buckets = buckets_from_rows(rows, Period.WEEKLY, TODAY)
    assert labels(buckets) == ["Week 1", "Week 2", "Week 3", "Week 4"]
    assert buckets[3].balance == 27


def test_buckets_from_rows_rejects_wrong_shape():
    with pytest.raises(AggregationSourceUnavailable):
        buckets_from_rows([{"income": 1, "expenses": 1}], Period.WEEKLY, TODAY)
    with pytest.raises(AggregationSourceUnavailable):
        buckets_from_rows([{"date": "not-a-date", "income": 1}], Period.DAILY, TODAY)


@pytest.mark.parametrize("period", list(Period))
def test_fallback_matches_live_shape(period):
    live = aggregate([], period, TODAY)
    fake = synthesize_fallback(period, TODAY, random.Random(1))

    assert labels(fake) == labels(live)
    for b in fake:
        assert b.balance == b.income - b.expenses
        assert b.income >= 0 and b.expenses >= 0


def test_fallback_is_repeatable_with_seed():
    a = synthesize_fallback(Period.MONTHLY, TODAY, random.Random(42))
    b = synthesize_fallback(Period.MONTHLY, TODAY, random.Random(42))
    assert a == b
