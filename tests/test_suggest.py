from datetime import date
from decimal import Decimal

from spendwise.domain import Entry, Kind, Suggestion
from spendwise.suggest import suggest, suggest_for


def make_entry(label, icon=None, kind=Kind.INCOME):
    return Entry(id=label + str(icon), kind=kind, label=label, amount=Decimal(1), occurred_on=date(2025, 1, 1), icon=icon)


def test_salary_prefix():
    entries = [make_entry("Salary", "💼"), make_entry("Salary Bonus"), make_entry("salary")]

    result = suggest(entries, "sal")
    result_labels = [s.label for s in result]

    assert result_labels == ["Salary", "Salary Bonus", "salary"]
    assert result_labels.count("Salary") == 1


def test_exact_match_excluded_case_insensitively():
    entries = [make_entry("Sal"), make_entry("sal"), make_entry("Salary")]
    assert [s.label for s in suggest(entries, "SAL")] == ["Salary"]


def test_duplicates_keep_first_icon():
    entries = [make_entry("Groceries", "🛒"), make_entry("Groceries", "🍎"), make_entry("Groceries")]
    assert suggest(entries, "gro") == (Suggestion("Groceries", "🛒"),)


def test_missing_icon_uses_kind_default():
    assert suggest([make_entry("Rent", kind=Kind.EXPENSE)], "re")[0].icon == "💸"


def test_limit_and_order():
    entries = [make_entry(f"Food {i}") for i in range(8)]

    result = suggest(entries, "food", limit=5)

    assert [s.label for s in result] == [f"Food {i}" for i in range(5)]
    assert suggest(entries, "food", limit=0) == ()


def test_empty_prefix_or_no_match():
    entries = [make_entry("Salary")]
    assert suggest(entries, "") == ()
    assert suggest(entries, "rent") == ()
    assert suggest([], "sal") == ()


def test_substring_not_only_prefix():
    assert [s.label for s in suggest([make_entry("Monthly Salary")], "sal")] == ["Monthly Salary"]


def test_suggest_for_uses_same_kind_history():
    entries = [
        make_entry("Salary", kind=Kind.INCOME),
        make_entry("Salad bar", kind=Kind.EXPENSE),
    ]

    assert [s.label for s in suggest_for(entries, Kind.EXPENSE, "sal")] == ["Salad bar"]
    assert [s.label for s in suggest_for(entries, "income", "sal")] == ["Salary"]
