from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Kind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class KindFilter(str, Enum):
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


class SortKey(str, Enum):
    DATE = "date"
    LABEL = "label"
    AMOUNT = "amount"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Provenance(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


DEFAULT_ICONS = {
    Kind.INCOME: "💰",
    Kind.EXPENSE: "💸",
}


@dataclass(frozen=True)
class Entry:
    id: str
    kind: Kind
    label: str           # category (expense) or source (income)
    amount: Decimal      # never negative, sign comes from kind
    occurred_on: date
    icon: Optional[str] = None

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Entry {self.id} has negative amount {self.amount}")

    @property
    def display_icon(self) -> str:
        return self.icon or DEFAULT_ICONS[self.kind]

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.kind is Kind.INCOME else -self.amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "label": self.label,
            "amount": str(self.amount),
            "occurred_on": self.occurred_on.isoformat(),
            "icon": self.display_icon,
        }


@dataclass(frozen=True)
class Page:
    items: tuple[Entry, ...]
    current_page: int
    total_pages: int
    total_items: int
    first_index_shown: int   # 1-based, 0 when there is nothing to show
    last_index_shown: int
    page_numbers: tuple[int, ...] = ()

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def to_dict(self) -> dict:
        d = asdict(self)
        d["items"] = [e.to_dict() for e in self.items]
        d["page_numbers"] = list(self.page_numbers)
        return d


@dataclass(frozen=True)
class Bucket:
    label: str
    income: Decimal
    expenses: Decimal

    # balance is derived so it can never drift from income - expenses
    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses

    def to_dict(self) -> dict:
        return {
            "name": self.label,
            "income": float(self.income),
            "expenses": float(self.expenses),
            "balance": float(self.balance),
        }


@dataclass(frozen=True)
class Suggestion:
    label: str
    icon: str

    def to_dict(self) -> dict:
        return {"label": self.label, "icon": self.icon}


@dataclass(frozen=True)
class Totals:
    income: Decimal
    expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class RecentFeed:
    items: tuple[Entry, ...]
    total: int
    hidden: int = 0


@dataclass(frozen=True)
class ChartData:
    period: Period
    buckets: tuple[Bucket, ...]
    provenance: Provenance = Provenance.LIVE

    @property
    def is_fallback(self) -> bool:
        return self.provenance is Provenance.FALLBACK

    def to_dict(self) -> dict:
        return {
            "period": self.period.value,
            "provenance": self.provenance.value,
            "buckets": [b.to_dict() for b in self.buckets],
        }
