"""
models.py

Immutable records for YNAB budget data. Amounts are signed integer
milliunits (1/1000 of the currency unit): negative is an expense, positive
is income. Dates are ISO 'YYYY-MM-DD' strings and compare lexicographically.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Transaction:
    id: str
    account_id: str
    category_id: str
    amount: int
    payee_id: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Budget:
    id: str
    name: str


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    group_id: Optional[str] = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of ISO dates. Either bound may be left open."""

    start: Optional[str] = None
    end: Optional[str] = None

    def contains(self, date: str) -> bool:
        if self.start is not None and date < self.start:
            return False
        if self.end is not None and date > self.end:
            return False
        return True

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


def format_milliunits(amount: int) -> str:
    """Render milliunits as a major-unit decimal string, e.g. -25000 -> '-25.00'."""
    sign = "-" if amount < 0 else ""
    whole, rem = divmod(abs(amount), 1000)
    return f"{sign}{whole}.{rem // 10:02d}"
