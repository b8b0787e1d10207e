"""
query.py

Immutable filter/sort criteria for transaction collections.

A TransactionQuery is built incrementally; every with_*/sort_by_* call
returns a new query. Applying a query never mutates or copies the input
transactions: the result holds the same objects, filtered and (optionally)
stably sorted.

Filters are ANDed in this order:
    1. amount range (inclusive bounds)
    2. category allow-list (an empty list means no category filter)
    3. case-insensitive substring on description
    4. date range (inclusive)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional

from ynab_analyst.m01_transactions.models import DateRange, Transaction


class SortBy(str, Enum):
    AMOUNT_ASCENDING = "amount_asc"
    AMOUNT_DESCENDING = "amount_desc"
    DATE = "date"


@dataclass(frozen=True)
class TransactionQuery:
    min_amount: Optional[int] = None
    max_amount: Optional[int] = None
    categories: tuple[str, ...] = ()
    search_text: Optional[str] = None
    date_range: Optional[DateRange] = None
    sort_by: Optional[SortBy] = None

    # --- builder -----------------------------------------------------------

    def with_amount_range(self, min_amount: int, max_amount: int) -> "TransactionQuery":
        return replace(self, min_amount=min_amount, max_amount=max_amount)

    def with_min_amount(self, min_amount: int) -> "TransactionQuery":
        return replace(self, min_amount=min_amount)

    def with_max_amount(self, max_amount: int) -> "TransactionQuery":
        return replace(self, max_amount=max_amount)

    def with_categories(self, categories: Iterable[str]) -> "TransactionQuery":
        return replace(self, categories=tuple(categories))

    def with_category(self, category: str) -> "TransactionQuery":
        return replace(self, categories=(category,))

    def with_text_search(self, search_text: str) -> "TransactionQuery":
        return replace(self, search_text=search_text)

    def with_date_range(
        self, start: Optional[str] = None, end: Optional[str] = None
    ) -> "TransactionQuery":
        date_range = DateRange(start=start, end=end)
        return replace(self, date_range=None if date_range.is_open else date_range)

    def with_sort(self, sort_by: Optional[SortBy]) -> "TransactionQuery":
        return replace(self, sort_by=sort_by)

    def sort_by_amount_ascending(self) -> "TransactionQuery":
        return self.with_sort(SortBy.AMOUNT_ASCENDING)

    def sort_by_amount_descending(self) -> "TransactionQuery":
        return self.with_sort(SortBy.AMOUNT_DESCENDING)

    def sort_by_date(self) -> "TransactionQuery":
        return self.with_sort(SortBy.DATE)

    # --- evaluation --------------------------------------------------------

    def matches(self, transaction: Transaction) -> bool:
        return (
            self._matches_amount(transaction)
            and self._matches_category(transaction)
            and self._matches_text(transaction)
            and self._matches_date(transaction)
        )

    def apply(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Return the matching transactions, sorted when a sort mode is set."""
        filtered = [t for t in transactions if self.matches(t)]
        if self.sort_by is None:
            return filtered
        return _sorted(filtered, self.sort_by)

    filter = apply

    def _matches_amount(self, transaction: Transaction) -> bool:
        if self.min_amount is not None and transaction.amount < self.min_amount:
            return False
        if self.max_amount is not None and transaction.amount > self.max_amount:
            return False
        return True

    def _matches_category(self, transaction: Transaction) -> bool:
        if not self.categories:
            return True
        return transaction.category_id in self.categories

    def _matches_text(self, transaction: Transaction) -> bool:
        if self.search_text is None:
            return True
        if transaction.description is None:
            return False
        return self.search_text.casefold() in transaction.description.casefold()

    def _matches_date(self, transaction: Transaction) -> bool:
        if self.date_range is None:
            return True
        if transaction.date is None:
            return False
        return self.date_range.contains(transaction.date)


def _sorted(transactions: list[Transaction], sort_by: SortBy) -> list[Transaction]:
    # sorted() is stable, including with reverse=True
    if sort_by is SortBy.AMOUNT_ASCENDING:
        return sorted(transactions, key=lambda t: t.amount)
    if sort_by is SortBy.AMOUNT_DESCENDING:
        return sorted(transactions, key=lambda t: t.amount, reverse=True)
    # Dated transactions first, then dateless in input order.
    return sorted(transactions, key=lambda t: (t.date is None, t.date or ""))
