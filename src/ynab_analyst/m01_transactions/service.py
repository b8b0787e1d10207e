"""
service.py

In-memory transaction collection that executes TransactionQuery objects.
"""

from typing import Iterable

from ynab_analyst.m01_transactions.models import Transaction
from ynab_analyst.m01_transactions.query import TransactionQuery


class TransactionService:
    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._transactions: list[Transaction] = list(transactions)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def query(self, query: TransactionQuery) -> list[Transaction]:
        return query.apply(self._transactions)

    def total_count(self) -> int:
        return len(self._transactions)

    def add_transaction(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)

    def add_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._transactions.extend(transactions)
