"""
data_source.py — Where tool handlers get budget data from.

Two implementations of the DataSource protocol:
  - LocalTransactionSource: an in-memory dataset (optionally loaded from a
    YAML/JSON file), answering every budget_id with the same data.
  - RemoteProviderSource: the YNAB API via YnabClient.

One of them is injected into the tool executor at startup.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, runtime_checkable

from ynab_analyst.m00_utils.config_loader import load_config
from ynab_analyst.m01_transactions.models import Budget, Category, Transaction
from ynab_analyst.m01_transactions.service import TransactionService
from ynab_analyst.mcp_server.errors import ProviderError
from ynab_analyst.mcp_server.response_mapper import ResponseMapper
from ynab_analyst.mcp_server.ynab_client import YnabClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetSnapshot:
    budget: Budget
    categories: list[Category] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)

    def category_names(self) -> dict[str, str]:
        return {c.id: c.name for c in self.categories}


@runtime_checkable
class DataSource(Protocol):
    name: str

    async def get_budget(self, budget_id: str) -> Budget: ...

    async def get_categories(self, budget_id: str) -> list[Category]: ...

    async def get_transactions(self, budget_id: str) -> list[Transaction]: ...

    async def get_budget_snapshot(self, budget_id: str) -> BudgetSnapshot: ...


class LocalTransactionSource:
    name = "local"

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        categories: Iterable[Category] = (),
        budget: Budget | None = None,
    ) -> None:
        self.service = TransactionService(transactions)
        self._categories = list(categories)
        self._budget = budget or Budget(id="local", name="Local Budget")

    @classmethod
    def from_file(cls, path: str) -> "LocalTransactionSource":
        """
        Load a dataset shaped like:

            budget: {id: ..., name: ...}
            categories: [{id, name, category_group_id}]
            transactions: [{id, account_id, category_id, payee_id, amount, date, memo}]
        """
        raw = load_config(path) or {}
        mapper = ResponseMapper()
        source = cls(
            transactions=[mapper.map_transaction(t) for t in raw.get("transactions") or []],
            categories=[mapper.map_category(c) for c in raw.get("categories") or []],
            budget=mapper.map_budget(raw["budget"]) if raw.get("budget") else None,
        )
        logger.info(
            "Loaded %d transactions and %d categories from %s",
            source.service.total_count(),
            len(source._categories),
            path,
        )
        return source

    async def get_budget(self, budget_id: str) -> Budget:
        return self._budget

    async def get_categories(self, budget_id: str) -> list[Category]:
        return list(self._categories)

    async def get_transactions(self, budget_id: str) -> list[Transaction]:
        return list(self.service.transactions)

    async def get_budget_snapshot(self, budget_id: str) -> BudgetSnapshot:
        return BudgetSnapshot(
            budget=self._budget,
            categories=list(self._categories),
            transactions=list(self.service.transactions),
        )


class RemoteProviderSource:
    name = "ynab"

    def __init__(self, client: YnabClient, mapper: ResponseMapper | None = None) -> None:
        self.client = client
        self.mapper = mapper or ResponseMapper()

    async def get_budget(self, budget_id: str) -> Budget:
        return self.mapper.map_budget_from_response(await self.client.get_budget(budget_id))

    async def get_categories(self, budget_id: str) -> list[Category]:
        payload = await self.client.get_categories(budget_id)
        return self.mapper.map_categories_from_response(payload)

    async def get_transactions(self, budget_id: str) -> list[Transaction]:
        payload = await self.client.get_transactions(budget_id)
        return self.mapper.map_transactions_from_response(payload)

    async def get_budget_snapshot(self, budget_id: str) -> BudgetSnapshot:
        budget, categories, transactions = await self.client.get_budget_batch(budget_id)
        for slot in (budget, categories, transactions):
            if isinstance(slot, ProviderError):
                raise slot
        return BudgetSnapshot(
            budget=self.mapper.map_budget_from_response(budget),
            categories=self.mapper.map_categories_from_response(categories),
            transactions=self.mapper.map_transactions_from_response(transactions),
        )
