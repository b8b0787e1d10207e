"""
response_mapper.py — Convert YNAB API JSON payloads into domain records.

Missing scalar fields default to empty strings / zero so a sparse upstream
record never fails a whole tool call. A response whose envelope lacks the
expected collection raises ProviderError(INVALID_RESPONSE).
"""

from typing import Any

from ynab_analyst.m01_transactions.models import Budget, Category, Transaction
from ynab_analyst.mcp_server.errors import ErrorKind, ProviderError


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _data(payload: Any) -> dict:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return {}


class ResponseMapper:
    def map_budget(self, obj: Any) -> Budget:
        obj = obj if isinstance(obj, dict) else {}
        return Budget(id=_str(obj.get("id")), name=_str(obj.get("name")))

    def map_category(self, obj: Any) -> Category:
        obj = obj if isinstance(obj, dict) else {}
        return Category(
            id=_str(obj.get("id")),
            name=_str(obj.get("name")),
            group_id=_opt_str(obj.get("category_group_id")),
        )

    def map_transaction(self, obj: Any) -> Transaction:
        obj = obj if isinstance(obj, dict) else {}
        return Transaction(
            id=_str(obj.get("id")),
            account_id=_str(obj.get("account_id")),
            category_id=_str(obj.get("category_id")),
            payee_id=_opt_str(obj.get("payee_id")),
            amount=_int(obj.get("amount")),
            date=_opt_str(obj.get("date")),
            description=_opt_str(obj.get("memo")),
        )

    def map_budget_from_response(self, payload: Any) -> Budget:
        budget = _data(payload).get("budget")
        if not isinstance(budget, dict):
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "Invalid budget response format")
        return self.map_budget(budget)

    def map_categories_from_response(self, payload: Any) -> list[Category]:
        """Flatten data.category_groups[].categories[] into a category list."""
        groups = _data(payload).get("category_groups")
        if not isinstance(groups, list):
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "Invalid categories response format")
        categories: list[Category] = []
        for group in groups:
            if not isinstance(group, dict):
                continue
            for item in group.get("categories") or []:
                category = self.map_category(item)
                if category.group_id is None and isinstance(group.get("id"), str):
                    category = Category(id=category.id, name=category.name, group_id=group["id"])
                categories.append(category)
        return categories

    def map_transactions_from_response(self, payload: Any) -> list[Transaction]:
        items = _data(payload).get("transactions")
        if not isinstance(items, list):
            raise ProviderError(
                ErrorKind.INVALID_RESPONSE, "Invalid transactions response format"
            )
        return [self.map_transaction(item) for item in items]
