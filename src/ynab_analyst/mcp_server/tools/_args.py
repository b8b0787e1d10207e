"""Lenient argument readers shared by the tool handlers.

Absent or malformed arguments fall back to a neutral default instead of
failing the call.
"""

from typing import Optional

from ynab_analyst.m01_transactions.query import SortBy

_SORT_ALIASES = {
    "amount_asc": SortBy.AMOUNT_ASCENDING,
    "amount_ascending": SortBy.AMOUNT_ASCENDING,
    "amount_desc": SortBy.AMOUNT_DESCENDING,
    "amount_descending": SortBy.AMOUNT_DESCENDING,
    "date": SortBy.DATE,
}


def str_arg(args: dict, key: str, default: str = "") -> str:
    value = args.get(key)
    return value.strip() if isinstance(value, str) else default


def opt_str_arg(args: dict, key: str) -> Optional[str]:
    value = str_arg(args, key)
    return value or None


def int_arg(args: dict, key: str, default: Optional[int] = None) -> Optional[int]:
    value = args.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def str_list_arg(args: dict, key: str) -> list[str]:
    value = args.get(key)
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str) and v]
    return []


def sort_arg(args: dict, key: str = "sort_by") -> Optional[SortBy]:
    return _SORT_ALIASES.get(str_arg(args, key).lower())


def limit_arg(args: dict, default: int, maximum: int = 500) -> int:
    limit = int_arg(args, "limit", default)
    if limit is None or limit < 1:
        return default
    return min(limit, maximum)
