"""MCP tool: search_transactions — filter, sort and page through transactions."""

from ynab_analyst.m01_transactions.models import format_milliunits
from ynab_analyst.m01_transactions.query import TransactionQuery
from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.registry import register_tool
from ynab_analyst.mcp_server.schemas import DEFAULT_BUDGET_ID, budget_input_schema
from ynab_analyst.mcp_server.tools._args import (
    int_arg,
    limit_arg,
    opt_str_arg,
    sort_arg,
    str_arg,
    str_list_arg,
)

DEFAULT_LIMIT = 50


def build_query(args: dict) -> TransactionQuery:
    """Translate tool arguments into a TransactionQuery; unusable values are ignored."""
    query = TransactionQuery()

    min_amount = int_arg(args, "min_amount")
    if min_amount is not None:
        query = query.with_min_amount(min_amount)
    max_amount = int_arg(args, "max_amount")
    if max_amount is not None:
        query = query.with_max_amount(max_amount)

    categories = str_list_arg(args, "category_ids") + str_list_arg(args, "category_id")
    if categories:
        query = query.with_categories(categories)

    text = opt_str_arg(args, "query") or opt_str_arg(args, "search_text")
    if text:
        query = query.with_text_search(text)

    query = query.with_date_range(opt_str_arg(args, "since_date"), opt_str_arg(args, "until_date"))
    return query.with_sort(sort_arg(args))


async def _search_transactions(source: DataSource, args: dict) -> dict:
    budget_id = str_arg(args, "budget_id", DEFAULT_BUDGET_ID)
    limit = limit_arg(args, default=DEFAULT_LIMIT)
    query = build_query(args)

    transactions = await source.get_transactions(budget_id)
    matched = query.apply(transactions)

    return {
        "transactions": {
            "budget_id": budget_id,
            "total_matches": len(matched),
            "returned": min(limit, len(matched)),
            "sort_by": query.sort_by.value if query.sort_by else None,
            "items": [
                {**t.to_dict(), "amount_display": format_milliunits(t.amount)}
                for t in matched[:limit]
            ],
        }
    }


_INPUT_SCHEMA = budget_input_schema(
    {
        "query": {
            "type": "string",
            "description": "Case-insensitive text to find in the transaction memo.",
        },
        "min_amount": {
            "type": "integer",
            "description": "Inclusive lower amount bound in milliunits (expenses are negative).",
        },
        "max_amount": {
            "type": "integer",
            "description": "Inclusive upper amount bound in milliunits.",
        },
        "category_ids": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Only include these categories.",
        },
        "sort_by": {
            "type": "string",
            "enum": ["amount_asc", "amount_desc", "date"],
            "description": "Result ordering. Input order is kept when omitted.",
        },
    },
    date_range=True,
    limit=True,
)

register_tool(
    name="search_transactions",
    fn=_search_transactions,
    description=(
        "Search transactions by memo text, amount range, categories and dates, "
        "with optional sorting and a result limit."
    ),
    input_schema=_INPUT_SCHEMA,
)
