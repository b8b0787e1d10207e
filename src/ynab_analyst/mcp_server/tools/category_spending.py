"""MCP tool: analyze_category_spending — total spend for one or more categories."""

from ynab_analyst.m01_transactions.models import Category, format_milliunits
from ynab_analyst.m01_transactions.query import TransactionQuery
from ynab_analyst.m02_analytics.aggregations import category_spend_total
from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.registry import register_tool
from ynab_analyst.mcp_server.schemas import DEFAULT_BUDGET_ID, budget_input_schema
from ynab_analyst.mcp_server.tools._args import (
    opt_str_arg,
    str_arg,
    str_list_arg,
)


def resolve_category_ids(args: dict, categories: list[Category]) -> list[str]:
    """
    Collect category ids from category_id, category_ids and category_name.

    A name is matched case-insensitively against known categories; an
    unmatched name is kept as-is so the filter stays strict.
    """
    ids = str_list_arg(args, "category_ids")
    category_id = str_arg(args, "category_id")
    if category_id:
        ids.append(category_id)

    name = str_arg(args, "category_name")
    if name:
        matched = [c.id for c in categories if c.name.casefold() == name.casefold()]
        ids.extend(matched or [name])

    return list(dict.fromkeys(ids))


async def _analyze_category_spending(source: DataSource, args: dict) -> dict:
    budget_id = str_arg(args, "budget_id", DEFAULT_BUDGET_ID)
    since = opt_str_arg(args, "since_date")
    until = opt_str_arg(args, "until_date")

    snapshot = await source.get_budget_snapshot(budget_id)
    names = snapshot.category_names()
    category_ids = resolve_category_ids(args, snapshot.categories)

    # outflows only
    query = (
        TransactionQuery()
        .with_categories(category_ids)
        .with_date_range(since, until)
        .with_max_amount(-1)
    )
    expenses = query.apply(snapshot.transactions)
    total_spent = category_spend_total(expenses)
    largest = min(expenses, key=lambda t: t.amount) if expenses else None

    return {
        "category_spending": {
            "budget_id": budget_id,
            "categories": [{"category_id": cid, "name": names.get(cid, cid)} for cid in category_ids],
            "date_range": {"since": since, "until": until},
            "total_spent": total_spent,
            "total_spent_display": format_milliunits(total_spent),
            "transaction_count": len(expenses),
            "average_transaction": total_spent // len(expenses) if expenses else 0,
            "largest_expense": largest.to_dict() if largest else None,
        }
    }


_INPUT_SCHEMA = budget_input_schema(
    {
        "category_id": {"type": "string", "description": "Category identifier to analyze."},
        "category_ids": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Several category identifiers to analyze together.",
        },
        "category_name": {
            "type": "string",
            "description": "Category name (case-insensitive) to analyze.",
        },
    },
    date_range=True,
)

register_tool(
    name="analyze_category_spending",
    fn=_analyze_category_spending,
    description=(
        "Analyze spending for specific categories, with optional date filtering. "
        "Only outflows count as spend. Omit all category arguments to total every category."
    ),
    input_schema=_INPUT_SCHEMA,
)
