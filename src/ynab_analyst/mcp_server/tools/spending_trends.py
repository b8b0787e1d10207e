"""MCP tool: analyze_spending_trends — month-by-month spending per category."""

from ynab_analyst.m02_analytics.trends import monthly_spending_trends
from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.registry import register_tool
from ynab_analyst.mcp_server.schemas import DEFAULT_BUDGET_ID, budget_input_schema
from ynab_analyst.mcp_server.tools._args import int_arg, str_arg

DEFAULT_MONTHS = 6
MAX_MONTHS = 24


async def _analyze_spending_trends(source: DataSource, args: dict) -> dict:
    budget_id = str_arg(args, "budget_id", DEFAULT_BUDGET_ID)
    months = int_arg(args, "months", DEFAULT_MONTHS)
    if months is None or months < 1:
        months = DEFAULT_MONTHS
    months = min(months, MAX_MONTHS)

    snapshot = await source.get_budget_snapshot(budget_id)
    names = snapshot.category_names()
    trends = monthly_spending_trends(snapshot.transactions, months=months)
    for item in trends["categories"]:
        item["name"] = names.get(item["category_id"], item["category_id"])

    return {
        "spending_trends": {
            "budget_id": budget_id,
            "months_requested": months,
            **trends,
        }
    }


register_tool(
    name="analyze_spending_trends",
    fn=_analyze_spending_trends,
    description=(
        "Analyze spending over the last N calendar months, bucketed by month and "
        "category, with an increasing/decreasing/stable indicator per category."
    ),
    input_schema=budget_input_schema(
        {
            "months": {
                "type": "integer",
                "description": f"Number of months to analyze (default {DEFAULT_MONTHS}).",
                "minimum": 1,
                "maximum": MAX_MONTHS,
            }
        }
    ),
)
