"""MCP tool: get_budget_overview — income, expenses and top spending categories."""

from ynab_analyst.m02_analytics.aggregations import income_expense_totals, spend_by_category
from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.registry import register_tool
from ynab_analyst.mcp_server.schemas import DEFAULT_BUDGET_ID, budget_input_schema
from ynab_analyst.mcp_server.tools._args import limit_arg, str_arg

TOP_CATEGORIES_DEFAULT = 5


async def _get_budget_overview(source: DataSource, args: dict) -> dict:
    budget_id = str_arg(args, "budget_id", DEFAULT_BUDGET_ID)
    top_n = limit_arg(args, default=TOP_CATEGORIES_DEFAULT, maximum=50)

    snapshot = await source.get_budget_snapshot(budget_id)
    names = snapshot.category_names()
    totals = income_expense_totals(snapshot.transactions)
    spend = spend_by_category(snapshot.transactions)
    ranked = sorted(spend.items(), key=lambda kv: kv[1], reverse=True)[:top_n]

    return {
        "budget_overview": {
            "budget": {"id": snapshot.budget.id or budget_id, "name": snapshot.budget.name},
            **totals.to_dict(),
            "savings_rate": round(totals.savings_rate, 2),
            "category_count": len(snapshot.categories),
            "top_spending_categories": [
                {"category_id": cid, "name": names.get(cid, cid), "total_spent": amount}
                for cid, amount in ranked
            ],
        }
    }


register_tool(
    name="get_budget_overview",
    fn=_get_budget_overview,
    description="Summarize a budget: total income, total expenses, net and top spending categories.",
    input_schema=budget_input_schema(limit=True),
)
