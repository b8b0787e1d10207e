"""MCP tool: budget_health_check — savings rate, overspending flags and a 0-100 score."""

from ynab_analyst.m02_analytics.aggregations import health_score, spend_by_category
from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.registry import register_tool
from ynab_analyst.mcp_server.schemas import DEFAULT_BUDGET_ID, budget_input_schema
from ynab_analyst.mcp_server.tools._args import str_arg


async def _budget_health_check(source: DataSource, args: dict) -> dict:
    budget_id = str_arg(args, "budget_id", DEFAULT_BUDGET_ID)

    snapshot = await source.get_budget_snapshot(budget_id)
    names = snapshot.category_names()
    report = health_score(snapshot.transactions, category_names=names)
    spend = spend_by_category(snapshot.transactions)

    return {
        "budget_health": {
            "budget_id": budget_id,
            "score": report.score,
            "status": report.status,
            "savings_rate": report.savings_rate,
            **report.totals.to_dict(),
            "overspending_categories": [
                {"category_id": cid, "name": names.get(cid, cid), "total_spent": spend[cid]}
                for cid in report.overspending
            ],
            "recommendations": report.recommendations,
        }
    }


register_tool(
    name="budget_health_check",
    fn=_budget_health_check,
    description=(
        "Score budget health from 0 to 100 using the savings rate and categories "
        "spending more than twice the category average, with recommendations."
    ),
    input_schema=budget_input_schema(),
)
