"""
aggregations.py

Totals and budget-health scoring over transaction collections.

Spend is always reported as a positive magnitude even though expenses are
stored as negative milliunits. Income/expense splits use only the sign of
the amount; a zero amount counts as non-expense.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ynab_analyst.m01_transactions.models import Transaction
from ynab_analyst.m01_transactions.query import TransactionQuery

OVERSPEND_FACTOR = 2.0


@dataclass(frozen=True)
class CashflowTotals:
    income: int
    expenses: int
    transaction_count: int

    @property
    def net(self) -> int:
        return self.income - self.expenses

    @property
    def savings_rate(self) -> float:
        """Net as a percentage of income; 0.0 when there is no income."""
        if self.income == 0:
            return 0.0
        return self.net / self.income * 100

    def to_dict(self) -> dict:
        return {
            "total_income": self.income,
            "total_expenses": self.expenses,
            "net": self.net,
            "transaction_count": self.transaction_count,
        }


def category_spend_total(
    transactions: Iterable[Transaction], query: Optional[TransactionQuery] = None
) -> int:
    """Absolute value of the summed amounts of the transactions matching *query*."""
    matched = (query or TransactionQuery()).apply(transactions)
    return abs(sum(t.amount for t in matched))


def income_expense_totals(transactions: Iterable[Transaction]) -> CashflowTotals:
    income = 0
    expenses = 0
    count = 0
    for t in transactions:
        count += 1
        if t.amount < 0:
            expenses += -t.amount
        else:
            income += t.amount
    return CashflowTotals(income=income, expenses=expenses, transaction_count=count)


def spend_by_category(transactions: Iterable[Transaction]) -> dict[str, int]:
    """Expense magnitude per category_id, in first-seen order."""
    totals: dict[str, int] = defaultdict(int)
    for t in transactions:
        if t.amount < 0:
            totals[t.category_id] += -t.amount
    return dict(totals)


def over_spending_categories(
    category_spend: dict[str, int], factor: float = OVERSPEND_FACTOR
) -> list[str]:
    """Categories whose spend exceeds *factor* times the mean per-category spend."""
    spent = {k: v for k, v in category_spend.items() if v > 0}
    if not spent:
        return []
    mean = sum(spent.values()) / len(spent)
    return [k for k, v in spent.items() if v > factor * mean]


@dataclass
class HealthReport:
    score: int
    status: str
    totals: CashflowTotals
    savings_rate: float
    overspending: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


def _status_for(score: int) -> str:
    if score >= 80:
        return "healthy"
    if score >= 50:
        return "fair"
    return "needs_attention"


def health_score(
    transactions: Iterable[Transaction], category_names: Optional[dict[str, str]] = None
) -> HealthReport:
    """
    Score budget health from 0 to 100.

    The score starts at 100 and is reduced by a weak savings rate and by
    each category flagged as over-spending (at most 30 points for those).
    """
    items = list(transactions)
    names = category_names or {}
    totals = income_expense_totals(items)
    rate = totals.savings_rate
    overspending = over_spending_categories(spend_by_category(items))

    score = 100
    recommendations: list[str] = []
    if rate < 0:
        score -= 40
        recommendations.append("Spending exceeds income; reduce expenses or increase income.")
    elif rate < 10:
        score -= 25
        recommendations.append("Savings rate is below 10%; look for recurring costs to trim.")
    elif rate < 20:
        score -= 10
        recommendations.append("Savings rate is below 20%; consider raising monthly savings goals.")

    score -= min(10 * len(overspending), 30)
    for category_id in overspending:
        label = names.get(category_id) or category_id
        recommendations.append(
            f"'{label}' spending is more than twice the average category; review its budget."
        )

    score = max(0, min(100, score))
    return HealthReport(
        score=score,
        status=_status_for(score),
        totals=totals,
        savings_rate=round(rate, 2),
        overspending=overspending,
        recommendations=recommendations,
    )
