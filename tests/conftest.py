import pytest

from ynab_analyst.m01_transactions.models import Category, Transaction


@pytest.fixture(autouse=True)
def isolate_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Keep tests deterministic by clearing server env vars.
    This prevents a shell-local YNAB token from reaching the real API.
    """
    for name in (
        "YNAB_API_TOKEN",
        "YNAB_MCP_BASE_URL",
        "YNAB_MCP_CACHE_TTL_SEC",
        "YNAB_MCP_DATA_PATH",
        "YNAB_MCP_STRUCTURED_LOGS",
        "YNAB_MCP_HTTP",
        "YNAB_MCP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


def _txn(
    tid: str,
    amount: int,
    category_id: str = "groceries",
    date: str | None = None,
    description: str | None = None,
) -> Transaction:
    return Transaction(
        id=tid,
        account_id="checking",
        category_id=category_id,
        amount=amount,
        date=date,
        description=description,
    )


@pytest.fixture
def sample_categories() -> list[Category]:
    return [
        Category(id="groceries", name="Groceries", group_id="everyday"),
        Category(id="gas", name="Gas", group_id="everyday"),
        Category(id="rent", name="Rent", group_id="bills"),
        Category(id="salary", name="Salary", group_id="income"),
    ]


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    return [
        _txn("t1", 500_000, "salary", "2024-01-01", "January paycheck"),
        _txn("t2", -5_000, "groceries", "2024-01-05", "Corner Market"),
        _txn("t3", -3_000, "groceries", "2024-02-10", "corner market snacks"),
        _txn("t4", -4_000, "gas", "2024-02-12", "Fuel stop"),
        _txn("t5", -150_000, "rent", "2024-02-01", "February rent"),
        _txn("t6", 500_000, "salary", "2024-02-01", "February paycheck"),
        _txn("t7", -12_000, "groceries", "2024-03-03", None),
        _txn("t8", -2_500, "gas", None, "Fuel, date unknown"),
    ]
