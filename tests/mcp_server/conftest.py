import pytest
from fastapi.testclient import TestClient

from ynab_analyst.m01_transactions.models import Budget
from ynab_analyst.mcp_server.data_source import LocalTransactionSource
from ynab_analyst.mcp_server.server import app


@pytest.fixture
def local_source(sample_transactions, sample_categories) -> LocalTransactionSource:
    return LocalTransactionSource(
        transactions=sample_transactions,
        categories=sample_categories,
        budget=Budget(id="b-1", name="Household"),
    )


@pytest.fixture
def client(local_source, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(app.state, "source", local_source, raising=False)
    return TestClient(app)
