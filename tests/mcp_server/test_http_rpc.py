"""test_http_rpc.py — POST /rpc and the operability endpoints."""

from ynab_analyst.mcp_server.server import app


def test_rpc_initialize(client):
    payload = {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}
    response = client.post("/rpc", json=payload)
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["protocolVersion"] == "2024-11-05"
    assert result["serverInfo"]["name"] == "ynab-mcp-server"
    assert result["capabilities"] == {"tools": {}}


def test_rpc_tools_list(client):
    response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"})
    names = [t["name"] for t in response.json()["result"]["tools"]]
    assert names == [
        "analyze_category_spending",
        "get_budget_overview",
        "search_transactions",
        "analyze_spending_trends",
        "budget_health_check",
    ]


def test_rpc_tools_call(client):
    payload = {
        "jsonrpc": "2.0",
        "id": 3,
        "method": "tools/call",
        "params": {"name": "search_transactions", "arguments": {"query": "rent"}},
    }
    response = client.post("/rpc", json=payload)
    body = response.json()
    assert body["id"] == 3
    assert '"total_matches": 1' in body["result"]["content"][0]["text"]


def test_rpc_parse_error(client):
    response = client.post(
        "/rpc", content=b'{"invalid":json', headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] is None
    assert body["error"]["code"] == -32700


def test_rpc_lone_surrogate_id_is_echoed(client):
    response = client.post(
        "/rpc",
        content=b'{"jsonrpc":"2.0","id":"\\ud800","method":"tools/list"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    assert b'"id":"\\ud800"' in response.content
    assert response.json()["id"] == "\ud800"


def test_rpc_notification_has_no_body(client):
    response = client.post("/rpc", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert response.status_code == 204
    assert response.content == b""


def test_rpc_without_data_source(client, monkeypatch):
    monkeypatch.setattr(app.state, "source", None)
    response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    assert response.status_code == 503
    assert response.json()["error"]["code"] == -32603

    assert client.get("/ready").status_code == 503


def test_health_ready_metrics(client):
    client.post("/rpc", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert len(health["tools"]) == 5

    assert client.get("/ready").json() == {"status": "ready", "source": "local"}

    metrics = client.get("/metrics").json()
    assert metrics["rpc"]["requests_total"] >= 1
    assert metrics["rpc"]["by_method"]["tools/list"] >= 1
