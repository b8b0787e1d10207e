"""test_jsonrpc.py — request parsing and response envelopes."""

import json

import pytest

from ynab_analyst.mcp_server.errors import EnvelopeParseError
from ynab_analyst.mcp_server.jsonrpc import (
    JsonRpcResponse,
    RpcErrorCode,
    build_error,
    build_success,
    parse_request,
    rpc_error,
)


def test_parse_request_fields():
    req = parse_request('{"jsonrpc":"2.0","id":7,"method":"tools/call","params":{"name":"x"}}')
    assert req.id == 7
    assert req.method == "tools/call"
    assert req.params == {"name": "x"}
    assert req.is_notification is False


def test_absent_id_is_notification_but_null_id_is_not():
    assert parse_request('{"jsonrpc":"2.0","method":"ping"}').is_notification is True
    req = parse_request('{"jsonrpc":"2.0","id":null,"method":"ping"}')
    assert req.is_notification is False
    assert req.id is None


@pytest.mark.parametrize(
    "body, message",
    [
        ('{"invalid":json', "Invalid JSON"),
        ("[1, 2]", "must be a JSON object"),
        ('{"id":1,"method":"x"}', "Missing jsonrpc field"),
        ('{"jsonrpc":"1.0","id":1,"method":"x"}', "Unsupported jsonrpc version"),
        ('{"jsonrpc":"2.0","id":1}', "Missing method field"),
        ('{"jsonrpc":"2.0","id":1,"method":5}', "Missing method field"),
        ('{"jsonrpc":"2.0","id":1,"method":""}', "Empty method field"),
        ('{"jsonrpc":"2.0","id":{"a":1},"method":"x"}', "Invalid id field"),
        ('{"jsonrpc":"2.0","id":true,"method":"x"}', "Invalid id field"),
    ],
)
def test_parse_request_rejects_malformed_envelopes(body, message):
    with pytest.raises(EnvelopeParseError, match=message):
        parse_request(body)


def test_deeply_nested_json_is_parse_error():
    with pytest.raises(EnvelopeParseError, match="Invalid JSON"):
        parse_request("[" * 200_000 + "]" * 200_000)


def test_error_data_only_when_provided():
    assert "data" not in rpc_error(1, -32601, "Method not found")["error"]
    assert rpc_error(1, -32000, "boom", data={"k": 1})["error"]["data"] == {"k": 1}


def test_response_exclusivity():
    with pytest.raises(ValueError):
        JsonRpcResponse(id=1)
    with pytest.raises(ValueError):
        JsonRpcResponse(id=1, result={}, error={"code": 1, "message": "x"})


def test_success_serialization_keeps_null_result():
    assert build_success(3, None).to_dict() == {"jsonrpc": "2.0", "id": 3, "result": None}


def test_error_serialization():
    response = build_error(None, RpcErrorCode.PARSE_ERROR, "Parse error")
    decoded = json.loads(response.to_json())
    assert response.is_error
    assert decoded == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}


def test_to_json_keeps_unicode():
    assert "café" in build_success("a", {"memo": "café"}).to_json()


def test_to_json_escapes_lone_surrogates():
    text = build_success("\ud800", {"memo": "café"}).to_json()
    assert '"id":"\\ud800"' in text
    text.encode("utf-8")
    assert json.loads(text) == {"jsonrpc": "2.0", "id": "\ud800", "result": {"memo": "café"}}
