"""
jsonrpc.py — JSON-RPC 2.0 request parsing and response construction.

Envelopes are independent of wire framing: parse_request() takes the decoded
message body, JsonRpcResponse.to_json() produces the body to frame.
"""

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from ynab_analyst.mcp_server.errors import EnvelopeParseError

JSONRPC_VERSION = "2.0"


class RpcErrorCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_ERROR = -32000


@dataclass(frozen=True)
class JsonRpcRequest:
    method: str
    id: Any = None
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION
    is_notification: bool = False


def parse_request(text: str) -> JsonRpcRequest:
    """
    Parse a request envelope from a decoded message body.

    Raises EnvelopeParseError with a descriptive message when the body is not
    valid JSON or does not satisfy the JSON-RPC 2.0 request shape.
    """
    try:
        body = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise EnvelopeParseError(f"Invalid JSON: {exc}") from exc

    if not isinstance(body, dict):
        raise EnvelopeParseError("Request must be a JSON object")

    jsonrpc = body.get("jsonrpc")
    if not isinstance(jsonrpc, str):
        raise EnvelopeParseError("Missing jsonrpc field")
    if jsonrpc != JSONRPC_VERSION:
        raise EnvelopeParseError(f"Unsupported jsonrpc version: {jsonrpc}")

    method = body.get("method")
    if not isinstance(method, str):
        raise EnvelopeParseError("Missing method field")
    if not method:
        raise EnvelopeParseError("Empty method field")

    req_id = body.get("id")
    # bool is an int subclass but never a valid id
    if isinstance(req_id, bool) or not isinstance(req_id, (str, int, float, type(None))):
        raise EnvelopeParseError("Invalid id field: must be a string, number or null")

    return JsonRpcRequest(
        jsonrpc=jsonrpc,
        id=req_id,
        method=method,
        params=body.get("params"),
        is_notification="id" not in body,
    )


def rpc_error(req_id: Any, code: int, message: str, data: Any = None) -> dict:
    error_obj: dict[str, Any] = {"code": int(code), "message": message}
    if data is not None:
        error_obj["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "error": error_obj}


def rpc_ok(req_id: Any, result: Any) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "result": result}


_UNSET = object()


@dataclass(frozen=True)
class JsonRpcResponse:
    """A response envelope carrying exactly one of result or error."""

    id: Any
    result: Any = _UNSET
    error: dict | None = None

    def __post_init__(self) -> None:
        has_result = self.result is not _UNSET
        if has_result == (self.error is not None):
            raise ValueError("A response carries exactly one of result or error")

    @classmethod
    def success(cls, req_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(id=req_id, result=result)

    @classmethod
    def failure(
        cls, req_id: Any, code: int, message: str, data: Any = None
    ) -> "JsonRpcResponse":
        return cls(id=req_id, error=rpc_error(req_id, code, message, data)["error"])

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"jsonrpc": JSONRPC_VERSION, "id": self.id, "error": dict(self.error)}
        return rpc_ok(self.id, self.result)

    def to_json(self) -> str:
        payload = self.to_dict()
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            # lone surrogates echoed from the request only survive as \u escapes
            return json.dumps(payload, ensure_ascii=True, separators=(",", ":"))
        return text


def build_success(req_id: Any, result: Any) -> JsonRpcResponse:
    return JsonRpcResponse.success(req_id, result)


def build_error(req_id: Any, code: int, message: str, data: Any = None) -> JsonRpcResponse:
    return JsonRpcResponse.failure(req_id, code, message, data)
