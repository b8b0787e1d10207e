"""JSON-RPC method dispatch shared by the stdio session and the HTTP transport."""

import logging
from dataclasses import dataclass
from typing import Any

from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.errors import ErrorKind, ProviderError, ToolExecutionError
from ynab_analyst.mcp_server.jsonrpc import (
    JsonRpcResponse,
    RpcErrorCode,
    build_error,
    build_success,
)
from ynab_analyst.mcp_server.registry import execute_tool, list_tools
from ynab_analyst.mcp_server.response_utils import build_error_envelope, text_content

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "ynab-mcp-server"

# ErrorKind → (envelope category, remediation)
_KIND_GUIDANCE: dict[ErrorKind, tuple[str, str]] = {
    ErrorKind.UNKNOWN_TOOL: ("config", "Call tools/list and retry with a published tool name."),
    ErrorKind.INVALID_CREDENTIAL: (
        "auth",
        "Set YNAB_API_TOKEN to a valid personal access token and restart the server.",
    ),
    ErrorKind.PROVIDER_FAILURE: ("upstream", "Retry once; check YNAB API availability if it persists."),
    ErrorKind.INVALID_RESPONSE: ("upstream", "The YNAB API returned an unexpected payload shape."),
}


@dataclass(frozen=True)
class RpcDispatchResult:
    payload: JsonRpcResponse
    ok: bool
    level: int = logging.INFO
    error_code: int | None = None
    tool_name: str | None = None


def initialize_result(version: str) -> dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": version},
    }


def _tool_error_envelope(exc: ToolExecutionError, trace_id: str) -> dict[str, Any]:
    category, remediation = _KIND_GUIDANCE[exc.kind]
    cause = exc.__cause__
    return build_error_envelope(
        category=category,
        code=exc.kind.value,
        message=exc.message,
        remediation=remediation,
        retryable=isinstance(cause, ProviderError) and cause.retryable,
        trace_id=trace_id,
        details={"tool": exc.tool} if exc.tool else None,
    )


async def dispatch_rpc_method(
    *,
    req_id: Any,
    method: str,
    params: Any,
    source: DataSource,
    server_info: dict[str, Any],
    trace_id: str,
    logger: logging.Logger,
) -> RpcDispatchResult:
    if method == "initialize":
        return RpcDispatchResult(payload=build_success(req_id, server_info), ok=True)

    if method == "tools/list":
        return RpcDispatchResult(payload=build_success(req_id, {"tools": list_tools()}), ok=True)

    if method == "tools/call":
        params = params if isinstance(params, dict) else {}
        tool_name = params.get("name")

        if not isinstance(tool_name, str) or not tool_name:
            return RpcDispatchResult(
                payload=build_error(req_id, RpcErrorCode.INVALID_PARAMS, "Missing 'name' in params"),
                ok=False,
                level=logging.WARNING,
                error_code=RpcErrorCode.INVALID_PARAMS,
            )

        try:
            result = await execute_tool(tool_name, params.get("arguments"), source)
        except ToolExecutionError as exc:
            return RpcDispatchResult(
                payload=build_error(
                    req_id,
                    RpcErrorCode.SERVER_ERROR,
                    f"Tool execution failed: {exc.message}",
                    data={"error": _tool_error_envelope(exc, trace_id)},
                ),
                ok=False,
                level=logging.WARNING,
                error_code=RpcErrorCode.SERVER_ERROR,
                tool_name=tool_name,
            )
        except Exception as exc:
            logger.exception(f"Tool {tool_name} raised an error")
            envelope = build_error_envelope(
                category="internal",
                code="rpc_tools_call_internal_error",
                message=f"{type(exc).__name__}: {str(exc)}",
                remediation="Retry once. If it continues, inspect server logs with trace_id.",
                retryable=False,
                trace_id=trace_id,
            )
            return RpcDispatchResult(
                payload=build_error(
                    req_id,
                    RpcErrorCode.INTERNAL_ERROR,
                    f"Internal error: {str(exc)} (trace_id={trace_id})",
                    data={"error": envelope},
                ),
                ok=False,
                level=logging.ERROR,
                error_code=RpcErrorCode.INTERNAL_ERROR,
                tool_name=tool_name,
            )

        return RpcDispatchResult(
            payload=build_success(req_id, text_content(result)),
            ok=True,
            tool_name=tool_name,
        )

    return RpcDispatchResult(
        payload=build_error(req_id, RpcErrorCode.METHOD_NOT_FOUND, "Method not found"),
        ok=False,
        level=logging.WARNING,
        error_code=RpcErrorCode.METHOD_NOT_FOUND,
    )


# --- Tool Imports (Triggers Self-Registration, in tools/list order) ---

from ynab_analyst.mcp_server.tools import (  # noqa: F401, E402
    category_spending,
    budget_overview,
    search,
    spending_trends,
    health_check,
)
