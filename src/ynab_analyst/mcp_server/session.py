"""
session.py — Request/response loop over a framed byte stream.

One message is read, handled and answered before the next is read. Faults are
contained per message except for transport faults (the stream position is
unknown, so the session ends) and OSError (propagated to the caller).
"""

import asyncio
import logging
import time
from typing import Any, BinaryIO

from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.errors import EnvelopeParseError, TransportError
from ynab_analyst.mcp_server.jsonrpc import (
    JsonRpcResponse,
    RpcErrorCode,
    build_error,
    parse_request,
)
from ynab_analyst.mcp_server.observability import RuntimeMetrics, log_rpc_event
from ynab_analyst.mcp_server.response_utils import new_trace_id
from ynab_analyst.mcp_server.rpc_dispatch import dispatch_rpc_method
from ynab_analyst.mcp_server.transport import END_OF_STREAM, read_message, write_message

logger = logging.getLogger("ynab_analyst.mcp_server.session")


async def handle_message(
    text: str,
    source: DataSource,
    *,
    server_info: dict[str, Any],
    metrics: RuntimeMetrics | None = None,
    structured_logs: bool = False,
) -> JsonRpcResponse | None:
    """
    Turn one decoded message body into its response.

    Returns None for notifications, which are dispatched but never answered.
    """
    start = time.perf_counter()
    trace_id = new_trace_id()

    def _finish(
        response: JsonRpcResponse | None,
        *,
        method: str,
        ok: bool,
        level: int = logging.INFO,
        error_code: int | None = None,
        req_id: Any = None,
        tool_name: str | None = None,
        notification: bool = False,
    ) -> JsonRpcResponse | None:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        if metrics is not None:
            metrics.record_rpc(
                method=method,
                duration_ms=duration_ms,
                ok=ok,
                tool_name=tool_name,
                error_code=error_code,
                notification=notification,
            )
        log_rpc_event(
            logger=logger,
            structured_logs=structured_logs,
            level=level,
            event="rpc_request_completed",
            trace_id=trace_id,
            req_id=req_id,
            method=method,
            tool=tool_name,
            ok=ok,
            error_code=error_code,
            notification=notification or None,
            duration_ms=duration_ms,
        )
        return None if notification else response

    try:
        request = parse_request(text)
    except EnvelopeParseError as exc:
        return _finish(
            build_error(None, RpcErrorCode.PARSE_ERROR, f"Parse error: {exc}"),
            method="unknown",
            ok=False,
            level=logging.WARNING,
            error_code=RpcErrorCode.PARSE_ERROR,
        )

    try:
        outcome = await dispatch_rpc_method(
            req_id=request.id,
            method=request.method,
            params=request.params,
            source=source,
            server_info=server_info,
            trace_id=trace_id,
            logger=logger,
        )
    except Exception as exc:
        logger.exception(f"Dispatch of {request.method} failed (trace_id={trace_id})")
        return _finish(
            build_error(
                request.id,
                RpcErrorCode.INTERNAL_ERROR,
                f"Internal error: {str(exc)} (trace_id={trace_id})",
            ),
            method=request.method,
            ok=False,
            level=logging.ERROR,
            error_code=RpcErrorCode.INTERNAL_ERROR,
            req_id=request.id,
            notification=request.is_notification,
        )

    return _finish(
        outcome.payload,
        method=request.method,
        ok=outcome.ok,
        level=outcome.level,
        error_code=outcome.error_code,
        req_id=request.id,
        tool_name=outcome.tool_name,
        notification=request.is_notification,
    )


async def run_session(
    reader: BinaryIO,
    writer: BinaryIO,
    source: DataSource,
    *,
    server_info: dict[str, Any],
    metrics: RuntimeMetrics | None = None,
    structured_logs: bool = False,
) -> None:
    """
    Serve requests from *reader* until end of stream or a transport fault.

    Blocking stream I/O runs in a worker thread so the event loop stays free
    for tool handlers. OSError from either stream propagates.
    """
    logger.info(f"Session started (source={source.name})")
    while True:
        try:
            message = await asyncio.to_thread(read_message, reader)
        except TransportError as exc:
            logger.error(f"Transport fault, closing session: {exc}")
            return

        if message is END_OF_STREAM:
            logger.info("Input stream closed, ending session")
            return

        response = await handle_message(
            message,
            source,
            server_info=server_info,
            metrics=metrics,
            structured_logs=structured_logs,
        )
        if response is not None:
            await asyncio.to_thread(write_message, writer, response.to_json())
