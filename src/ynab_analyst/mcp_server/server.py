"""
server.py — ynab_analyst MCP Server (Dual Transport)

Supports two modes:
1. Stdio (default) — Content-Length framed JSON-RPC over stdin/stdout for
   desktop MCP hosts.
2. HTTP (/rpc)     — JSON-RPC 2.0 over POST, plus /health, /ready, /metrics.

Tools self-register when rpc_dispatch imports them; both transports share the
same dispatcher and data source.

Start Stdio:
    YNAB_API_TOKEN=... python -m ynab_analyst.mcp_server.server

Start HTTP:
    YNAB_API_TOKEN=... python -m ynab_analyst.mcp_server.server --http
"""

import argparse
import asyncio
import logging
import os
import sys
import time
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from ynab_analyst.mcp_server.cache import ResponseCache
from ynab_analyst.mcp_server.data_source import (
    DataSource,
    LocalTransactionSource,
    RemoteProviderSource,
)
from ynab_analyst.mcp_server.jsonrpc import RpcErrorCode, build_error
from ynab_analyst.mcp_server.observability import RuntimeMetrics
from ynab_analyst.mcp_server.registry import TOOL_REGISTRY
from ynab_analyst.mcp_server.rpc_dispatch import initialize_result
from ynab_analyst.mcp_server.session import handle_message, run_session
from ynab_analyst.mcp_server.settings import ServerSettings
from ynab_analyst.mcp_server.ynab_client import YnabClient

# Get package version dynamically
try:
    __version__ = version("ynab-analyst")
except PackageNotFoundError:
    __version__ = os.environ.get("YNAB_MCP_VERSION_FALLBACK", "0.1.0")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,  # stdout carries protocol frames in stdio mode
)
logger = logging.getLogger("ynab_analyst.mcp_server")

SERVER_STARTED_AT = time.time()
SERVER_INFO = initialize_result(__version__)
METRICS = RuntimeMetrics(started_at=SERVER_STARTED_AT)

MISSING_TOKEN_MESSAGE = "Error: YNAB_API_TOKEN environment variable is required"
MISSING_TOKEN_HINT = "Please set it with: export YNAB_API_TOKEN=your_token_here"

# FastAPI app for HTTP transport; main() attaches the data source
app = FastAPI(title="ynab-analyst MCP Server", version=__version__)
app.state.source = None
app.state.structured_logs = False


def build_data_source(settings: ServerSettings) -> DataSource | None:
    """
    Pick the data source: a local dataset file wins, then the YNAB API.

    Returns None when neither is configured.
    """
    if settings.data_path:
        return LocalTransactionSource.from_file(settings.data_path)
    if settings.has_token:
        client = YnabClient(
            settings.api_token,
            base_url=settings.base_url,
            cache=ResponseCache(default_ttl=settings.cache_ttl_sec),
        )
        return RemoteProviderSource(client)
    return None


# --- HTTP /rpc JSON-RPC Handlers ---


@app.post("/rpc")
async def rpc_handler(request: Request) -> Response:
    """HTTP JSON-RPC 2.0 endpoint; notifications get 204 No Content."""
    source = request.app.state.source
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        payload = build_error(None, RpcErrorCode.PARSE_ERROR, "Parse error: body is not valid UTF-8")
        return JSONResponse(payload.to_dict(), status_code=200)

    if source is None:
        payload = build_error(None, RpcErrorCode.INTERNAL_ERROR, "Server has no data source configured")
        return JSONResponse(payload.to_dict(), status_code=503)

    response = await handle_message(
        text,
        source,
        server_info=SERVER_INFO,
        metrics=METRICS,
        structured_logs=request.app.state.structured_logs,
    )
    if response is None:
        return Response(status_code=204)
    return Response(content=response.to_json(), media_type="application/json")


@app.get("/health")
async def health() -> Any:
    metrics = METRICS.snapshot()
    return {
        "status": "ok",
        "version": __version__,
        "tools": list(TOOL_REGISTRY.keys()),
        "uptime_sec": metrics["uptime_sec"],
    }


@app.get("/ready")
async def ready(request: Request) -> Any:
    source = request.app.state.source
    if source is None:
        return JSONResponse({"status": "not_ready"}, status_code=503)
    return {"status": "ready", "source": source.name}


@app.get("/metrics")
async def metrics() -> Any:
    return METRICS.snapshot()


# --- Entry point and transport selection ---


async def run_stdio(source: DataSource, settings: ServerSettings) -> None:
    """Serve framed JSON-RPC on the process's stdin/stdout."""
    try:
        await run_session(
            sys.stdin.buffer,
            sys.stdout.buffer,
            source,
            server_info=SERVER_INFO,
            metrics=METRICS,
            structured_logs=settings.structured_logs,
        )
    finally:
        if isinstance(source, RemoteProviderSource):
            await source.client.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="YNAB Analyst MCP Server")
    parser.add_argument("--http", action="store_true", help="Serve POST /rpc over HTTP")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (default: 8001)")
    parser.add_argument("--config", default=None, help="Optional YAML settings file")
    parser.add_argument("--data", default=None, help="Serve a local YAML/JSON dataset")
    args = parser.parse_args(argv)

    settings = ServerSettings.load(args.config)
    overrides: dict[str, Any] = {}
    if args.http:
        overrides["http"] = True
    if args.port is not None:
        overrides["port"] = args.port
    if args.data:
        overrides["data_path"] = args.data
    if overrides:
        settings = settings.model_copy(update=overrides)

    source = build_data_source(settings)
    if source is None:
        print(MISSING_TOKEN_MESSAGE, file=sys.stderr)
        print(MISSING_TOKEN_HINT, file=sys.stderr)
        return 1

    if settings.http:
        logger.info(f"Starting YNAB MCP Server in HTTP mode on port {settings.port}")
        import uvicorn

        app.state.source = source
        app.state.structured_logs = settings.structured_logs
        uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")
    else:
        logger.info(f"Starting YNAB MCP Server in stdio mode (source={source.name})")
        asyncio.run(run_stdio(source, settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
