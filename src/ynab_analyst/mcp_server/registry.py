"""
registry.py — Tool registry for the MCP server to avoid circular imports.

Tools self-register by calling register_tool() at import time. Registration
order is the order published by tools/list.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable

from ynab_analyst.mcp_server.data_source import DataSource
from ynab_analyst.mcp_server.errors import ProviderError, ToolExecutionError

logger = logging.getLogger("ynab_analyst.mcp_server.registry")

ToolFn = Callable[[DataSource, dict[str, Any]], "dict | Awaitable[dict]"]

# Tool registry: tool_name → {fn, description, inputSchema}
TOOL_REGISTRY: dict[str, dict[str, Any]] = {}


def register_tool(name: str, fn: ToolFn, description: str, input_schema: dict) -> None:
    """
    Register a (sync or async) callable as an MCP tool.

    Raises ValueError if *name* is empty, already registered, or the
    description is blank.
    """
    if not name:
        raise ValueError("Tool name must be non-empty")
    if name in TOOL_REGISTRY:
        raise ValueError(f"Tool already registered: {name}")
    if not description.strip():
        raise ValueError(f"Tool {name} needs a description")

    TOOL_REGISTRY[name] = {
        "fn": fn,
        "description": description,
        "inputSchema": input_schema,
    }
    logger.debug("Registered tool: %s", name)


def list_tools() -> list[dict[str, Any]]:
    return [
        {"name": name, "description": meta["description"], "inputSchema": meta["inputSchema"]}
        for name, meta in TOOL_REGISTRY.items()
    ]


async def execute_tool(name: str, arguments: Any, source: DataSource) -> dict:
    """
    Run tool *name* against *source*.

    Raises ToolExecutionError for an unknown tool or any provider failure, so
    callers map a single error type regardless of where the tool ran.
    """
    meta = TOOL_REGISTRY.get(name)
    if meta is None:
        raise ToolExecutionError.unknown_tool(name)

    args = arguments if isinstance(arguments, dict) else {}
    try:
        result = meta["fn"](source, args)
        if inspect.isawaitable(result):
            result = await result
    except ProviderError as exc:
        logger.warning("Tool '%s' provider failure (%s): %s", name, exc.kind.value, exc.message)
        raise ToolExecutionError(exc.kind, exc.message, tool=name) from exc
    return result
