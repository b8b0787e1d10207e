"""
response_utils.py — Shared response helpers for MCP tool and RPC UX.
"""

import json
from typing import Any
from uuid import uuid4


def new_trace_id() -> str:
    """Generate a short correlation ID for request/response tracing."""
    return uuid4().hex[:12]


def build_error_envelope(
    *,
    category: str,
    code: str,
    message: str,
    remediation: str,
    retryable: bool,
    trace_id: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Return a machine- and human-friendly error envelope.
    """
    envelope: dict[str, Any] = {
        "category": category,
        "code": code,
        "message": message,
        "remediation": remediation,
        "retryable": retryable,
        "trace_id": trace_id,
    }
    if details:
        envelope["details"] = details
    return envelope


def text_content(result: Any) -> dict[str, Any]:
    """Wrap a tool result as MCP text content."""
    return {"content": [{"type": "text", "text": json.dumps(result, indent=2, default=str)}]}
