"""
schemas.py — JSON Schema fragments for MCP tool inputs.

The inputSchema dicts built here are published by tools/list so clients can
validate and document tool arguments. Handlers still read arguments leniently.
"""

DEFAULT_BUDGET_ID = "last-used"

_BUDGET_ID_PROP = {
    "budget_id": {
        "type": "string",
        "description": "YNAB budget identifier. Defaults to 'last-used'.",
        "default": DEFAULT_BUDGET_ID,
    }
}

_DATE_RANGE_PROPS = {
    "since_date": {
        "type": "string",
        "description": "Inclusive lower date bound (YYYY-MM-DD).",
    },
    "until_date": {
        "type": "string",
        "description": "Inclusive upper date bound (YYYY-MM-DD).",
    },
}

_LIMIT_PROP = {
    "limit": {
        "type": "integer",
        "description": "Maximum number of items to return.",
        "minimum": 1,
    }
}


def budget_input_schema(
    extra_props: dict | None = None, *, date_range: bool = False, limit: bool = False
) -> dict:
    """Return a JSON Schema object for a budget-scoped tool."""
    props = dict(_BUDGET_ID_PROP)
    if date_range:
        props.update(_DATE_RANGE_PROPS)
    if limit:
        props.update(_LIMIT_PROP)
    if extra_props:
        props.update(extra_props)
    return {"type": "object", "properties": props}
