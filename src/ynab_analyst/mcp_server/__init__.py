"""
ynab_analyst MCP Server

JSON-RPC 2.0 server exposing YNAB budget analysis as MCP tools. Speaks
Content-Length framed messages over stdin/stdout by default, or POST /rpc
over HTTP.

Start with:
    python -m ynab_analyst.mcp_server.server
"""
