"""
settings.py — Server configuration from environment variables and an optional YAML file.

Precedence, lowest to highest: field defaults, YAML file, environment.
"""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from ynab_analyst.m00_utils.config_loader import load_config
from ynab_analyst.mcp_server.cache import DEFAULT_TTL_SECONDS
from ynab_analyst.mcp_server.ynab_client import DEFAULT_BASE_URL

DEFAULT_HTTP_PORT = 8001

# setting field → environment variable
ENV_VARS = {
    "api_token": "YNAB_API_TOKEN",
    "base_url": "YNAB_MCP_BASE_URL",
    "cache_ttl_sec": "YNAB_MCP_CACHE_TTL_SEC",
    "data_path": "YNAB_MCP_DATA_PATH",
    "structured_logs": "YNAB_MCP_STRUCTURED_LOGS",
    "http": "YNAB_MCP_HTTP",
    "port": "YNAB_MCP_PORT",
}


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


class ServerSettings(BaseModel):
    api_token: Optional[str] = Field(None, description="YNAB personal access token.")
    base_url: str = Field(DEFAULT_BASE_URL, description="YNAB API base URL.")
    cache_ttl_sec: float = Field(
        DEFAULT_TTL_SECONDS, gt=0, description="Lifetime of cached API responses in seconds."
    )
    data_path: Optional[str] = Field(
        None, description="YAML/JSON dataset served instead of the YNAB API."
    )
    structured_logs: bool = Field(False, description="Emit JSON log events.")
    http: bool = Field(False, description="Serve POST /rpc over HTTP instead of stdio.")
    port: int = Field(DEFAULT_HTTP_PORT, gt=0, description="HTTP port.")

    @property
    def has_token(self) -> bool:
        return bool(self.api_token and self.api_token.strip())

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "ServerSettings":
        """Build settings from an optional YAML file overlaid by environment variables."""
        base: dict[str, Any] = {}
        if config_path:
            raw = load_config(config_path)
            base = {k: v for k, v in raw.items() if k in cls.model_fields}
        defaults = cls(**base)

        return cls(
            api_token=_env_str(ENV_VARS["api_token"], defaults.api_token),
            base_url=_env_str(ENV_VARS["base_url"], defaults.base_url),
            cache_ttl_sec=_env_float(ENV_VARS["cache_ttl_sec"], defaults.cache_ttl_sec),
            data_path=_env_str(ENV_VARS["data_path"], defaults.data_path),
            structured_logs=_env_bool(ENV_VARS["structured_logs"], defaults.structured_logs),
            http=_env_bool(ENV_VARS["http"], defaults.http),
            port=_env_int(ENV_VARS["port"], defaults.port),
        )
