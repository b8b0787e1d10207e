"""
ynab_client.py — Async HTTP client for the YNAB REST API with response caching.
"""

import asyncio
import logging
from typing import Any, Sequence, Union
from urllib.parse import quote

import httpx

from ynab_analyst.mcp_server.cache import ResponseCache
from ynab_analyst.mcp_server.errors import ErrorKind, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.ynab.com/v1"
DEFAULT_TIMEOUT_SEC = 30.0

BatchResult = Union[Any, ProviderError]


def _budget_path(budget_id: str, suffix: str = "") -> str:
    # budget ids are a single path segment
    return f"/budgets/{quote(budget_id, safe='')}{suffix}"


class YnabClient:
    """
    Authenticated, cached access to YNAB endpoints.

    Every call is fallible and raises ProviderError; batch_requests() instead
    returns one result per path, in input order, with failures in their slot.
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        cache: ResponseCache | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else ResponseCache()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {api_token}", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "YnabClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def validate_token(self) -> None:
        if not self.api_token or not self.api_token.strip():
            raise ProviderError.invalid_credential()

    async def get_json(self, path: str) -> Any:
        """GET *path* (relative to base_url), serving from cache when fresh."""
        self.validate_token()

        cached = self.cache.get(path)
        if cached is not None:
            logger.debug("Cache hit for %s", path)
            return cached

        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(path)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProviderError(
                ErrorKind.PROVIDER_FAILURE, f"API request failed for {url}: {exc}"
            ) from exc

        if response.status_code == 401:
            raise ProviderError(
                ErrorKind.INVALID_CREDENTIAL,
                f"HTTP 401 for {url}: the API token was rejected",
                status_code=401,
            )
        if not response.is_success:
            raise ProviderError(
                ErrorKind.PROVIDER_FAILURE,
                f"HTTP {response.status_code} for {url}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                ErrorKind.INVALID_RESPONSE, f"Response from {url} is not valid JSON"
            ) from exc

        self.cache.set(path, payload)
        return payload

    async def get_budgets(self) -> Any:
        return await self.get_json("/budgets")

    async def get_budget(self, budget_id: str) -> Any:
        return await self.get_json(_budget_path(budget_id))

    async def get_categories(self, budget_id: str) -> Any:
        return await self.get_json(_budget_path(budget_id, "/categories"))

    async def get_transactions(self, budget_id: str) -> Any:
        return await self.get_json(_budget_path(budget_id, "/transactions"))

    async def batch_requests(self, paths: Sequence[str]) -> list[BatchResult]:
        """Fetch all *paths* concurrently; a failed fetch never aborts its siblings."""
        results = await asyncio.gather(
            *(self.get_json(path) for path in paths), return_exceptions=True
        )
        out: list[BatchResult] = []
        for path, result in zip(paths, results):
            if isinstance(result, ProviderError):
                out.append(result)
            elif isinstance(result, Exception):
                out.append(
                    ProviderError(ErrorKind.PROVIDER_FAILURE, f"Request for {path} failed: {result}")
                )
            else:
                out.append(result)
        return out

    async def get_budget_batch(
        self, budget_id: str
    ) -> tuple[BatchResult, BatchResult, BatchResult]:
        """Return (budget, categories, transactions) payloads for *budget_id*."""
        budget, categories, transactions = await self.batch_requests(
            [
                _budget_path(budget_id),
                _budget_path(budget_id, "/categories"),
                _budget_path(budget_id, "/transactions"),
            ]
        )
        return budget, categories, transactions

    def cache_size(self) -> int:
        return self.cache.size()

    def clear_cache(self) -> None:
        self.cache.clear()

    def cleanup_cache(self) -> int:
        return self.cache.cleanup_expired()
