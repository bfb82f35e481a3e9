"""Cloudflare purge client implementation."""

import logging
from typing import Any

import httpx
from cachetools import TTLCache  # type: ignore[import-untyped]

from edgepurge.core.entities.connection_result import ConnectionResult
from edgepurge.core.entities.purge_config import PurgeConfig
from edgepurge.core.entities.purge_item import InvalidationItem
from edgepurge.utils.batching import chunked

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.cloudflare.com/client/v4"

# Cloudflare accepts at most 30 files or prefixes per purge request
MAX_ITEMS_PER_REQUEST = 30

# Raised while building or sending a request. Header values must be ASCII.
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeError)


class CloudflarePurgeClient:
    """Purges cached URLs through the Cloudflare zone purge API.

    Files and prefixes use separate request shapes, each capped at
    ``MAX_ITEMS_PER_REQUEST`` entries. ``purge`` partitions mixed items,
    sends every chunk and reports success only when all chunks succeeded.

    No method raises on transport problems: network errors, non-200
    responses, unreadable bodies and API error payloads are logged and
    reported as ``False``.
    """

    def __init__(
        self,
        config: PurgeConfig,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = API_BASE_URL,
        max_items_per_request: int = MAX_ITEMS_PER_REQUEST,
        connection_cache_ttl: float = 900.0,
    ) -> None:
        """Initialize the client.

        Args:
            config: Configuration providing credentials and timeouts. Read
                on every request so credential updates apply immediately.
            http_client: Shared HTTP client. One is created if None.
            base_url: Cloudflare API base URL.
            max_items_per_request: Ceiling of entries per purge request.
            connection_cache_ttl: Seconds a connectivity check result is
                reused for the same credentials.
        """
        self._config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient()
        self._base_url = base_url.rstrip("/")
        self._max_items = max(1, max_items_per_request)
        self._connection_cache: TTLCache[tuple[str, str], ConnectionResult] = TTLCache(
            maxsize=16,
            ttl=connection_cache_ttl,
        )

    @property
    def config(self) -> PurgeConfig:
        return self._config

    async def purge(self, items: list[InvalidationItem]) -> bool:
        """Purge a mix of file and prefix items.

        Args:
            items: Normalized items to purge.

        Returns:
            True only if every request succeeded.
        """
        if not items:
            return True

        files = [item.url for item in items if item.is_file]
        prefixes = [item.url for item in items if item.is_prefix]
        logger.debug(
            "Processing %d purge items (%d files, %d prefixes)",
            len(items), len(files), len(prefixes),
        )

        files_ok = await self.purge_files(files)
        prefixes_ok = await self.purge_prefixes(prefixes)
        return files_ok and prefixes_ok

    async def purge_files(self, urls: list[str]) -> bool:
        """Purge exact URLs, chunked to the per-request ceiling."""
        return await self._purge_chunks("files", urls)

    async def purge_prefixes(self, prefixes: list[str]) -> bool:
        """Purge URL prefixes, chunked to the per-request ceiling."""
        return await self._purge_chunks("prefixes", prefixes)

    async def test_connection(
        self,
        zone_id: str | None = None,
        api_token: str | None = None,
        use_cache: bool = True,
    ) -> ConnectionResult:
        """Validate credentials with a lightweight zone lookup.

        Args:
            zone_id: Zone to check. Defaults to the configured zone.
            api_token: Token to check. Defaults to the configured token.
            use_cache: Reuse a recent result for the same credentials.

        Returns:
            The connectivity result. Never raises.
        """
        zone_id = zone_id if zone_id is not None else self._config.zone_id
        api_token = api_token if api_token is not None else self._config.api_token
        if not zone_id or not api_token:
            return ConnectionResult(
                success=False,
                message="Zone ID and API token are required",
            )

        cache_key = (zone_id, api_token)
        if use_cache and cache_key in self._connection_cache:
            return self._connection_cache[cache_key]

        logger.debug("Testing connection to Cloudflare API for zone %s", zone_id)
        try:
            response = await self._http.get(
                f"{self._base_url}/zones/{zone_id}",
                headers=self._headers(api_token),
                timeout=self._config.connection_timeout,
            )
        except _REQUEST_ERRORS as e:
            logger.error("Connection test failed: %s", e)
            return ConnectionResult(success=False, message=str(e) or type(e).__name__)

        body = self._json(response)
        if response.status_code == 200 and body.get("success") is True:
            result_data = body.get("result") or {}
            zone_name = result_data.get("name") or "unknown"
            plan_name = (result_data.get("plan") or {}).get("name") or "unknown"
            logger.debug(
                "Connection test successful. Zone: %s, Plan: %s", zone_name, plan_name
            )
            result = ConnectionResult(
                success=True,
                message=f"Connected to zone: {zone_name} (Plan: {plan_name})",
                zone_name=zone_name,
                plan_name=plan_name,
            )
            self._connection_cache[cache_key] = result
            return result

        error_code, error_message = self._first_error(body)
        message = (
            f"HTTP code: {response.status_code}, "
            f"API code: {error_code}, Message: {error_message}"
        )
        logger.error("Connection test failed: %s", message)
        return ConnectionResult(
            success=False,
            message=message,
            details={"status_code": response.status_code, "error_code": error_code},
        )

    async def _purge_chunks(self, field_name: str, values: list[str]) -> bool:
        """Send one request per chunk, attempting every chunk."""
        if not values:
            return True

        chunks = list(chunked(values, self._max_items))
        failed = 0
        for index, chunk in enumerate(chunks, start=1):
            if not await self._send_purge(field_name, chunk):
                failed += 1
                logger.error(
                    "Failed to purge %s batch #%d of %d", field_name, index, len(chunks)
                )

        if failed:
            logger.error(
                "Failed to purge %d out of %d %s batches (%d total)",
                failed, len(chunks), field_name, len(values),
            )
            return False
        return True

    async def _send_purge(self, field_name: str, values: list[str]) -> bool:
        """Send a single purge request."""
        config = self._config
        if not config.has_credentials:
            logger.error("Cloudflare credentials missing. Cannot purge %s.", field_name)
            return False

        logger.debug("Sending purge request with %d %s", len(values), field_name)
        try:
            response = await self._http.post(
                f"{self._base_url}/zones/{config.zone_id}/purge_cache",
                headers=self._headers(config.api_token),
                json={field_name: values},
                timeout=config.purge_timeout,
            )
        except _REQUEST_ERRORS as e:
            logger.error("Purge request failed: %s", e)
            return False

        body = self._json(response)
        if response.status_code == 200 and body.get("success") is True:
            logger.debug("Successfully purged %d %s", len(values), field_name)
            return True

        error_code, error_message = self._first_error(body)
        logger.error(
            "Failed to purge %s. HTTP Code: %s, API Error Code: %s, Message: %s",
            field_name, response.status_code, error_code, error_message,
        )
        shown = ", ".join(values[:5])
        if len(values) > 5:
            shown += f" and {len(values) - 5} more"
        logger.error("Failed to purge the following %s: %s", field_name, shown)
        return False

    def _headers(self, api_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a response body, returning {} when it is not a JSON object."""
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _first_error(self, body: dict[str, Any]) -> tuple[Any, str]:
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return (
                errors[0].get("code", "Unknown code"),
                errors[0].get("message", "Unknown error"),
            )
        return "Unknown code", "Unknown error"

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "CloudflarePurgeClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
