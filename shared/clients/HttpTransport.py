import asyncio

import httpx

from shared.helper.HelperConfig import HelperConfig


class HttpTransport:
    """
    The single outbound HTTP indirection shared by every client.

    Cross-cutting transport settings (proxy, timeout) are applied here once,
    so every backend gets them regardless of its kind. The underlying
    httpx.AsyncClient is created lazily on first use; concurrent first callers
    share one initialisation.
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self.proxy_url: str | None = helper_config.get_string_val("HTTP_PROXY_URL", default="") or None
        self.timeout = helper_config.get_number_val("HTTP_TIMEOUT", default=30.0)
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    def is_started(self) -> bool:
        return self._client is not None

    async def ensure_started(self) -> httpx.AsyncClient:
        """Create the shared HTTP client if needed and return it. Idempotent.

        Returns:
            httpx.AsyncClient: The shared client.
        """
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self.timeout, proxy=self.proxy_url)
                if self.proxy_url:
                    self.logging.info("HTTP transport started with outbound proxy %s", self.proxy_url)
                else:
                    self.logging.debug("HTTP transport started without proxy")
        return self._client

    async def close(self) -> None:
        """Close the shared HTTP client."""
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
