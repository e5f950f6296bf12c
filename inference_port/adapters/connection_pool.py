"""HTTP connection pooling for inference backends.

Adapters share one ``httpx.AsyncClient`` per pool so connections are reused
across requests instead of being opened per call.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx


class HTTPConnectionPool:
    """Lazily created, shared ``httpx.AsyncClient``.

    Client creation is guarded by an ``asyncio.Lock`` so concurrent first
    requests end up on the same client.
    """

    def __init__(
        self,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        keepalive_expiry: float = 5.0,
        timeout: float = 30.0,
        http2: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the connection pool.

        Args:
            max_connections: Maximum number of connections to maintain
            max_keepalive_connections: Max idle connections to keep alive
            keepalive_expiry: How long to keep idle connections (seconds)
            timeout: Default timeout for requests (seconds)
            http2: Negotiate HTTP/2 where the server supports it
            transport: Custom transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.max_connections = max_connections
        self.max_keepalive_connections = max_keepalive_connections
        self.keepalive_expiry = keepalive_expiry
        self.timeout = timeout
        self.http2 = http2
        self.transport = transport

        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
            keepalive_expiry=keepalive_expiry,
        )
        self.timeout_config = httpx.Timeout(
            timeout=timeout,
            connect=5.0,
            read=timeout,
            write=10.0,
        )

        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure we have an active client instance."""
        if self._client is None:
            async with self._lock:
                # Double-check after acquiring lock
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        limits=self.limits,
                        timeout=self.timeout_config,
                        http2=self.http2,
                        transport=self.transport,
                    )
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request using the pooled client.

        Raises:
            httpx.HTTPError: Transport-level failures, for the caller to map.
        """
        client = await self._ensure_client()

        if "timeout" in kwargs:
            kwargs["timeout"] = httpx.Timeout(kwargs["timeout"])

        return await client.request(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        """Close the pooled client."""
        if self._client:
            await self._client.aclose()
            self._client = None
