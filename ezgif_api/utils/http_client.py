"""
Outbound HTTP helpers.

This module holds the per-application client factory and
fetch_with_timeout(), which turns a single bounded GET into a
RequestResult instead of raising.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..config import DEFAULT_HTTP_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

TIMEOUT_ERROR = "Request timeout"


@dataclass
class RequestResult:
    """Outcome of a single outbound request.

    Either status/headers/data are set (success) or error is set (failure).
    """

    success: bool
    status: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    data: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, status: int, headers: Dict[str, str], data: str) -> 'RequestResult':
        return cls(success=True, status=status, headers=headers, data=data)

    @classmethod
    def failure(cls, error: str) -> 'RequestResult':
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "status": self.status,
                "headers": self.headers,
                "data": self.data,
            }
        return {"success": False, "error": self.error}


def create_headers() -> Dict[str, str]:
    """Headers attached to every outbound request (User-Agent only)."""
    return {"User-Agent": DEFAULT_USER_AGENT}


class HTTPClientFactory:
    """
    Creates and tracks the AsyncClient instances used by the application.

    Each application owns one factory, created in its lifespan, so shutting
    down one application never closes another application's clients.
    """

    def __init__(self):
        self._clients: List[httpx.AsyncClient] = []

    def _get_connection_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_keepalive_connections=10,
            max_connections=50,
            keepalive_expiry=30.0
        )

    def create_client(self, timeout: float = DEFAULT_HTTP_TIMEOUT, **overrides) -> httpx.AsyncClient:
        """
        Create a client for upstream requests.

        Args:
            timeout: Per-phase httpx timeout in seconds
            **overrides: Override default client configuration

        Returns:
            Configured AsyncClient instance
        """
        config = {
            'timeout': httpx.Timeout(timeout),
            'limits': self._get_connection_limits(),
            'follow_redirects': True,
        }
        config.update(overrides)

        client = httpx.AsyncClient(**config)
        self._clients.append(client)
        return client

    async def close_all_clients(self):
        """Close all managed clients."""
        for client in self._clients:
            try:
                await client.aclose()
            except Exception as e:
                logger.warning(f"Error closing HTTP client: {e}")

        self._clients.clear()


@asynccontextmanager
async def lifespan_http_clients(factory: HTTPClientFactory):
    """Close every client the given factory created when the application stops."""
    try:
        yield factory
    finally:
        await factory.close_all_clients()


async def _send(client: httpx.AsyncClient, method: str, url: str, request_kwargs: Dict[str, Any]) -> RequestResult:
    response = await client.request(method, url, **request_kwargs)
    return RequestResult.ok(
        status=response.status_code,
        headers=dict(response.headers),
        data=response.text,
    )


async def fetch_with_timeout(
    url: str,
    options: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> RequestResult:
    """
    Perform one request and normalize the outcome.

    Args:
        url: Target URL, used as given
        options: Request overrides: "method", "body", "headers" or any httpx
            request keyword. "headers" replaces the default User-Agent header.
        client: Client to send through; a temporary one is used when omitted
        timeout: Bound in seconds on the whole exchange, body included

    Returns:
        RequestResult; transport failures never raise
    """
    if client is None:
        async with httpx.AsyncClient(follow_redirects=True) as temporary_client:
            return await fetch_with_timeout(url, options, client=temporary_client, timeout=timeout)

    request_kwargs = dict(options or {})
    method = request_kwargs.pop("method", "GET")
    if "body" in request_kwargs:
        request_kwargs["content"] = request_kwargs.pop("body")
    request_kwargs = {"headers": create_headers(), **request_kwargs}

    try:
        return await asyncio.wait_for(_send(client, method, url, request_kwargs), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        logger.warning(f"{method} {url} timed out after {timeout}s")
        return RequestResult.failure(TIMEOUT_ERROR)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"{method} {url} failed: {type(e).__name__}: {e}")
        return RequestResult.failure(str(e) or type(e).__name__)
