"""
HTTP Client Module

Shared httpx.AsyncClient for outbound calls (YouTube Data API) with:
- Connection pooling
- Retries with exponential backoff on 5xx and connection errors
- Configurable timeouts
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)


# ============== Configuration ==============

MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 5
KEEPALIVE_EXPIRY = 30  # seconds

DEFAULT_TIMEOUT = 10.0  # seconds

MAX_RETRIES = 2
RETRY_BACKOFF_BASE = 0.5  # seconds

RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ReadTimeout, httpx.WriteTimeout)


# ============== Global Client Instance ==============

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """
    Get or create the global async HTTP client.

    Returns:
        httpx.AsyncClient: Shared client instance.
    """
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            limits=httpx.Limits(
                max_connections=MAX_CONNECTIONS,
                max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
                keepalive_expiry=KEEPALIVE_EXPIRY,
            ),
            timeout=httpx.Timeout(DEFAULT_TIMEOUT),
            http2=True,
        )
    return _http_client


async def close_http_client() -> None:
    """Close the global HTTP client. Called during application shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


# ============== Request Helpers with Retry ==============

async def request_with_retry(
    method: str,
    url: str,
    max_retries: int = MAX_RETRIES,
    **kwargs: Any,
) -> httpx.Response:
    """
    Make an HTTP request, retrying server errors and dropped connections.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        max_retries: Maximum number of retry attempts
        **kwargs: Additional arguments passed to httpx request

    Returns:
        httpx.Response: The last response received.

    Raises:
        httpx.HTTPError: If the connection keeps failing.
    """
    client = get_http_client()

    for attempt in range(max_retries + 1):
        wait_time = RETRY_BACKOFF_BASE * (2 ** attempt)
        try:
            response = await client.request(method, url, **kwargs)
        except RETRYABLE_ERRORS as e:
            if attempt >= max_retries:
                raise
            logger.warning("Connection error on %s, retrying in %.2fs: %s", url, wait_time, e)
            await asyncio.sleep(wait_time)
            continue

        if response.status_code >= 500 and attempt < max_retries:
            logger.warning(
                "Server error %s on %s, retrying in %.2fs",
                response.status_code, url, wait_time,
            )
            await asyncio.sleep(wait_time)
            continue

        return response

    raise httpx.HTTPError(f"Request to {url} failed after {max_retries} retries")


async def get_json(url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    GET a JSON document with retry.

    Raises:
        httpx.HTTPStatusError: If the final response is not 2xx.
    """
    response = await request_with_retry("GET", url, params=params)
    response.raise_for_status()
    return response.json()
