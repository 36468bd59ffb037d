"""Shared async HTTP client for outbound service calls."""

import logging

import httpx

logger = logging.getLogger(__name__)

# Global client instance
_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the global HTTP client.

    Per-request timeouts are passed by the callers, so the client itself
    carries only connection pooling.
    """
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
        )
    return _http_client


async def init_http_client() -> httpx.AsyncClient:
    """Initialize the HTTP client. Call at app startup."""
    return get_http_client()


async def shutdown_http_client() -> None:
    """Close the HTTP client. Call at app shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
        logger.info("HTTP client closed")
