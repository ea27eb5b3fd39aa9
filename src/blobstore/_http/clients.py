"""Client factory functions for creating pre-configured httpx clients."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from .config import DEFAULT_TIMEOUT


def _client_kwargs(
    timeout: float | None,
    headers: Mapping[str, str] | None,
) -> dict:
    effective_timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
    kwargs: dict = {
        "timeout": httpx.Timeout(effective_timeout),
        "follow_redirects": True,
    }
    if headers:
        kwargs["headers"] = dict(headers)
    return kwargs


def create_base_client(
    timeout: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.Client:
    """Create a sync httpx client shared by every request of one blobstore client.

    Authorization is applied per request by the transport, not here.

    Args:
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.
        headers: Static headers sent with every request.

    Returns:
        An httpx.Client with basic configuration.
    """
    return httpx.Client(**_client_kwargs(timeout, headers))


def create_base_async_client(
    timeout: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an async httpx client; see create_base_client()."""
    return httpx.AsyncClient(**_client_kwargs(timeout, headers))


__all__ = [
    "create_base_client",
    "create_base_async_client",
]
