"""HTTP transport implementations for sync and async clients."""

from __future__ import annotations

import abc
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx

from ..credentials import CredentialProvider
from ..utils import debug, route

RequestContent = bytes | Iterator[bytes] | None


async def _aiter_chunks(chunks: Iterator[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class BaseTransport(abc.ABC):
    """Abstract base class for HTTP transports.

    Resolves object paths against the base URL and runs the credential
    provider over every request before it is dispatched.
    """

    def __init__(self, base_url: str, credential_provider: CredentialProvider) -> None:
        self._base_url = base_url
        self._credential_provider = credential_provider

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, path: str) -> str:
        return route(self._base_url, path)

    def _authorized_request(
        self,
        client: httpx.Client | httpx.AsyncClient,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None,
        content: Any,
        headers: dict[str, str] | None,
    ) -> httpx.Request:
        request = client.build_request(
            method,
            self.build_url(path),
            params=params or None,
            content=content,
        )
        self._credential_provider.authorize(request)
        if headers:
            for key, value in headers.items():
                request.headers[key] = value
        debug(f"{method} {request.url}")
        return request

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        content: RequestContent = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send an authorized HTTP request and return the response."""
        ...

    @abc.abstractmethod
    def close(self) -> None:
        """Close any underlying resources."""
        ...


class BlockingTransport(BaseTransport):
    """
    Synchronous HTTP transport using httpx.Client.

    ``send`` is declared async but never awaits anything, allowing it to be
    executed via iter_coroutine().
    """

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        credential_provider: CredentialProvider,
    ) -> None:
        super().__init__(base_url, credential_provider)
        self._client = client

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        content: RequestContent = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request = self._authorized_request(
            self._client, method, path, params=params, content=content, headers=headers
        )
        response = self._client.send(request)
        debug(f"{method} {request.url} -> {response.status_code}")
        return response

    def close(self) -> None:
        self._client.close()


class AsyncTransport(BaseTransport):
    """Asynchronous HTTP transport using httpx.AsyncClient."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        credential_provider: CredentialProvider,
    ) -> None:
        super().__init__(base_url, credential_provider)
        self._client = client

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        content: RequestContent = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        body: Any = content
        if content is not None and not isinstance(content, bytes):
            # httpx.AsyncClient only streams async iterables
            body = _aiter_chunks(content)
        request = self._authorized_request(
            self._client, method, path, params=params, content=body, headers=headers
        )
        response = await self._client.send(request)
        debug(f"{method} {request.url} -> {response.status_code}")
        return response

    def close(self) -> None:
        """Synchronous close is not supported for the async transport; use aclose()."""
        pass

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = [
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "RequestContent",
]
