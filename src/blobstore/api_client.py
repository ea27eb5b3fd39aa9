"""Clients for the primitive blobstore operations: upload, stat, get, list, delete."""

from __future__ import annotations

from types import TracebackType

from ._core import _BaseBlobStoreApiClient
from ._http import (
    AsyncTransport,
    BlockingTransport,
    create_base_async_client,
    create_base_client,
    iter_coroutine,
)
from .config import BlobStoreConfig
from .credentials import CredentialProvider
from .errors import BlobStoreError
from .types import BlobFile, BlobFileStat
from .utils import BlobBody


def _resolve_config(
    base_url: str | None,
    credential_provider: CredentialProvider | None,
    timeout: float | None,
    config: BlobStoreConfig | None,
) -> BlobStoreConfig:
    if config is not None:
        if base_url is not None or credential_provider is not None or timeout is not None:
            raise BlobStoreError("Pass either config or base_url/credential_provider/timeout")
        return config
    return BlobStoreConfig.from_env(
        base_url=base_url, timeout=timeout, credential_provider=credential_provider
    )


class BlobStoreApiClient(_BaseBlobStoreApiClient):
    """Sync client for the blobstore HTTP API.

    One httpx connection pool is shared by every call until close().

    Example:
        with BlobStoreApiClient("https://blob.example.com/") as client:
            client.upload_stream("notes/today.txt", b"hello", "text/plain")
            print(client.get_file("notes/today.txt").content)
    """

    def __init__(
        self,
        base_url: str | None = None,
        credential_provider: CredentialProvider | None = None,
        *,
        timeout: float | None = None,
        config: BlobStoreConfig | None = None,
    ) -> None:
        self._config = _resolve_config(base_url, credential_provider, timeout, config)
        self._transport = BlockingTransport(
            create_base_client(
                timeout=self._config.timeout, headers=self._config.default_headers
            ),
            self._config.base_url,
            self._config.credential_provider,
        )
        self._closed = False

    @property
    def config(self) -> BlobStoreConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _ensure_open(self) -> None:
        if self._closed:
            raise BlobStoreError("Client is closed")

    def upload_stream(self, path: str, stream: BlobBody, content_type: str = "") -> None:
        """POST ``stream`` to ``path``; an empty content_type is sniffed from the data."""
        self._ensure_open()
        iter_coroutine(self._upload_stream(path, stream, content_type))

    def get_stat(self, path: str) -> BlobFileStat:
        """HEAD ``path``. A missing object is reported with ``exists=False``."""
        self._ensure_open()
        return iter_coroutine(self._get_stat(path))

    def get_file(self, path: str) -> BlobFile:
        """GET ``path``. Any status other than 200, 404 included, raises."""
        self._ensure_open()
        return iter_coroutine(self._get_file(path))

    def list_prefix(self, prefix: str = "", recursive: bool = False) -> list[str]:
        self._ensure_open()
        return iter_coroutine(self._list_prefix(prefix, recursive))

    def delete_file(self, path: str) -> None:
        self._ensure_open()
        iter_coroutine(self._delete_file(path))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._transport.close()

    def __enter__(self) -> BlobStoreApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncBlobStoreApiClient(_BaseBlobStoreApiClient):
    """Async client for the blobstore HTTP API; mirrors BlobStoreApiClient."""

    def __init__(
        self,
        base_url: str | None = None,
        credential_provider: CredentialProvider | None = None,
        *,
        timeout: float | None = None,
        config: BlobStoreConfig | None = None,
    ) -> None:
        self._config = _resolve_config(base_url, credential_provider, timeout, config)
        self._transport = AsyncTransport(
            create_base_async_client(
                timeout=self._config.timeout, headers=self._config.default_headers
            ),
            self._config.base_url,
            self._config.credential_provider,
        )
        self._closed = False

    @property
    def config(self) -> BlobStoreConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _ensure_open(self) -> None:
        if self._closed:
            raise BlobStoreError("Client is closed")

    async def upload_stream(self, path: str, stream: BlobBody, content_type: str = "") -> None:
        self._ensure_open()
        await self._upload_stream(path, stream, content_type)

    async def get_stat(self, path: str) -> BlobFileStat:
        self._ensure_open()
        return await self._get_stat(path)

    async def get_file(self, path: str) -> BlobFile:
        self._ensure_open()
        return await self._get_file(path)

    async def list_prefix(self, prefix: str = "", recursive: bool = False) -> list[str]:
        self._ensure_open()
        return await self._list_prefix(prefix, recursive)

    async def delete_file(self, path: str) -> None:
        self._ensure_open()
        await self._delete_file(path)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._transport.aclose()

    async def __aenter__(self) -> AsyncBlobStoreApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = ["BlobStoreApiClient", "AsyncBlobStoreApiClient"]
