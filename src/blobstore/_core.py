"""Core request logic shared by the sync and async API clients."""

from __future__ import annotations

from typing import Any

import httpx

from ._http import BaseTransport
from .errors import BlobStoreHttpError, BlobStoreResponseError
from .sniff import sniff_content_type
from .types import BlobFile, BlobFileStat
from .utils import (
    LIST_PATH_PREFIX,
    BlobBody,
    as_content,
    debug,
    parse_content_length,
    peek_body,
    split_path,
    strip_leading_slashes,
)


def make_http_error(operation: str, response: httpx.Response) -> BlobStoreHttpError:
    return BlobStoreHttpError(operation, response.status_code, response.text)


def build_stat(path: str, response: httpx.Response) -> BlobFileStat:
    directory, name = split_path(strip_leading_slashes(path))
    if response.status_code == 404:
        return BlobFileStat(path=directory, name=name, exists=False)
    return BlobFileStat(
        path=directory,
        name=name,
        mime_type=response.headers.get("content-type", ""),
        size_bytes=parse_content_length(response.headers.get("content-length")),
        exists=True,
    )


def decode_path_list(response: httpx.Response) -> list[str]:
    try:
        data = response.json()
    except ValueError as e:
        raise BlobStoreResponseError(f"Blobstore List returned invalid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
        raise BlobStoreResponseError(
            f"Blobstore List returned {type(data).__name__}, expected a list of paths"
        )
    return data


class _BaseBlobStoreApiClient:
    """
    Shared business logic for the primitive blobstore operations.

    All methods are async and use the abstract _transport property for HTTP
    requests. Subclasses must provide a concrete transport implementation.
    """

    _transport: BaseTransport

    def route(self, path: str) -> str:
        """Absolute URL that ``path`` resolves to under the base URL."""
        return self._transport.build_url(path)

    async def _upload_stream(self, path: str, stream: BlobBody, content_type: str = "") -> None:
        content: Any
        if content_type:
            content = as_content(stream)
        else:
            head, content = peek_body(stream)
            content_type = sniff_content_type(head)
            debug(f"sniffed content type {content_type!r} for {path}")
        response = await self._transport.send(
            "POST",
            path,
            content=content,
            headers={"content-type": content_type},
        )
        if response.status_code != 200:
            raise make_http_error("Upload", response)

    async def _get_stat(self, path: str) -> BlobFileStat:
        response = await self._transport.send("HEAD", path)
        if response.status_code not in (200, 404):
            raise make_http_error("Stat", response)
        return build_stat(path, response)

    async def _get_file(self, path: str) -> BlobFile:
        response = await self._transport.send("GET", path)
        if response.status_code != 200:
            raise make_http_error("Download", response)
        return BlobFile(stat=build_stat(path, response), content=response.content)

    async def _list_prefix(self, prefix: str = "", recursive: bool = False) -> list[str]:
        prefix = strip_leading_slashes(prefix)
        params = {"recursive": "true"} if recursive else None
        response = await self._transport.send("GET", LIST_PATH_PREFIX + prefix, params=params)
        if response.status_code != 200:
            raise make_http_error("List", response)
        return decode_path_list(response)

    async def _delete_file(self, path: str) -> None:
        response = await self._transport.send("DELETE", path)
        if response.status_code != 200:
            raise make_http_error("Delete", response)


__all__ = ["build_stat", "decode_path_list", "make_http_error"]
