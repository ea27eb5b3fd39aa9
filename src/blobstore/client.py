"""High level blobstore client: local file transfer, append, copy and existence checks.

Append is read, concatenate, re-upload. There is no lock and no
compare-and-swap, so two appenders racing on the same object can silently
drop one writer's data.
"""

from __future__ import annotations

import os
import sys
from os import PathLike
from types import TracebackType
from typing import BinaryIO

from .api_client import AsyncBlobStoreApiClient, BlobStoreApiClient
from .config import BlobStoreConfig
from .credentials import CredentialProvider
from .errors import BlobStoreUsageError
from .types import BlobFile, BlobFileStat
from .utils import BlobBody, BlobParsedArg, debug, iter_body, parse_blob_arg

NOTHING_TO_APPEND = "Nothing to append"
REMOTE_TO_REMOTE = "No support for copying files in the blobstore directly"
LOCAL_TO_LOCAL = "Must provide at least one blob:/ path to upload to or download from"
LOCAL_DESTINATION_EXISTS = "Destination file already exists on local machine; use --force to overwrite"
REMOTE_DESTINATION_EXISTS = "Destination file already exists on blobstore; use --force to overwrite"


def _read_all(stream: BlobBody) -> bytes:
    return b"".join(iter_body(stream))


def _write_local_file(dest: str | PathLike, content: bytes) -> None:
    dst = os.fspath(dest)
    os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
    with open(dst, "wb") as f:
        f.write(content)


def _local_exists(path: str | PathLike) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def _plan_copy(src: str, dst: str) -> tuple[BlobParsedArg, BlobParsedArg]:
    source = parse_blob_arg(src)
    destination = parse_blob_arg(dst)
    if source.is_remote and destination.is_remote:
        raise BlobStoreUsageError(REMOTE_TO_REMOTE)
    if not source.is_remote and not destination.is_remote:
        raise BlobStoreUsageError(LOCAL_TO_LOCAL)
    return source, destination


class BlobStoreClient:
    """Sync facade over BlobStoreApiClient.

    Remote paths passed to the ``*_file``/``append_*`` methods are object
    paths (``notes/a.txt``). ``copy`` and ``exists`` take references, where a
    ``blob:`` scheme marks the remote side and anything else is local.
    """

    def __init__(
        self,
        base_url: str | None = None,
        credential_provider: CredentialProvider | None = None,
        *,
        timeout: float | None = None,
        config: BlobStoreConfig | None = None,
        api_client: BlobStoreApiClient | None = None,
    ) -> None:
        if api_client is None:
            api_client = BlobStoreApiClient(
                base_url, credential_provider, timeout=timeout, config=config
            )
        self._api = api_client

    @property
    def api(self) -> BlobStoreApiClient:
        return self._api

    def upload_stream(self, path: str, stream: BlobBody, content_type: str = "") -> None:
        self._api.upload_stream(path, stream, content_type)

    def upload_file(self, path: str, source: str | PathLike, content_type: str = "") -> None:
        with open(source, "rb") as f:
            self._api.upload_stream(path, f, content_type)

    def get_file(self, path: str) -> BlobFile:
        return self._api.get_file(path)

    def get_file_contents(self, path: str) -> bytes:
        return self._api.get_file(path).content

    def download_file(self, path: str, dest: str | PathLike) -> None:
        """Write the object to ``dest``, creating parents and overwriting."""
        _write_local_file(dest, self.get_file_contents(path))

    def cat_file(self, path: str, out: BinaryIO | None = None) -> None:
        """Write the object's raw bytes to ``out`` (default: stdout).

        No trailing newline is added, so binary objects come through intact.
        """
        out = out if out is not None else sys.stdout.buffer
        out.write(self.get_file_contents(path))
        out.flush()

    def stat_file(self, path: str) -> BlobFileStat:
        return self._api.get_stat(path)

    def append_stream(self, path: str, stream: BlobBody) -> None:
        """Append ``stream`` to an existing object.

        Fails if the object does not exist; there is no create-on-append.
        """
        existing = self._api.get_file(path)
        content = existing.content + _read_all(stream)
        debug(f"append {path}: {len(existing.content)} -> {len(content)} bytes")
        self._api.upload_stream(path, content, existing.mime_type)

    def append_string(self, path: str, value: str) -> None:
        if not value:
            raise BlobStoreUsageError(NOTHING_TO_APPEND)
        self.append_stream(path, value.encode("utf-8"))

    def append_file(self, path: str, source: str | PathLike) -> None:
        with open(source, "rb") as f:
            self.append_stream(path, f)

    def list_prefix(self, prefix: str = "", recursive: bool = False) -> list[str]:
        return self._api.list_prefix(prefix, recursive)

    def delete_file(self, path: str) -> None:
        self._api.delete_file(path)

    def exists(self, ref: str) -> bool:
        arg = parse_blob_arg(ref)
        if arg.is_remote:
            return self._api.get_stat(arg.path).exists
        return _local_exists(arg.path)

    def copy(self, src: str, dst: str, force: bool = False, content_type: str = "") -> None:
        """Upload (local -> ``blob:``) or download (``blob:`` -> local).

        Unless ``force`` is set an existing destination is an error and
        nothing is transferred.
        """
        source, destination = _plan_copy(src, dst)
        if source.is_remote:
            if not force and _local_exists(destination.path):
                raise BlobStoreUsageError(LOCAL_DESTINATION_EXISTS)
            debug(f"download {source.path} -> {destination.path}")
            self.download_file(source.path, destination.path)
            return
        if not force and self._api.get_stat(destination.path).exists:
            raise BlobStoreUsageError(REMOTE_DESTINATION_EXISTS)
        debug(f"upload {source.path} -> {destination.path}")
        self.upload_file(destination.path, source.path, content_type)

    def close(self) -> None:
        self._api.close()

    def __enter__(self) -> BlobStoreClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncBlobStoreClient:
    """Async facade over AsyncBlobStoreApiClient; mirrors BlobStoreClient.

    Local file reads and writes are ordinary blocking I/O.
    """

    def __init__(
        self,
        base_url: str | None = None,
        credential_provider: CredentialProvider | None = None,
        *,
        timeout: float | None = None,
        config: BlobStoreConfig | None = None,
        api_client: AsyncBlobStoreApiClient | None = None,
    ) -> None:
        if api_client is None:
            api_client = AsyncBlobStoreApiClient(
                base_url, credential_provider, timeout=timeout, config=config
            )
        self._api = api_client

    @property
    def api(self) -> AsyncBlobStoreApiClient:
        return self._api

    async def upload_stream(self, path: str, stream: BlobBody, content_type: str = "") -> None:
        await self._api.upload_stream(path, stream, content_type)

    async def upload_file(self, path: str, source: str | PathLike, content_type: str = "") -> None:
        with open(source, "rb") as f:
            await self._api.upload_stream(path, f, content_type)

    async def get_file(self, path: str) -> BlobFile:
        return await self._api.get_file(path)

    async def get_file_contents(self, path: str) -> bytes:
        return (await self._api.get_file(path)).content

    async def download_file(self, path: str, dest: str | PathLike) -> None:
        _write_local_file(dest, await self.get_file_contents(path))

    async def cat_file(self, path: str, out: BinaryIO | None = None) -> None:
        content = await self.get_file_contents(path)
        out = out if out is not None else sys.stdout.buffer
        out.write(content)
        out.flush()

    async def stat_file(self, path: str) -> BlobFileStat:
        return await self._api.get_stat(path)

    async def append_stream(self, path: str, stream: BlobBody) -> None:
        existing = await self._api.get_file(path)
        content = existing.content + _read_all(stream)
        debug(f"append {path}: {len(existing.content)} -> {len(content)} bytes")
        await self._api.upload_stream(path, content, existing.mime_type)

    async def append_string(self, path: str, value: str) -> None:
        if not value:
            raise BlobStoreUsageError(NOTHING_TO_APPEND)
        await self.append_stream(path, value.encode("utf-8"))

    async def append_file(self, path: str, source: str | PathLike) -> None:
        with open(source, "rb") as f:
            await self.append_stream(path, f)

    async def list_prefix(self, prefix: str = "", recursive: bool = False) -> list[str]:
        return await self._api.list_prefix(prefix, recursive)

    async def delete_file(self, path: str) -> None:
        await self._api.delete_file(path)

    async def exists(self, ref: str) -> bool:
        arg = parse_blob_arg(ref)
        if arg.is_remote:
            return (await self._api.get_stat(arg.path)).exists
        return _local_exists(arg.path)

    async def copy(self, src: str, dst: str, force: bool = False, content_type: str = "") -> None:
        source, destination = _plan_copy(src, dst)
        if source.is_remote:
            if not force and _local_exists(destination.path):
                raise BlobStoreUsageError(LOCAL_DESTINATION_EXISTS)
            await self.download_file(source.path, destination.path)
            return
        if not force and (await self._api.get_stat(destination.path)).exists:
            raise BlobStoreUsageError(REMOTE_DESTINATION_EXISTS)
        await self.upload_file(destination.path, source.path, content_type)

    async def aclose(self) -> None:
        await self._api.aclose()

    async def __aenter__(self) -> AsyncBlobStoreClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


__all__ = ["BlobStoreClient", "AsyncBlobStoreClient"]
