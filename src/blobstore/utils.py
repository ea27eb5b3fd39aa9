from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin, urlsplit

from .errors import BlobStoreConfigError, BlobStoreUsageError

BLOB_URL_SCHEME = "blob"
LIST_PATH_PREFIX = "_dir/"
SNIFF_LENGTH = 512
CHUNK_SIZE = 64 * 1024

_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")


def debug(message: str, *args: Any) -> None:
    try:
        debug_env = os.getenv("DEBUG", "")
        if "blobstore" in debug_env:
            print(f"blobstore: {message}", *args)
    except Exception:
        pass


def strip_leading_slashes(path: str) -> str:
    return path.lstrip("/")


def route(base_url: str, path: str) -> str:
    """Resolve ``path`` beneath ``base_url``.

    Leading slashes are dropped from ``path`` so it never resolves against the
    host root. ``base_url`` is expected to already end in ``/``.
    """
    path = strip_leading_slashes(path)
    if _CONTROL_CHARACTERS.search(path) or _INVALID_ESCAPE.search(path):
        raise BlobStoreConfigError(f"Invalid object path {path!r}")
    try:
        urlsplit(path)
    except ValueError as e:
        raise BlobStoreConfigError(f"Invalid object path {path!r}: {e}") from e
    return urljoin(base_url, path)


def split_path(path: str) -> tuple[str, str]:
    """Split at the last ``/`` into (directory-with-trailing-slash, name)."""
    final_slash = path.rfind("/")
    if final_slash == -1:
        return "", path
    return path[: final_slash + 1], path[final_slash + 1 :]


def parse_content_length(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


@dataclass(frozen=True, slots=True)
class BlobParsedArg:
    """A command-line path argument split into scheme and object path."""

    scheme: str
    path: str

    @property
    def is_remote(self) -> bool:
        return self.scheme == BLOB_URL_SCHEME


def parse_blob_arg(arg: str) -> BlobParsedArg:
    """Classify ``arg`` as a remote object (``blob:`` scheme) or a local path.

    ``blob:/a/b``, ``blob:a/b`` and ``blob:///a/b`` all name the object
    ``a/b``. Anything else, including Windows drive letters, is local.

    Raises:
        BlobStoreUsageError: If ``arg`` cannot be parsed as a URI reference.
    """
    try:
        parts = urlsplit(arg)
    except ValueError as e:
        raise BlobStoreUsageError(f"Invalid path {arg!r}: {e}") from e
    if parts.scheme.lower() != BLOB_URL_SCHEME:
        return BlobParsedArg(scheme="", path=arg)
    path = parts.netloc + parts.path if parts.netloc else parts.path
    if parts.query:
        path = f"{path}?{parts.query}"
    if parts.fragment:
        path = f"{path}#{parts.fragment}"
    return BlobParsedArg(scheme=BLOB_URL_SCHEME, path=strip_leading_slashes(path))


class SupportsRead(Protocol):
    def read(self, size: int = -1) -> bytes:  # pragma: no cover - Protocol
        ...


BlobBody = bytes | bytearray | memoryview | str | SupportsRead | Iterable[bytes]


def iter_body(body: BlobBody, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield ``body`` as a sequence of byte chunks."""
    if isinstance(body, str):
        yield body.encode("utf-8")
        return
    if isinstance(body, (bytes, bytearray, memoryview)):
        yield bytes(body)
        return
    if hasattr(body, "read"):
        while True:
            chunk = body.read(chunk_size)  # type: ignore[union-attr]
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            yield bytes(chunk)
        return
    for chunk in body:  # type: ignore[union-attr]
        if chunk:
            yield bytes(chunk)


def as_content(body: BlobBody) -> bytes | Iterator[bytes]:
    """In-memory bodies as ``bytes``, anything else as a chunk iterator."""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    return iter_body(body)


def peek_body(body: BlobBody, size: int = SNIFF_LENGTH) -> tuple[bytes, bytes | Iterator[bytes]]:
    """Return up to ``size`` leading bytes of ``body`` and an equivalent body.

    In-memory bodies come back as ``bytes``. Streams are partially consumed, so
    the returned iterator replays the peeked bytes before the rest.
    """
    if isinstance(body, (str, bytes, bytearray, memoryview)):
        data = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        return data[:size], data

    chunks = iter_body(body)
    buffered: list[bytes] = []
    buffered_len = 0
    for chunk in chunks:
        buffered.append(chunk)
        buffered_len += len(chunk)
        if buffered_len >= size:
            break
    head = b"".join(buffered)

    def replay() -> Iterator[bytes]:
        if head:
            yield head
        yield from chunks

    return head[:size], replay()


__all__ = [
    "BLOB_URL_SCHEME",
    "LIST_PATH_PREFIX",
    "SNIFF_LENGTH",
    "BlobBody",
    "BlobParsedArg",
    "as_content",
    "debug",
    "iter_body",
    "parse_blob_arg",
    "parse_content_length",
    "peek_body",
    "route",
    "split_path",
    "strip_leading_slashes",
]
