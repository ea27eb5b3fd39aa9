"""HTTP configuration for blobstore clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from ..errors import BlobStoreConfigError

DEFAULT_BASE_URL = "http://localhost:8080/"
DEFAULT_TIMEOUT = 30.0

BASE_URL_ENVIRONMENT_VARIABLE = "BLOBSTORE_URL"
TIMEOUT_ENVIRONMENT_VARIABLE = "BLOBSTORE_TIMEOUT"


def normalize_base_url(base_url: str) -> str:
    """Ensure base_url ends with a trailing slash so that relative paths resolve
    beneath the whole base path instead of replacing its last segment.

    Raises:
        BlobStoreConfigError: If base_url is not an absolute http(s) URL.
    """
    try:
        parts = urlsplit(base_url)
    except ValueError as e:
        raise BlobStoreConfigError(f"Invalid base URL {base_url!r}: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise BlobStoreConfigError(f"Invalid base URL {base_url!r}: expected http(s)://host/...")
    if not base_url.endswith("/"):
        base_url = base_url + "/"
    return base_url


@dataclass
class HTTPConfig:
    """Configuration for HTTP requests to the blobstore service."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    default_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_url = normalize_base_url(self.base_url)


def resolve_base_url(base_url: str | None) -> str:
    """Resolve base URL from argument or environment, falling back to the default."""
    return base_url or os.getenv(BASE_URL_ENVIRONMENT_VARIABLE) or DEFAULT_BASE_URL


def resolve_timeout(timeout: float | None) -> float:
    """Resolve timeout from argument or environment, falling back to the default."""
    if timeout is not None:
        return timeout
    raw = os.getenv(TIMEOUT_ENVIRONMENT_VARIABLE)
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise BlobStoreConfigError(
            f"Invalid {TIMEOUT_ENVIRONMENT_VARIABLE} value {raw!r}: expected seconds"
        ) from None


__all__ = [
    "HTTPConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "BASE_URL_ENVIRONMENT_VARIABLE",
    "TIMEOUT_ENVIRONMENT_VARIABLE",
    "normalize_base_url",
    "resolve_base_url",
    "resolve_timeout",
]
