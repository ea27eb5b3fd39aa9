"""Shared HTTP infrastructure for blobstore clients."""

from .clients import create_base_async_client, create_base_client
from .config import (
    BASE_URL_ENVIRONMENT_VARIABLE,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    TIMEOUT_ENVIRONMENT_VARIABLE,
    HTTPConfig,
    normalize_base_url,
    resolve_base_url,
    resolve_timeout,
)
from .iter_coroutine import iter_coroutine
from .transport import AsyncTransport, BaseTransport, BlockingTransport, RequestContent

__all__ = [
    "BASE_URL_ENVIRONMENT_VARIABLE",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "TIMEOUT_ENVIRONMENT_VARIABLE",
    "HTTPConfig",
    "normalize_base_url",
    "resolve_base_url",
    "resolve_timeout",
    "iter_coroutine",
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
    "RequestContent",
    "create_base_client",
    "create_base_async_client",
]
