"""Credential providers that attach blobstore ACL tokens to outgoing requests.

Every provider only fills in headers that are still missing from the request,
so when several providers are consulted the first one to set a header wins.
"""

from __future__ import annotations

import abc
import os
import threading
from collections.abc import Iterable

import httpx

from .utils import debug

READ_ACL_HEADER = "X-BlobStore-Read-Acl"
WRITE_ACL_HEADER = "X-BlobStore-Write-Acl"

DEFAULT_READ_ACL_ENVIRONMENT_VARIABLE = "BLOBSTORE_READ_ACL"
DEFAULT_WRITE_ACL_ENVIRONMENT_VARIABLE = "BLOBSTORE_WRITE_ACL"


def has_read_acl_header(request: httpx.Request) -> bool:
    return READ_ACL_HEADER in request.headers


def has_write_acl_header(request: httpx.Request) -> bool:
    return WRITE_ACL_HEADER in request.headers


class CredentialProvider(abc.ABC):
    """Something that can authorize a single outgoing request."""

    @abc.abstractmethod
    def authorize(self, request: httpx.Request) -> None:
        """Add the read and/or write ACL header to ``request`` if absent.

        Raising aborts the request.
        """
        ...


class DirectCredentialProvider(CredentialProvider):
    """Fixed pair of tokens, supplied by the caller."""

    def __init__(self, read_acl: str, write_acl: str) -> None:
        self._read_acl = read_acl
        self._write_acl = write_acl

    @property
    def read_acl(self) -> str:
        return self._read_acl

    @property
    def write_acl(self) -> str:
        return self._write_acl

    def authorize(self, request: httpx.Request) -> None:
        if not has_read_acl_header(request):
            request.headers[READ_ACL_HEADER] = self._read_acl
        if not has_write_acl_header(request):
            request.headers[WRITE_ACL_HEADER] = self._write_acl

    def __repr__(self) -> str:
        return f"{type(self).__name__}(read_acl=..., write_acl=...)"


class EnvironmentCredentialProvider(CredentialProvider):
    """Reads tokens from environment variables at request time.

    An unset variable leaves the matching header untouched; a variable that is
    set to the empty string is still applied.
    """

    def __init__(
        self,
        read_acl_environment_variable: str = DEFAULT_READ_ACL_ENVIRONMENT_VARIABLE,
        write_acl_environment_variable: str = DEFAULT_WRITE_ACL_ENVIRONMENT_VARIABLE,
    ) -> None:
        self._read_acl_environment_variable = read_acl_environment_variable
        self._write_acl_environment_variable = write_acl_environment_variable

    @property
    def read_acl_environment_variable(self) -> str:
        return self._read_acl_environment_variable

    @property
    def write_acl_environment_variable(self) -> str:
        return self._write_acl_environment_variable

    def authorize(self, request: httpx.Request) -> None:
        if not has_read_acl_header(request):
            acl = os.environ.get(self._read_acl_environment_variable)
            if acl is not None:
                request.headers[READ_ACL_HEADER] = acl
        if not has_write_acl_header(request):
            acl = os.environ.get(self._write_acl_environment_variable)
            if acl is not None:
                request.headers[WRITE_ACL_HEADER] = acl

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._read_acl_environment_variable!r}, "
            f"{self._write_acl_environment_variable!r})"
        )


class CredentialProviderChain(CredentialProvider):
    """Consults providers in order until both ACL headers are present.

    A provider that raises stops the chain and the error propagates. Running
    out of providers before both headers are set is not an error: the request
    goes out with whatever was collected and the service decides.
    """

    def __init__(self, providers: Iterable[CredentialProvider]) -> None:
        self._providers: tuple[CredentialProvider, ...] = tuple(providers)

    @property
    def providers(self) -> tuple[CredentialProvider, ...]:
        return self._providers

    def authorize(self, request: httpx.Request) -> None:
        for provider in self._providers:
            provider.authorize(request)
            if has_read_acl_header(request) and has_write_acl_header(request):
                return
        debug("credential chain exhausted without both ACL headers for", str(request.url))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._providers)!r})"


_default_chain: CredentialProviderChain | None = None
_default_chain_lock = threading.Lock()


def default_credential_provider_chain() -> CredentialProviderChain:
    """Return the process-wide default chain, building it on first use.

    Environment variables first, then an empty direct provider as the
    terminal fallback. Every call returns the same instance.
    """
    global _default_chain
    if _default_chain is None:
        with _default_chain_lock:
            if _default_chain is None:
                _default_chain = CredentialProviderChain(
                    [
                        EnvironmentCredentialProvider(
                            DEFAULT_READ_ACL_ENVIRONMENT_VARIABLE,
                            DEFAULT_WRITE_ACL_ENVIRONMENT_VARIABLE,
                        ),
                        DirectCredentialProvider("", ""),
                    ]
                )
    return _default_chain


__all__ = [
    "READ_ACL_HEADER",
    "WRITE_ACL_HEADER",
    "DEFAULT_READ_ACL_ENVIRONMENT_VARIABLE",
    "DEFAULT_WRITE_ACL_ENVIRONMENT_VARIABLE",
    "CredentialProvider",
    "DirectCredentialProvider",
    "EnvironmentCredentialProvider",
    "CredentialProviderChain",
    "default_credential_provider_chain",
    "has_read_acl_header",
    "has_write_acl_header",
]
