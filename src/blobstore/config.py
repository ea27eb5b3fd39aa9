"""Client configuration, built once at startup and handed to clients."""

from __future__ import annotations

from dataclasses import dataclass, field

from ._http.config import HTTPConfig, resolve_base_url, resolve_timeout
from .credentials import CredentialProvider, default_credential_provider_chain


@dataclass
class BlobStoreConfig(HTTPConfig):
    """Where the service lives, how long to wait for it, and who we are.

    ``credential_provider`` defaults to the shared default chain.
    """

    credential_provider: CredentialProvider = field(
        default_factory=default_credential_provider_chain
    )

    @classmethod
    def from_env(
        cls,
        base_url: str | None = None,
        timeout: float | None = None,
        credential_provider: CredentialProvider | None = None,
    ) -> BlobStoreConfig:
        """Build a config, filling unset values from BLOBSTORE_URL / BLOBSTORE_TIMEOUT."""
        return cls(
            base_url=resolve_base_url(base_url),
            timeout=resolve_timeout(timeout),
            credential_provider=credential_provider or default_credential_provider_chain(),
        )


__all__ = ["BlobStoreConfig"]
