"""Client library and CLI for a blobstore HTTP service."""

from .api_client import AsyncBlobStoreApiClient, BlobStoreApiClient
from .client import AsyncBlobStoreClient, BlobStoreClient
from .config import BlobStoreConfig
from .credentials import (
    READ_ACL_HEADER,
    WRITE_ACL_HEADER,
    CredentialProvider,
    CredentialProviderChain,
    DirectCredentialProvider,
    EnvironmentCredentialProvider,
    default_credential_provider_chain,
)
from .errors import (
    BlobStoreConfigError,
    BlobStoreError,
    BlobStoreHttpError,
    BlobStoreResponseError,
    BlobStoreUsageError,
)
from .sniff import sniff_content_type
from .types import BlobFile, BlobFileStat
from .utils import BlobParsedArg, parse_blob_arg

__version__ = "0.4.0"

__all__ = [
    # clients
    "BlobStoreApiClient",
    "AsyncBlobStoreApiClient",
    "BlobStoreClient",
    "AsyncBlobStoreClient",
    "BlobStoreConfig",
    # credentials
    "READ_ACL_HEADER",
    "WRITE_ACL_HEADER",
    "CredentialProvider",
    "CredentialProviderChain",
    "DirectCredentialProvider",
    "EnvironmentCredentialProvider",
    "default_credential_provider_chain",
    # errors
    "BlobStoreError",
    "BlobStoreConfigError",
    "BlobStoreHttpError",
    "BlobStoreResponseError",
    "BlobStoreUsageError",
    # types and helpers
    "BlobFile",
    "BlobFileStat",
    "BlobParsedArg",
    "parse_blob_arg",
    "sniff_content_type",
]
