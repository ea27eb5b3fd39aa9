from __future__ import annotations


class BlobStoreError(Exception):
    """Base class for all blobstore client errors."""


class BlobStoreConfigError(BlobStoreError):
    """Malformed base URL, object path or configuration value."""


class BlobStoreUsageError(BlobStoreError):
    """A precondition failed before any request was made."""


class BlobStoreResponseError(BlobStoreError):
    """The service answered 200 with a body that could not be decoded."""


class BlobStoreHttpError(BlobStoreError):
    """The service answered with a status the operation does not accept."""

    def __init__(self, operation: str, status_code: int, body: str = "") -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        message = f"Blobstore {operation} Failed ({status_code})"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


__all__ = [
    "BlobStoreError",
    "BlobStoreConfigError",
    "BlobStoreUsageError",
    "BlobStoreResponseError",
    "BlobStoreHttpError",
]
