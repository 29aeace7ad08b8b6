class BlobStoreError(Exception):
    """Base exception for document storage errors."""


class BlobNotFoundError(BlobStoreError):
    """Raised when no document exists for a content key."""


class InvalidContentKeyError(BlobStoreError):
    """Raised when a content key resolves outside the storage root."""
