from abc import ABC, abstractmethod


class BaseBlobStore(ABC):
    """Contract for durable document storage."""

    @abstractmethod
    def put(self, owner_id: str, data: bytes, filename: str, content_type: str) -> str:
        """Store a document and return its content key.

        Repeated calls with the same bytes may return different keys.
        """

    @abstractmethod
    def get(self, content_key: str) -> bytes:
        """Read a stored document.

        Raises:
            BlobNotFoundError: if no document is stored under the key.
        """
