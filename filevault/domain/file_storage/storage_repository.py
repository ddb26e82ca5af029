"""
Content Store Interface

Abstract interface for the object store holding raw file bytes.
The managers depend only on this contract; the local filesystem and
Google Cloud Storage adapters live in the infrastructure layer and are
chosen at bootstrap.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Dict, Optional


@dataclass(frozen=True)
class PutResult:
    """Outcome of a successful write."""
    etag: str


class IContentStore(ABC):
    """
    Contract for blob storage operations.

    Contract Guarantees:
    - Keys are opaque strings with "/" separators
    - Faults are raised as StorageError wrapping the client's exception
    - delete() succeeds when the key does not exist
    - exists() and health_check() never raise

    Thread Safety:
    - Implementations must be safe for concurrent use by request threads
    """

    @abstractmethod
    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> PutResult:
        """
        Write a blob, overwriting any existing one.

        Args:
            key: Storage key
            data: Raw bytes
            content_type: MIME type recorded with the blob
            tags: Small string metadata stored alongside the blob

        Returns:
            PutResult with the store's ETag

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_read_stream(self, key: str) -> BinaryIO:
        """
        Open a read stream. The caller must close it.

        Raises:
            StorageError: If the blob is missing or the store is unavailable
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete a blob. Deleting a missing key is not an error.

        Raises:
            StorageError: If the store is unavailable
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def presigned_url(self, key: str, ttl_seconds: int) -> str:
        """
        Build a time-limited retrieval URL for a blob.

        Args:
            key: Storage key
            ttl_seconds: URL lifetime in seconds

        Returns:
            URL string

        Raises:
            StorageError: If the URL cannot be signed
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Return True if the store is reachable."""
        pass
