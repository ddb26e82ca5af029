"""
File Management Repositories

Repository interface for file metadata persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .entities import FileRecord
from .value_objects import FileCategory


class IFileRecordRepository(ABC):
    """
    Abstract repository interface for file metadata persistence.

    Implementations must make every write atomic and must raise
    StorageError for faults of the underlying store.
    """

    @abstractmethod
    def add(self, record: FileRecord) -> FileRecord:
        """
        Insert a new record.

        Args:
            record: FileRecord to persist

        Returns:
            The stored record

        Raises:
            DuplicateFileError: If a live record with the same owner,
                content hash and category already exists
        """
        pass

    @abstractmethod
    def find_live_by_id(self, file_id: str) -> Optional[FileRecord]:
        """
        Retrieve a live record by ID.

        Args:
            file_id: File identifier

        Returns:
            FileRecord if found and live, None otherwise
        """
        pass

    @abstractmethod
    def find_live_duplicate(
        self, owner_id: str, content_hash: str, category: FileCategory
    ) -> Optional[FileRecord]:
        """Return the earliest live record with the same content, if any."""
        pass

    @abstractmethod
    def list_live(
        self,
        owner_id: str,
        category: Optional[FileCategory],
        offset: int,
        limit: int,
    ) -> Tuple[List[FileRecord], int]:
        """
        List live records of an owner, newest first.

        Returns:
            Tuple of (records on this page, total matching records)
        """
        pass

    @abstractmethod
    def increment_download_count(self, file_id: str) -> None:
        """Atomically add one to the download counter."""
        pass

    @abstractmethod
    def soft_delete(self, file_id: str, at: datetime) -> Optional[FileRecord]:
        """
        Mark a live record deleted.

        Returns:
            The updated record, or None when the record was not live
        """
        pass

    @abstractmethod
    def activate_owned(
        self,
        file_ids: Sequence[str],
        owner_id: str,
        related_entity_type: str,
        related_entity_id: str,
        at: datetime,
    ) -> List[FileRecord]:
        """
        Activate a batch of live records owned by ``owner_id``.

        All-or-nothing: either every requested record is updated or none.

        Raises:
            FileSetMismatchError: If any ID is missing, not live or owned
                by someone else
        """
        pass

    @abstractmethod
    def verify(
        self, file_id: str, verified: bool, verifier_id: str, at: datetime
    ) -> Optional[FileRecord]:
        """Set the verification flag on a live active record, or return None."""
        pass

    @abstractmethod
    def find_abandoned_uploads(self, cutoff: datetime) -> List[FileRecord]:
        """Live records still uploading that were created before ``cutoff``."""
        pass

    @abstractmethod
    def find_duplicate_live_records(self) -> List[FileRecord]:
        """
        Live records that are not the keeper of their duplicate group.

        Within each (owner, content hash, category) group the earliest
        created record is kept, ties broken by the smallest ID.
        """
        pass

    @abstractmethod
    def total_live_size(self, owner_id: str) -> int:
        """Sum of size_bytes over the owner's live records."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        pass
