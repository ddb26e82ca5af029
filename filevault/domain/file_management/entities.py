"""
File Management Entities

Domain entities for uploaded file records.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .value_objects import FileCategory, FileStatus


@dataclass
class FileRecord:
    """
    Entity representing the metadata of one stored blob.

    Manages the status lifecycle: uploading -> active -> deleted, with
    failed reachable only from uploading. Records are soft-deleted and
    never physically removed.
    """
    id: str
    owner_id: str
    related_entity_type: str
    related_entity_id: str
    original_name: str
    storage_key: str
    category: FileCategory
    mime_type: str
    size_bytes: int
    content_hash: str
    status: FileStatus
    created_at: datetime
    updated_at: datetime
    is_verified: bool = False
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    download_count: int = 0
    deleted_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        owner_id: str,
        original_name: str,
        storage_key: str,
        category: FileCategory,
        mime_type: str,
        size_bytes: int,
        content_hash: str,
        related_entity_type: Optional[str] = None,
        related_entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "FileRecord":
        """
        Factory method to create a new record in the uploading state.

        The entity association defaults to the owner's own user record.
        """
        now = datetime.utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            related_entity_type=related_entity_type or "user",
            related_entity_id=related_entity_id or owner_id,
            original_name=original_name,
            storage_key=storage_key,
            category=category,
            mime_type=mime_type,
            size_bytes=size_bytes,
            content_hash=content_hash,
            status=FileStatus.UPLOADING,
            created_at=now,
            updated_at=now,
            metadata=dict(metadata or {}),
        )

    def is_live(self) -> bool:
        """Check if the record is uploading or active and not soft-deleted."""
        return self.status.is_live() and self.deleted_at is None

    def _transition(self, target: FileStatus) -> None:
        if not self.status.can_transition_to(target):
            raise ValueError(
                f"Cannot move file {self.id} from {self.status.value} to {target.value}"
            )
        self.status = target
        self.updated_at = datetime.utcnow()

    def activate(self, related_entity_type: str, related_entity_id: str) -> None:
        """
        Promote to active and rebind to a business entity.

        Raises:
            ValueError: If the record is deleted or failed
        """
        self._transition(FileStatus.ACTIVE)
        self.related_entity_type = related_entity_type
        self.related_entity_id = related_entity_id

    def soft_delete(self, at: Optional[datetime] = None) -> None:
        self._transition(FileStatus.DELETED)
        self.deleted_at = at or self.updated_at

    def fail(self) -> None:
        self._transition(FileStatus.FAILED)

    def verify(self, verifier_id: str, verified: bool = True,
               at: Optional[datetime] = None) -> None:
        if self.status != FileStatus.ACTIVE or not self.is_live():
            raise ValueError(f"Only active files can be verified, got {self.status.value}")
        self.is_verified = verified
        self.verified_by = verifier_id
        self.verified_at = at or datetime.utcnow()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "related_entity_type": self.related_entity_type,
            "related_entity_id": self.related_entity_id,
            "original_name": self.original_name,
            "storage_key": self.storage_key,
            "category": self.category.value,
            "mime_type": self.mime_type,
            "size_bytes": self.size_bytes,
            "content_hash": self.content_hash,
            "status": self.status.value,
            "is_verified": self.is_verified,
            "verified_by": self.verified_by,
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
            "download_count": self.download_count,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "metadata": dict(self.metadata),
        }


@dataclass
class FileView:
    """A file record together with a time-limited retrieval URL."""
    record: FileRecord
    url: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["url"] = self.url
        return data


@dataclass
class FilePage:
    """One page of a file listing."""
    items: List[FileView]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "files": [item.to_dict() for item in self.items],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "total_pages": self.total_pages,
                "has_next_page": self.has_next_page,
                "has_prev_page": self.has_prev_page,
            },
        }
