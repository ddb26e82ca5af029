"""
File Management Value Objects

Immutable value objects for file status, categories, upload input and
pagination.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional


class FileStatus(Enum):
    """File status enumeration."""
    UPLOADING = "uploading"
    ACTIVE = "active"
    DELETED = "deleted"
    FAILED = "failed"

    def is_live(self) -> bool:
        """Check if status counts as live (uploading or active)."""
        return self in (FileStatus.UPLOADING, FileStatus.ACTIVE)

    def is_terminal(self) -> bool:
        """Check if status is terminal (deleted or failed)."""
        return self in (FileStatus.DELETED, FileStatus.FAILED)

    def can_transition_to(self, target: "FileStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: Dict[FileStatus, FrozenSet[FileStatus]] = {
    FileStatus.UPLOADING: frozenset(
        {FileStatus.ACTIVE, FileStatus.DELETED, FileStatus.FAILED}
    ),
    FileStatus.ACTIVE: frozenset({FileStatus.ACTIVE, FileStatus.DELETED}),
    FileStatus.DELETED: frozenset(),
    FileStatus.FAILED: frozenset(),
}

LIVE_STATUSES = (FileStatus.UPLOADING, FileStatus.ACTIVE)


class FileCategory(Enum):
    """Semantic file category."""
    DOCUMENT = "document"
    PASSPORT = "passport"
    PHOTO_3X4 = "photo_3x4"
    AVATAR = "avatar"
    CERTIFICATE = "certificate"
    IMAGE = "image"

    @classmethod
    def parse(cls, value) -> Optional["FileCategory"]:
        """Return the matching category, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class RelatedEntityType(Enum):
    """Business objects a file can be bound to."""
    USER = "user"
    APPLICATION = "application"
    PROFILE = "profile"
    DOCUMENT = "document"

    @classmethod
    def parse(cls, value) -> Optional["RelatedEntityType"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ContentHash:
    """SHA-256 digest of a file's raw bytes, hex encoded."""
    value: str

    def __post_init__(self):
        if len(self.value) != 64 or any(c not in "0123456789abcdef" for c in self.value):
            raise ValueError(f"Invalid content hash: {self.value!r}")

    @classmethod
    def of(cls, data: bytes) -> "ContentHash":
        return cls(hashlib.sha256(data).hexdigest())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UploadItem:
    """
    One binary item of an upload request.

    Attributes:
        field_name: Form field the item was posted under (e.g. "avatar")
        original_name: Client-side file name
        content: Raw bytes
        mime_type: Declared content type
    """
    field_name: str
    original_name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadOptions:
    """Declared hints shared by every item of an upload request."""
    category: Optional[str] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    """
    Clamped pagination parameters.

    Out-of-range input is clamped rather than rejected.
    """
    page: int
    limit: int

    @classmethod
    def clamp(cls, page, limit, default_limit: int, max_limit: int) -> "PageRequest":
        page_num = _to_int(page, 1)
        limit_num = _to_int(limit, default_limit)
        return cls(
            page=max(1, page_num),
            limit=min(max_limit, max(1, limit_num)),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(value, fallback: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True)
class AcceptedUpload:
    """An upload item that resolved to a live file record."""
    file_id: str
    original_name: str
    storage_key: str
    category: str
    status: str
    size_bytes: int
    mime_type: str
    url: Optional[str] = None
    duplicate: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.file_id,
            "original_name": self.original_name,
            "storage_key": self.storage_key,
            "category": self.category,
            "status": self.status,
            "size_bytes": self.size_bytes,
            "mime_type": self.mime_type,
            "url": self.url,
            "duplicate": self.duplicate,
        }


@dataclass(frozen=True)
class RejectedUpload:
    """An upload item that failed, with the reason."""
    original_name: str
    code: str
    error: str

    def to_dict(self) -> dict:
        return {"original_name": self.original_name, "code": self.code, "error": self.error}


@dataclass
class UploadResult:
    accepted: list = field(default_factory=list)
    rejected: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "accepted": [item.to_dict() for item in self.accepted],
            "rejected": [item.to_dict() for item in self.rejected],
        }


@dataclass
class CleanupReport:
    """Outcome of an age-based or duplicate cleanup pass."""
    deleted: list = field(default_factory=list)
    errors: list = field(default_factory=list)
    total: int = 0

    def to_dict(self) -> dict:
        return {"deleted": list(self.deleted), "errors": list(self.errors), "total": self.total}
