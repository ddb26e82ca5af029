"""
Domain Events

Facts raised by the file and link managers after a state change has been
committed. Handlers (see infrastructure/event_handlers) turn them into
audit logs; the managers themselves never depend on a handler.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: File, link or related-entity ID the event is about
        occurred_at: UTC time the change was committed
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-friendly form, tagged with the event class name."""
        data = {"event_type": type(self).__name__}
        for f in fields(self):
            data[f.name] = _serialize(getattr(self, f.name))
        return data


# =============================================================================
# File lifecycle
# =============================================================================

@dataclass(frozen=True)
class FileUploadedEvent(DomainEvent):
    """A new blob was stored and its record inserted (aggregate: file ID)."""
    owner_id: str
    category: str
    size_bytes: int


@dataclass(frozen=True)
class DuplicateUploadDetectedEvent(DomainEvent):
    """
    An upload resolved to an existing live record.

    aggregate_id is the surviving file; content_hash is the SHA-256 that
    matched.
    """
    owner_id: str
    content_hash: str


@dataclass(frozen=True)
class FilesActivatedEvent(DomainEvent):
    """
    A batch of uploads was bound to a business entity.

    aggregate_id is the related entity's ID, not a file ID.
    """
    owner_id: str
    related_entity_type: str
    file_ids: Tuple[str, ...]


@dataclass(frozen=True)
class FileDeletedEvent(DomainEvent):
    """
    A record was soft-deleted.

    Attributes:
        deleted_by: Requesting principal, or ``system:cleanup``
        reason: ``requested``, ``abandoned`` or ``duplicate``
        blob_removed: False when the best-effort blob delete failed and
            the object is now orphaned in the content store
    """
    deleted_by: str
    reason: str
    blob_removed: bool


@dataclass(frozen=True)
class FileVerifiedEvent(DomainEvent):
    verified_by: str
    verified: bool


# =============================================================================
# Temporary links
# =============================================================================

@dataclass(frozen=True)
class TempLinkIssuedEvent(DomainEvent):
    """A link was minted (aggregate: link ID). Never carries the token."""
    file_id: str
    created_by: str
    expires_at: datetime


@dataclass(frozen=True)
class TempLinkRedeemedEvent(DomainEvent):
    """A link was consumed (aggregate: file ID)."""
    client_ip: Optional[str]


@dataclass(frozen=True)
class TempLinksSweptEvent(DomainEvent):
    deleted_count: int
