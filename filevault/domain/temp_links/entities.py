"""
Temporary Link Entities

Domain entity for single-use, time-bounded download links.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .value_objects import LinkToken


@dataclass
class TempLink:
    """
    Entity representing one temporary download link.

    A link is active while it is unexpired and unused. Expiry is derived
    from the clock; only redemption mutates the row.
    """
    id: str
    file_id: str
    token: str
    created_by: str
    expires_at: datetime
    created_at: datetime
    is_used: bool = False
    used_at: Optional[datetime] = None
    used_by_ip: Optional[str] = None

    @classmethod
    def create(cls, file_id: str, created_by: str, expiry_hours: int) -> "TempLink":
        """
        Factory method to mint a new link with a fresh token.

        Args:
            file_id: File the link grants access to
            created_by: Principal issuing the link
            expiry_hours: Lifetime in hours

        Returns:
            New TempLink instance
        """
        now = datetime.utcnow()
        return cls(
            id=str(uuid.uuid4()),
            file_id=file_id,
            token=LinkToken.generate().value,
            created_by=created_by,
            expires_at=now + timedelta(hours=expiry_hours),
            created_at=now,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return not self.is_used and not self.is_expired(now)

    def mark_used(self, client_ip: Optional[str], at: Optional[datetime] = None) -> None:
        """
        Consume the link.

        Raises:
            ValueError: If the link is no longer active
        """
        at = at or datetime.utcnow()
        if not self.is_active(at):
            raise ValueError(f"Link {self.id} is expired or already used")
        self.is_used = True
        self.used_at = at
        self.used_by_ip = client_ip

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization. The token is omitted."""
        return {
            "id": self.id,
            "file_id": self.file_id,
            "created_by": self.created_by,
            "expires_at": self.expires_at.isoformat(),
            "created_at": self.created_at.isoformat(),
            "is_used": self.is_used,
            "used_at": self.used_at.isoformat() if self.used_at else None,
            "used_by_ip": self.used_by_ip,
        }
