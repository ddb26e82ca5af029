"""
Temporary Link Value Objects

Immutable value objects for link tokens, redemption input and results.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from filevault.domain.errors import QuotaExceededError

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2
_HEX_DIGITS = frozenset("0123456789abcdef")


class InvalidLinkTokenError(ValueError):
    """Raised when a link token is malformed."""
    pass


@dataclass(frozen=True)
class LinkToken:
    """
    Value object representing a temporary link token.

    Tokens are 32 random bytes from ``secrets`` rendered as 64 lowercase
    hex characters. Anything else is rejected before touching the store.
    """
    value: str

    def __post_init__(self):
        if not self.is_well_formed(self.value):
            raise InvalidLinkTokenError("Invalid link token format")

    @staticmethod
    def is_well_formed(value) -> bool:
        return (
            isinstance(value, str)
            and len(value) == TOKEN_LENGTH
            and all(c in _HEX_DIGITS for c in value)
        )

    @classmethod
    def generate(cls) -> "LinkToken":
        """
        Generate a new cryptographically secure token.

        Returns:
            New LinkToken instance with generated value
        """
        return cls(secrets.token_hex(TOKEN_BYTES))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClientContext:
    """Information about the client redeeming a link."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class RedemptionTarget:
    """File coordinates returned by a successful atomic redemption."""
    file_id: str
    storage_key: str
    original_name: str
    mime_type: str
    size_bytes: int


@dataclass(frozen=True)
class IssuedLink:
    """A freshly minted link. The token is only ever shown here."""
    link_id: str
    token: str
    url: str
    expires_at: datetime
    file_name: str

    def to_dict(self) -> dict:
        return {
            "link_id": self.link_id,
            "token": self.token,
            "url": self.url,
            "expires_at": self.expires_at.isoformat(),
            "file_name": self.file_name,
        }


@dataclass
class DownloadHandle:
    """
    Open read stream for a redeemed link.

    The caller owns the stream and must close it; usable as a context
    manager.
    """
    stream: BinaryIO
    file_name: str
    mime_type: str
    size_bytes: int

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "DownloadHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@dataclass(frozen=True)
class LinkStats:
    """One row of the link statistics listing."""
    link_id: str
    file_id: str
    file_name: str
    file_category: str
    created_by: str
    created_at: datetime
    expires_at: datetime
    is_used: bool
    used_at: Optional[datetime]
    used_by_ip: Optional[str]
    is_expired: bool

    def to_dict(self) -> dict:
        return {
            "link_id": self.link_id,
            "file_id": self.file_id,
            "file_name": self.file_name,
            "file_category": self.file_category,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "is_used": self.is_used,
            "used_at": self.used_at.isoformat() if self.used_at else None,
            "used_by_ip": self.used_by_ip,
            "is_expired": self.is_expired,
        }


@dataclass(frozen=True)
class LinkCeilings:
    """
    Active-link ceilings a repository enforces while inserting a link.

    Counts are of unexpired, unused links; a new link is admitted only
    while both counts are strictly below their ceiling.
    """
    per_owner: int
    per_file: int

    def check(self, owner_active: int, file_active: int) -> None:
        """
        Raise for the first ceiling reached, the owner's before the file's.

        Raises:
            QuotaExceededError: TOO_MANY_ACTIVE_LINKS or TOO_MANY_FILE_LINKS
        """
        if owner_active >= self.per_owner:
            raise QuotaExceededError(
                f"Too many active links: at most {self.per_owner}",
                code="TOO_MANY_ACTIVE_LINKS",
                details={"active": owner_active, "max": self.per_owner},
            )
        if file_active >= self.per_file:
            raise QuotaExceededError(
                f"Too many active links for this file: at most {self.per_file}",
                code="TOO_MANY_FILE_LINKS",
                details={"active": file_active, "max": self.per_file},
            )
