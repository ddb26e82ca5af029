"""
Temporary Link Repositories

Repository interface for temporary link persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import TempLink
from .value_objects import LinkCeilings, LinkStats, RedemptionTarget


class ITempLinkRepository(ABC):
    """Abstract repository interface for temporary link persistence."""

    @abstractmethod
    def add(self, link: TempLink, ceilings: Optional[LinkCeilings] = None) -> TempLink:
        """
        Insert a new link.

        With ``ceilings`` the active-link counts for the link's creator and
        file are taken in the same transaction as the insert, so concurrent
        issuers can never push either count past its ceiling.

        Args:
            link: TempLink to persist
            ceilings: Active-link ceilings to enforce, or None for none

        Returns:
            The stored link

        Raises:
            QuotaExceededError: If a ceiling is reached; nothing is inserted
        """
        pass

    @abstractmethod
    def redeem(
        self, token: str, now: datetime, client_ip: Optional[str]
    ) -> Optional[RedemptionTarget]:
        """
        Atomically consume a link and count the download.

        Marks the link used only if it matches the token, has not expired,
        has not been used and points at a live file. In the same
        transaction the file's download counter is incremented.

        Args:
            token: Link token
            now: Current time
            client_ip: Address recorded on the link

        Returns:
            RedemptionTarget if this call consumed the link, None otherwise
        """
        pass

    @abstractmethod
    def list_stats(self, owner_id: Optional[str], now: datetime) -> List[LinkStats]:
        """
        Links joined with their file, newest first.

        Args:
            owner_id: Restrict to links created by this owner; None for all
            now: Reference time for the derived ``is_expired`` flag
        """
        pass

    @abstractmethod
    def delete_expired_or_used(self, now: datetime) -> int:
        """
        Physically delete expired or used links.

        Returns:
            Number of deleted rows
        """
        pass

    @abstractmethod
    def delete_owned(self, link_id: str, owner_id: str) -> bool:
        """
        Delete one link created by ``owner_id``.

        Returns:
            True if a row was deleted, False otherwise
        """
        pass
