"""
Temporary Link Services

Domain service issuing single-use download links and redeeming them
exactly once under concurrent access.
"""

import logging
from datetime import datetime
from typing import List, Optional

from filevault.config.settings import TempLinkLimits
from filevault.domain.access import AccessPolicy
from filevault.domain.errors import (
    LinkExpiredOrUsedError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from filevault.domain.events import (
    TempLinkIssuedEvent,
    TempLinkRedeemedEvent,
    TempLinksSweptEvent,
)
from filevault.domain.file_management.repositories import IFileRecordRepository
from filevault.domain.file_storage.storage_repository import IContentStore

from .entities import TempLink
from .repositories import ITempLinkRepository
from .value_objects import (
    ClientContext,
    DownloadHandle,
    IssuedLink,
    LinkCeilings,
    LinkStats,
    LinkToken,
)

logger = logging.getLogger(__name__)


class TempLinkManager:
    """
    Domain service for temporary download links.

    Exactly-once consumption rests entirely on the repository's
    conditional update; the manager itself holds no state.
    """

    def __init__(
        self,
        link_repository: ITempLinkRepository,
        file_repository: IFileRecordRepository,
        content_store: IContentStore,
        access_policy: Optional[AccessPolicy] = None,
        limits: Optional[TempLinkLimits] = None,
        event_publisher=None,
    ):
        """
        Initialize TempLinkManager.

        Args:
            link_repository: Repository for link persistence
            file_repository: Repository used to resolve target files
            content_store: Blob store the redeemed stream is read from
            access_policy: Capability predicate for foreign resources
            limits: Expiry bounds and active-link ceilings
            event_publisher: Optional EventPublisher for domain events
        """
        self.link_repo = link_repository
        self.file_repo = file_repository
        self.content_store = content_store
        self.access_policy = access_policy or AccessPolicy()
        self.limits = limits or TempLinkLimits()
        self.event_publisher = event_publisher

    def generate_link(
        self,
        file_id: str,
        owner_id: str,
        role: Optional[str],
        expiry_hours=None,
    ) -> IssuedLink:
        """
        Issue a new single-use link for a live file.

        Checks run in order: file exists, access, expiry bounds, owner
        ceiling, file ceiling. The ceilings are checked by the repository in
        the same transaction as the insert. The file record itself is never
        modified.

        Args:
            file_id: Target file
            owner_id: Issuing principal
            role: Issuing principal's role
            expiry_hours: Link lifetime in hours (default from settings)

        Returns:
            IssuedLink carrying the token and its public URL

        Raises:
            NotFoundError: If the file is not live
            PermissionDeniedError: If the requester may not access the file
            ValidationError: If expiry_hours is out of bounds
            QuotaExceededError: If an active-link ceiling is reached
        """
        record = self.file_repo.find_live_by_id(file_id) if file_id else None
        if record is None:
            raise NotFoundError("File not found", code="FILE_NOT_FOUND")

        if not self.access_policy.can_access(record.owner_id, owner_id, role):
            raise PermissionDeniedError("You are not allowed to share this file")

        hours = self._resolve_expiry(expiry_hours)

        ceilings = LinkCeilings(
            per_owner=self.limits.max_active_links_per_owner,
            per_file=self.limits.max_active_links_per_file,
        )
        link = self.link_repo.add(TempLink.create(record.id, owner_id, hours), ceilings)

        logger.info(
            f"Issued temp link {link.id} for file {record.id} by {owner_id}, "
            f"expires {link.expires_at.isoformat()}"
        )
        self._publish(TempLinkIssuedEvent(
            aggregate_id=link.id,
            occurred_at=link.created_at,
            file_id=record.id,
            created_by=owner_id,
            expires_at=link.expires_at,
        ))
        return IssuedLink(
            link_id=link.id,
            token=link.token,
            url=f"{self.limits.base_url.rstrip('/')}/{link.token}",
            expires_at=link.expires_at,
            file_name=record.original_name,
        )

    def _resolve_expiry(self, expiry_hours) -> int:
        if expiry_hours is None:
            return self.limits.default_expiry_hours

        hours = None
        if isinstance(expiry_hours, int) and not isinstance(expiry_hours, bool):
            hours = expiry_hours
        elif isinstance(expiry_hours, str) and expiry_hours.strip().isdigit():
            hours = int(expiry_hours.strip())

        if hours is None or not (
            self.limits.min_expiry_hours <= hours <= self.limits.max_expiry_hours
        ):
            raise ValidationError(
                f"Expiry must be an integer between {self.limits.min_expiry_hours} "
                f"and {self.limits.max_expiry_hours} hours",
                code="INVALID_EXPIRY",
                details={
                    "min_hours": self.limits.min_expiry_hours,
                    "max_hours": self.limits.max_expiry_hours,
                },
            )
        return hours

    def redeem_link(
        self, token: str, client_context: Optional[ClientContext] = None
    ) -> DownloadHandle:
        """
        Consume a link and open the file for reading.

        Consumption is committed before the stream is opened: if the store
        fails afterwards the link stays used.

        Args:
            token: Link token
            client_context: Client information recorded on the link

        Returns:
            DownloadHandle; the caller must close its stream

        Raises:
            ValidationError: If the token is malformed
            LinkExpiredOrUsedError: If the link does not exist, expired, was
                used or its file is no longer live
            StorageError: If the blob cannot be opened
        """
        if not LinkToken.is_well_formed(token):
            raise ValidationError("Invalid link token format", code="INVALID_TOKEN")

        client_context = client_context or ClientContext()
        target = self.link_repo.redeem(token, datetime.utcnow(), client_context.ip_address)
        if target is None:
            raise LinkExpiredOrUsedError()

        try:
            stream = self.content_store.get_read_stream(target.storage_key)
        except StorageError as e:
            logger.error(
                f"Temp link for file {target.file_id} consumed but blob could not be opened: "
                f"{e.message}"
            )
            raise

        logger.info(f"Temp link redeemed for file {target.file_id} from {client_context.ip_address}")
        self._publish(TempLinkRedeemedEvent(
            aggregate_id=target.file_id,
            occurred_at=datetime.utcnow(),
            client_ip=client_context.ip_address,
        ))
        return DownloadHandle(
            stream=stream,
            file_name=target.original_name,
            mime_type=target.mime_type,
            size_bytes=target.size_bytes,
        )

    def list_stats(self, owner_id: str, role: Optional[str]) -> List[LinkStats]:
        """
        List links with their file and derived expiry flag.

        Elevated roles see every link; everyone else sees their own.
        """
        scope = None if self.access_policy.can_act_on_foreign_resource(role) else owner_id
        return self.link_repo.list_stats(scope, datetime.utcnow())

    def sweep_expired(self) -> int:
        """
        Delete expired and used links.

        Returns:
            Number of deleted links
        """
        now = datetime.utcnow()
        deleted = self.link_repo.delete_expired_or_used(now)
        logger.info(f"Swept {deleted} expired or used temp link(s)")
        self._publish(TempLinksSweptEvent(
            aggregate_id="temp_links",
            occurred_at=now,
            deleted_count=deleted,
        ))
        return deleted

    def delete_link(self, link_id: str, owner_id: str) -> None:
        """
        Delete one of the requester's links.

        Raises:
            NotFoundError: If the link does not exist or belongs to someone else
        """
        if not link_id or not self.link_repo.delete_owned(link_id, owner_id):
            raise NotFoundError("Temporary link not found", code="LINK_NOT_FOUND")
        logger.info(f"Temp link {link_id} deleted by {owner_id}")

    def _publish(self, event) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
