"""
File Management Services

Domain service coordinating the upload, listing, activation, verification
and cleanup of file records and their blobs.
"""

import base64
import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from filevault.config.settings import CleanupSettings, FileLimits, PaginationSettings
from filevault.domain.access import AccessPolicy
from filevault.domain.errors import (
    DuplicateFileError,
    FileVaultError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    ValidationError,
)
from filevault.domain.events import (
    DuplicateUploadDetectedEvent,
    FileDeletedEvent,
    FilesActivatedEvent,
    FileUploadedEvent,
    FileVerifiedEvent,
)
from filevault.domain.file_storage.storage_repository import IContentStore

from .classifier import classify, file_extension, has_extension, is_allowed_mime_type
from .entities import FilePage, FileRecord, FileView
from .repositories import IFileRecordRepository
from .value_objects import (
    AcceptedUpload,
    CleanupReport,
    ContentHash,
    FileCategory,
    PageRequest,
    RejectedUpload,
    RelatedEntityType,
    UploadItem,
    UploadOptions,
    UploadResult,
)

logger = logging.getLogger(__name__)


class FileLifecycleManager:
    """
    Domain service for managing uploaded files.

    Holds no mutable state of its own: every invariant that must survive
    concurrent requests is delegated to the metadata repository.
    """

    def __init__(
        self,
        file_repository: IFileRecordRepository,
        content_store: IContentStore,
        access_policy: Optional[AccessPolicy] = None,
        limits: Optional[FileLimits] = None,
        pagination: Optional[PaginationSettings] = None,
        cleanup: Optional[CleanupSettings] = None,
        event_publisher=None,
    ):
        """
        Initialize FileLifecycleManager.

        Args:
            file_repository: Repository for file metadata persistence
            content_store: Blob store client
            access_policy: Capability predicate for foreign resources
            limits: Upload limits
            pagination: Listing page sizes
            cleanup: Abandoned-upload age window
            event_publisher: Optional EventPublisher for domain events
        """
        self.file_repo = file_repository
        self.content_store = content_store
        self.access_policy = access_policy or AccessPolicy()
        self.limits = limits or FileLimits()
        self.pagination = pagination or PaginationSettings()
        self.cleanup = cleanup or CleanupSettings()
        self.event_publisher = event_publisher

    # ========================================================================
    # Upload
    # ========================================================================

    def upload_files(
        self,
        items: Sequence[UploadItem],
        options: Optional[UploadOptions],
        owner_id: str,
    ) -> UploadResult:
        """
        Store a batch of uploaded items.

        The whole call is validated before anything is written. After that
        each item succeeds or fails on its own; a failed item never stops
        the rest of the batch.

        Args:
            items: Upload items
            options: Category override and entity association hints
            owner_id: Uploading principal

        Returns:
            UploadResult with accepted and rejected items

        Raises:
            ValidationError: If the request as a whole is invalid
        """
        options = options or UploadOptions()
        _require_non_blank(owner_id, "owner_id", "INVALID_OWNER")

        if not items:
            raise ValidationError("No files provided", code="NO_FILES")
        if len(items) > self.limits.max_files_per_upload:
            raise ValidationError(
                f"Too many files: at most {self.limits.max_files_per_upload} per upload",
                code="TOO_MANY_FILES",
                details={"max_files": self.limits.max_files_per_upload, "received": len(items)},
            )

        category_override = None
        if options.category is not None:
            category_override = FileCategory.parse(options.category)
            if category_override is None:
                raise ValidationError(
                    f"Invalid category: {options.category}", code="INVALID_CATEGORY"
                )

        entity_type = None
        if options.related_entity_type is not None:
            parsed = RelatedEntityType.parse(options.related_entity_type)
            if parsed is None:
                raise ValidationError(
                    f"Invalid related entity type: {options.related_entity_type}",
                    code="INVALID_ENTITY_TYPE",
                )
            entity_type = parsed.value

        entity_id = None
        if options.related_entity_id is not None:
            entity_id = _require_non_blank(
                options.related_entity_id, "related_entity_id", "INVALID_ENTITY_ID"
            )

        result = UploadResult()
        for item in items:
            name = getattr(item, "original_name", None) or ""
            try:
                accepted = self._upload_one(
                    item, owner_id, category_override, entity_type, entity_id
                )
                result.accepted.append(accepted)
            except FileVaultError as e:
                logger.warning(f"Upload of {name!r} for {owner_id} rejected: [{e.code}] {e.message}")
                result.rejected.append(
                    RejectedUpload(original_name=name, code=e.code, error=e.message)
                )
            except Exception as e:
                # One item's failure never aborts the rest of the batch
                logger.error(f"Upload of {name!r} for {owner_id} failed: {e}", exc_info=True)
                result.rejected.append(
                    RejectedUpload(original_name=name, code="UPLOAD_FAILED", error=str(e))
                )

        logger.info(
            f"Upload for {owner_id}: {len(result.accepted)} accepted, "
            f"{len(result.rejected)} rejected"
        )
        return result

    def _upload_one(
        self,
        item: UploadItem,
        owner_id: str,
        category_override: Optional[FileCategory],
        entity_type: Optional[str],
        entity_id: Optional[str],
    ) -> AcceptedUpload:
        self._validate_item(item)

        content_hash = ContentHash.of(item.content).value
        category = category_override or classify(item.field_name, item.original_name)

        existing = self.file_repo.find_live_duplicate(owner_id, content_hash, category)
        if existing is not None:
            return self._accept_duplicate(existing, owner_id)

        used = self.file_repo.total_live_size(owner_id)
        if used + item.size > self.limits.max_total_size_per_owner:
            raise QuotaExceededError(
                "Storage quota exceeded",
                code="STORAGE_QUOTA_EXCEEDED",
                details={
                    "used_bytes": used,
                    "requested_bytes": item.size,
                    "max_bytes": self.limits.max_total_size_per_owner,
                },
            )

        storage_key = self._build_storage_key(category, owner_id, item.original_name)
        tags = {
            "uploaded-by": owner_id,
            "original-name": base64.b64encode(item.original_name.encode("utf-8")).decode("ascii"),
        }
        put_result = self.content_store.put(storage_key, item.content, item.mime_type, tags)

        record = FileRecord.create(
            owner_id=owner_id,
            original_name=item.original_name,
            storage_key=storage_key,
            category=category,
            mime_type=item.mime_type,
            size_bytes=item.size,
            content_hash=content_hash,
            related_entity_type=entity_type,
            related_entity_id=entity_id,
            metadata={
                "etag": put_result.etag,
                "uploaded_at": datetime.utcnow().isoformat(),
            },
        )

        try:
            record = self.file_repo.add(record)
        except DuplicateFileError:
            # Lost a concurrent race for the same content
            self._delete_blob_quietly(storage_key)
            winner = self.file_repo.find_live_duplicate(owner_id, content_hash, category)
            if winner is None:
                raise
            return self._accept_duplicate(winner, owner_id)
        except Exception:
            self._delete_blob_quietly(storage_key)
            raise

        logger.info(
            f"Stored file {record.id} for {owner_id} "
            f"({category.value}, {record.size_bytes} bytes)"
        )
        self._publish(FileUploadedEvent(
            aggregate_id=record.id,
            occurred_at=record.created_at,
            owner_id=owner_id,
            category=category.value,
            size_bytes=record.size_bytes,
        ))
        return self._to_accepted(record, duplicate=False)

    def _validate_item(self, item: UploadItem) -> None:
        name = getattr(item, "original_name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("File name is required", code="MISSING_FILE_NAME")
        if not has_extension(name):
            raise ValidationError(f"File {name} has no extension", code="MISSING_EXTENSION")
        if not is_allowed_mime_type(item.mime_type, self.limits.allowed_mime_types):
            raise ValidationError(
                f"File type {item.mime_type} is not allowed", code="INVALID_FILE_TYPE"
            )
        if not item.content:
            raise ValidationError(f"File {name} is empty", code="EMPTY_FILE")
        if item.size > self.limits.max_file_size:
            raise ValidationError(
                f"File {name} exceeds the maximum size of {self.limits.max_file_size} bytes",
                code="FILE_TOO_LARGE",
                details={"size_bytes": item.size, "max_bytes": self.limits.max_file_size},
            )

    @staticmethod
    def _build_storage_key(category: FileCategory, owner_id: str, original_name: str) -> str:
        """Unpredictable key: category/owner/<uuid hex><random hex><.ext>."""
        suffix = f"{uuid.uuid4().hex}{secrets.token_hex(8)}"
        return f"{category.value}/{owner_id}/{suffix}{file_extension(original_name)}"

    def _accept_duplicate(self, existing: FileRecord, owner_id: str) -> AcceptedUpload:
        logger.info(f"Duplicate upload for {owner_id} resolved to file {existing.id}")
        self._publish(DuplicateUploadDetectedEvent(
            aggregate_id=existing.id,
            occurred_at=datetime.utcnow(),
            owner_id=owner_id,
            content_hash=existing.content_hash,
        ))
        return self._to_accepted(existing, duplicate=True)

    def _to_accepted(self, record: FileRecord, duplicate: bool) -> AcceptedUpload:
        return AcceptedUpload(
            file_id=record.id,
            original_name=record.original_name,
            storage_key=record.storage_key,
            category=record.category.value,
            status=record.status.value,
            size_bytes=record.size_bytes,
            mime_type=record.mime_type,
            url=self._safe_presigned_url(record),
            duplicate=duplicate,
        )

    # ========================================================================
    # Queries
    # ========================================================================

    def get_user_files(
        self,
        owner_id: str,
        role: Optional[str],
        category: Optional[str] = None,
        page=None,
        limit=None,
        target_owner_id: Optional[str] = None,
    ) -> FilePage:
        """
        List live files of an owner, newest first.

        Args:
            owner_id: Requesting principal
            role: Requesting principal's role
            category: Optional category filter
            page: Requested page (clamped to >= 1)
            limit: Requested page size (clamped to [1, max page size])
            target_owner_id: Owner whose files are listed; defaults to the requester

        Returns:
            FilePage whose rows carry a presigned URL, or None where signing failed

        Raises:
            PermissionDeniedError: If listing another owner's files without capability
            ValidationError: If the category filter is unknown
        """
        target = target_owner_id or owner_id
        if target != owner_id and not self.access_policy.can_act_on_foreign_resource(role):
            raise PermissionDeniedError("You are not allowed to list these files")

        category_filter = None
        if category not in (None, ""):
            category_filter = FileCategory.parse(category)
            if category_filter is None:
                raise ValidationError(f"Invalid category: {category}", code="INVALID_CATEGORY")

        page_request = PageRequest.clamp(
            page, limit, self.pagination.default_page_size, self.pagination.max_page_size
        )
        records, total = self.file_repo.list_live(
            target, category_filter, page_request.offset, page_request.limit
        )
        items = [FileView(record, self._safe_presigned_url(record)) for record in records]
        return FilePage(items=items, page=page_request.page, limit=page_request.limit, total=total)

    def get_file_by_id(
        self,
        file_id: str,
        requester_id: str,
        requester_role: Optional[str],
        increment_download: bool = False,
    ) -> FileView:
        """
        Fetch one live file with a fresh presigned URL.

        Raises:
            NotFoundError: If no live record exists
            PermissionDeniedError: If the requester may not access it
            StorageError: If the URL cannot be signed
        """
        record = self._get_accessible(file_id, requester_id, requester_role)
        url = self._presigned_url(record)

        if increment_download:
            self.file_repo.increment_download_count(record.id)
            record.download_count += 1

        return FileView(record, url)

    def get_storage_usage(self, owner_id: str) -> int:
        """Cumulative size in bytes of the owner's live files."""
        return self.file_repo.total_live_size(owner_id)

    # ========================================================================
    # Mutations
    # ========================================================================

    def delete_file(
        self, file_id: str, requester_id: str, requester_role: Optional[str]
    ) -> FileRecord:
        """
        Soft-delete a file, then remove its blob on a best-effort basis.

        The metadata update is authoritative; a failed blob delete only
        leaves an orphaned blob behind.

        Raises:
            NotFoundError: If no live record exists
            PermissionDeniedError: If the requester may not access it
        """
        record = self._get_accessible(file_id, requester_id, requester_role)

        deleted = self.file_repo.soft_delete(record.id, datetime.utcnow())
        if deleted is None:
            raise NotFoundError("File not found", code="FILE_NOT_FOUND")

        blob_removed = self._delete_blob_quietly(deleted.storage_key)
        logger.info(f"File {deleted.id} deleted by {requester_id}")
        self._publish(FileDeletedEvent(
            aggregate_id=deleted.id,
            occurred_at=deleted.deleted_at or datetime.utcnow(),
            deleted_by=requester_id,
            reason="requested",
            blob_removed=blob_removed,
        ))
        return deleted

    def activate_files(
        self,
        file_ids: Sequence[str],
        owner_id: str,
        related_entity_type: str,
        related_entity_id: str,
    ) -> List[FileRecord]:
        """
        Bind uploaded files to a business entity and mark them active.

        All-or-nothing: when any ID is missing, not live or owned by
        someone else, nothing changes.

        Args:
            file_ids: Files to activate
            owner_id: Principal that must own every file
            related_entity_type: Entity type to bind to
            related_entity_id: Entity ID to bind to

        Returns:
            Activated records

        Raises:
            ValidationError: If the request is malformed
            FileSetMismatchError: If not every file resolved
        """
        _require_non_blank(owner_id, "owner_id", "INVALID_OWNER")
        if not file_ids or isinstance(file_ids, str):
            raise ValidationError("No file IDs provided", code="NO_FILES")
        if len(file_ids) > self.limits.max_files_per_upload:
            raise ValidationError(
                f"Too many files: at most {self.limits.max_files_per_upload} per activation",
                code="TOO_MANY_FILES",
            )

        unique_ids = []
        for file_id in file_ids:
            file_id = _require_non_blank(file_id, "file_id", "INVALID_FILE_ID")
            if file_id not in unique_ids:
                unique_ids.append(file_id)

        entity_type = RelatedEntityType.parse(related_entity_type)
        if entity_type is None:
            raise ValidationError(
                f"Invalid related entity type: {related_entity_type}",
                code="INVALID_ENTITY_TYPE",
            )
        entity_id = _require_non_blank(related_entity_id, "related_entity_id", "INVALID_ENTITY_ID")

        activated = self.file_repo.activate_owned(
            unique_ids, owner_id, entity_type.value, entity_id, datetime.utcnow()
        )

        logger.info(
            f"Activated {len(activated)} file(s) for {owner_id} "
            f"-> {entity_type.value}:{entity_id}"
        )
        self._publish(FilesActivatedEvent(
            aggregate_id=entity_id,
            occurred_at=datetime.utcnow(),
            owner_id=owner_id,
            related_entity_type=entity_type.value,
            file_ids=tuple(record.id for record in activated),
        ))
        return activated

    def verify_file(
        self,
        file_id: str,
        requester_role: Optional[str],
        requester_id: str,
        verified: bool = True,
    ) -> FileRecord:
        """
        Set or clear the verification flag of an active file.

        Raises:
            PermissionDeniedError: Without the elevated capability
            ValidationError: If ``verified`` is not a boolean
            NotFoundError: If no live active record exists
        """
        self._require_capability(requester_role)
        if not isinstance(verified, bool):
            raise ValidationError("verified must be a boolean", code="INVALID_VERIFIED_FLAG")

        record = self.file_repo.verify(file_id, verified, requester_id, datetime.utcnow())
        if record is None:
            raise NotFoundError("Active file not found", code="FILE_NOT_FOUND")

        logger.info(f"File {record.id} verification set to {verified} by {requester_id}")
        self._publish(FileVerifiedEvent(
            aggregate_id=record.id,
            occurred_at=record.verified_at or datetime.utcnow(),
            verified_by=requester_id,
            verified=verified,
        ))
        return record

    # ========================================================================
    # Cleanup
    # ========================================================================

    def cleanup_old_files(
        self,
        requester_role: Optional[str],
        requester_id: str,
        days_old=None,
    ) -> CleanupReport:
        """
        Soft-delete uploads that were never activated.

        Args:
            requester_role: Must carry the elevated capability
            requester_id: Principal recorded on the deletion events
            days_old: Age threshold in days (default from settings)

        Returns:
            CleanupReport with deleted IDs, per-item errors and candidate count
        """
        self._require_capability(requester_role)

        if days_old is None:
            days_old = self.cleanup.default_days_old
        if (
            isinstance(days_old, bool)
            or not isinstance(days_old, int)
            or not 1 <= days_old <= self.cleanup.max_days_old
        ):
            raise ValidationError(
                f"days_old must be an integer between 1 and {self.cleanup.max_days_old}",
                code="INVALID_DAYS_OLD",
            )

        cutoff = datetime.utcnow() - timedelta(days=days_old)
        candidates = self.file_repo.find_abandoned_uploads(cutoff)
        report = self._soft_delete_all(candidates, requester_id, reason="abandoned")

        logger.info(
            f"Abandoned-upload cleanup (>{days_old} days): "
            f"{len(report.deleted)}/{report.total} deleted, {len(report.errors)} errors"
        )
        return report

    def cleanup_duplicate_files(
        self, requester_role: Optional[str], requester_id: str
    ) -> CleanupReport:
        """
        Keep the earliest live record of each duplicate group and delete the rest.

        Returns:
            CleanupReport with deleted IDs, per-item errors and candidate count
        """
        self._require_capability(requester_role)

        candidates = self.file_repo.find_duplicate_live_records()
        report = self._soft_delete_all(candidates, requester_id, reason="duplicate")

        logger.info(
            f"Duplicate cleanup: {len(report.deleted)}/{report.total} deleted, "
            f"{len(report.errors)} errors"
        )
        return report

    def _soft_delete_all(
        self, candidates: List[FileRecord], requester_id: str, reason: str
    ) -> CleanupReport:
        report = CleanupReport(total=len(candidates))
        for candidate in candidates:
            try:
                deleted = self.file_repo.soft_delete(candidate.id, datetime.utcnow())
            except FileVaultError as e:
                logger.error(f"Failed to delete file {candidate.id}: {e.message}")
                report.errors.append({"file_id": candidate.id, "error": e.message})
                continue

            if deleted is None:
                # Changed state since it was selected
                continue

            blob_removed = self._delete_blob_quietly(deleted.storage_key)
            report.deleted.append(deleted.id)
            self._publish(FileDeletedEvent(
                aggregate_id=deleted.id,
                occurred_at=deleted.deleted_at or datetime.utcnow(),
                deleted_by=requester_id,
                reason=reason,
                blob_removed=blob_removed,
            ))
        return report

    # ========================================================================
    # Helpers
    # ========================================================================

    def _get_accessible(
        self, file_id: str, requester_id: str, requester_role: Optional[str]
    ) -> FileRecord:
        record = self.file_repo.find_live_by_id(file_id) if file_id else None
        if record is None:
            raise NotFoundError("File not found", code="FILE_NOT_FOUND")
        if not self.access_policy.can_access(record.owner_id, requester_id, requester_role):
            raise PermissionDeniedError("You are not allowed to access this file")
        return record

    def _require_capability(self, role: Optional[str]) -> None:
        if not self.access_policy.can_act_on_foreign_resource(role):
            raise PermissionDeniedError("This operation requires an elevated role")

    def _presigned_url(self, record: FileRecord) -> str:
        return self.content_store.presigned_url(
            record.storage_key, self.limits.presigned_url_ttl_seconds
        )

    def _safe_presigned_url(self, record: FileRecord) -> Optional[str]:
        try:
            return self._presigned_url(record)
        except Exception as e:
            logger.warning(f"Could not sign URL for file {record.id}: {e}")
            return None

    def _delete_blob_quietly(self, storage_key: str) -> bool:
        try:
            self.content_store.delete(storage_key)
            return True
        except Exception as e:
            logger.warning(f"Best-effort delete of blob {storage_key} failed: {e}")
            return False

    def _publish(self, event) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)


def _require_non_blank(value, field_name: str, code: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", code=code)
    return value.strip()
