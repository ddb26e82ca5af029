"""
SQL File Record Repository

SQLAlchemy implementation of IFileRecordRepository. Every state change is
a single conditional statement so concurrent requests cannot interleave
between check and write.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from filevault.domain.errors import DuplicateFileError, FileSetMismatchError
from filevault.domain.file_management.entities import FileRecord
from filevault.domain.file_management.repositories import IFileRecordRepository
from filevault.domain.file_management.value_objects import (
    LIVE_STATUSES,
    FileCategory,
    FileStatus,
)

from .database import Database, translate_errors
from .models import FileModel

logger = logging.getLogger(__name__)


def live_file_clause():
    """Filter matching live records."""
    return (
        FileModel.status.in_([status.value for status in LIVE_STATUSES]),
        FileModel.deleted_at.is_(None),
    )


def to_entity(model: FileModel) -> FileRecord:
    return FileRecord(
        id=model.id,
        owner_id=model.owner_id,
        related_entity_type=model.related_entity_type,
        related_entity_id=model.related_entity_id,
        original_name=model.original_name,
        storage_key=model.storage_key,
        category=FileCategory(model.category),
        mime_type=model.mime_type,
        size_bytes=model.size_bytes,
        content_hash=model.content_hash,
        status=FileStatus(model.status),
        created_at=model.created_at,
        updated_at=model.updated_at,
        is_verified=bool(model.is_verified),
        verified_by=model.verified_by,
        verified_at=model.verified_at,
        download_count=model.download_count or 0,
        deleted_at=model.deleted_at,
        metadata=dict(model.metadata_ or {}),
    )


def to_model(record: FileRecord) -> FileModel:
    return FileModel(
        id=record.id,
        owner_id=record.owner_id,
        related_entity_type=record.related_entity_type,
        related_entity_id=record.related_entity_id,
        original_name=record.original_name,
        storage_key=record.storage_key,
        category=record.category.value,
        mime_type=record.mime_type,
        size_bytes=record.size_bytes,
        content_hash=record.content_hash,
        status=record.status.value,
        is_verified=record.is_verified,
        verified_by=record.verified_by,
        verified_at=record.verified_at,
        download_count=record.download_count,
        created_at=record.created_at,
        updated_at=record.updated_at,
        deleted_at=record.deleted_at,
        metadata_=dict(record.metadata),
    )


class SQLFileRecordRepository(IFileRecordRepository):
    """
    Relational implementation of the file metadata repository.

    Faults of the database are raised as StorageError with code
    METADATA_STORE_ERROR.
    """

    def __init__(self, database: Database):
        """
        Initialize with a Database.

        Args:
            database: Database owning the engine and session factory
        """
        self.db = database

    def add(self, record: FileRecord) -> FileRecord:
        with translate_errors("insert file record"):
            try:
                with self.db.session_scope() as session:
                    session.add(to_model(record))
            except IntegrityError as e:
                raise DuplicateFileError(
                    record.owner_id, record.content_hash, record.category.value, original_error=e
                ) from e
        return record

    def find_live_by_id(self, file_id: str) -> Optional[FileRecord]:
        with translate_errors("load file record"), self.db.session_scope() as session:
            model = session.scalar(
                select(FileModel).where(FileModel.id == file_id, *live_file_clause())
            )
            return to_entity(model) if model is not None else None

    def find_live_duplicate(
        self, owner_id: str, content_hash: str, category: FileCategory
    ) -> Optional[FileRecord]:
        stmt = (
            select(FileModel)
            .where(
                FileModel.owner_id == owner_id,
                FileModel.content_hash == content_hash,
                FileModel.category == category.value,
                *live_file_clause(),
            )
            .order_by(FileModel.created_at.asc(), FileModel.id.asc())
            .limit(1)
        )
        with translate_errors("look up duplicate file"), self.db.session_scope() as session:
            model = session.scalar(stmt)
            return to_entity(model) if model is not None else None

    def list_live(
        self,
        owner_id: str,
        category: Optional[FileCategory],
        offset: int,
        limit: int,
    ) -> Tuple[List[FileRecord], int]:
        conditions = [FileModel.owner_id == owner_id, *live_file_clause()]
        if category is not None:
            conditions.append(FileModel.category == category.value)

        with translate_errors("list file records"), self.db.session_scope() as session:
            total = session.scalar(
                select(func.count()).select_from(FileModel).where(*conditions)
            ) or 0
            models = session.scalars(
                select(FileModel)
                .where(*conditions)
                .order_by(FileModel.created_at.desc(), FileModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [to_entity(model) for model in models], total

    def increment_download_count(self, file_id: str) -> None:
        with translate_errors("increment download count"), self.db.session_scope() as session:
            session.execute(
                update(FileModel)
                .where(FileModel.id == file_id)
                .values(download_count=FileModel.download_count + 1)
                .execution_options(synchronize_session=False)
            )

    def soft_delete(self, file_id: str, at: datetime) -> Optional[FileRecord]:
        with translate_errors("delete file record"), self.db.session_scope() as session:
            result = session.execute(
                update(FileModel)
                .where(FileModel.id == file_id, *live_file_clause())
                .values(status=FileStatus.DELETED.value, deleted_at=at, updated_at=at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            return to_entity(session.get(FileModel, file_id))

    def activate_owned(
        self,
        file_ids: Sequence[str],
        owner_id: str,
        related_entity_type: str,
        related_entity_id: str,
        at: datetime,
    ) -> List[FileRecord]:
        ids = list(file_ids)
        with translate_errors("activate file records"), self.db.session_scope() as session:
            result = session.execute(
                update(FileModel)
                .where(
                    FileModel.id.in_(ids),
                    FileModel.owner_id == owner_id,
                    *live_file_clause(),
                )
                .values(
                    status=FileStatus.ACTIVE.value,
                    related_entity_type=related_entity_type,
                    related_entity_id=related_entity_id,
                    updated_at=at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != len(ids):
                # Raising inside the scope rolls the partial update back
                raise FileSetMismatchError(len(ids), result.rowcount, ids)

            models = session.scalars(select(FileModel).where(FileModel.id.in_(ids))).all()
            by_id = {model.id: to_entity(model) for model in models}
            return [by_id[file_id] for file_id in ids]

    def verify(
        self, file_id: str, verified: bool, verifier_id: str, at: datetime
    ) -> Optional[FileRecord]:
        with translate_errors("verify file record"), self.db.session_scope() as session:
            result = session.execute(
                update(FileModel)
                .where(
                    FileModel.id == file_id,
                    FileModel.status == FileStatus.ACTIVE.value,
                    FileModel.deleted_at.is_(None),
                )
                .values(
                    is_verified=verified,
                    verified_by=verifier_id,
                    verified_at=at,
                    updated_at=at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            return to_entity(session.get(FileModel, file_id))

    def find_abandoned_uploads(self, cutoff: datetime) -> List[FileRecord]:
        stmt = (
            select(FileModel)
            .where(
                FileModel.status == FileStatus.UPLOADING.value,
                FileModel.deleted_at.is_(None),
                FileModel.created_at < cutoff,
            )
            .order_by(FileModel.created_at.asc())
        )
        with translate_errors("find abandoned uploads"), self.db.session_scope() as session:
            return [to_entity(model) for model in session.scalars(stmt).all()]

    def find_duplicate_live_records(self) -> List[FileRecord]:
        position = (
            func.row_number()
            .over(
                partition_by=(FileModel.owner_id, FileModel.content_hash, FileModel.category),
                order_by=(FileModel.created_at.asc(), FileModel.id.asc()),
            )
            .label("position")
        )
        ranked = select(FileModel.id.label("id"), position).where(*live_file_clause()).subquery()
        stmt = (
            select(FileModel)
            .join(ranked, FileModel.id == ranked.c.id)
            .where(ranked.c.position > 1)
            .order_by(FileModel.created_at.asc(), FileModel.id.asc())
        )
        with translate_errors("find duplicate files"), self.db.session_scope() as session:
            return [to_entity(model) for model in session.scalars(stmt).all()]

    def total_live_size(self, owner_id: str) -> int:
        stmt = select(func.coalesce(func.sum(FileModel.size_bytes), 0)).where(
            FileModel.owner_id == owner_id, *live_file_clause()
        )
        with translate_errors("sum storage usage"), self.db.session_scope() as session:
            return int(session.scalar(stmt) or 0)

    def health_check(self) -> bool:
        return self.db.health_check()
