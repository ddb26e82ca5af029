"""
SQL Temporary Link Repository

SQLAlchemy implementation of ITempLinkRepository. Redemption is one
conditional UPDATE and quota-checked issuance one conditional INSERT;
the database decides which of several concurrent callers wins.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func, insert, literal, or_, select, update

from filevault.domain.errors import StorageError
from filevault.domain.temp_links.entities import TempLink
from filevault.domain.temp_links.repositories import ITempLinkRepository
from filevault.domain.temp_links.value_objects import LinkCeilings, LinkStats, RedemptionTarget

from .database import Database, translate_errors
from .models import FileModel, TempLinkModel
from .sql_file_repository import live_file_clause

logger = logging.getLogger(__name__)


def to_entity(model: TempLinkModel) -> TempLink:
    return TempLink(
        id=model.id,
        file_id=model.file_id,
        token=model.token,
        created_by=model.created_by,
        expires_at=model.expires_at,
        created_at=model.created_at,
        is_used=bool(model.is_used),
        used_at=model.used_at,
        used_by_ip=model.used_by_ip,
    )


def _active_clause(now: datetime):
    return (TempLinkModel.is_used.is_(False), TempLinkModel.expires_at > now)


def _count_active(criterion, now: datetime):
    return select(func.count()).select_from(TempLinkModel).where(criterion, *_active_clause(now))


class SQLTempLinkRepository(ITempLinkRepository):
    """Relational implementation of the temporary link repository."""

    def __init__(self, database: Database):
        """
        Initialize with a Database.

        Args:
            database: Database owning the engine and session factory
        """
        self.db = database

    def add(self, link: TempLink, ceilings: Optional[LinkCeilings] = None) -> TempLink:
        if ceilings is None:
            with translate_errors("insert temp link"), self.db.session_scope() as session:
                session.add(TempLinkModel(
                    id=link.id,
                    file_id=link.file_id,
                    token=link.token,
                    created_by=link.created_by,
                    expires_at=link.expires_at,
                    is_used=link.is_used,
                    used_at=link.used_at,
                    used_by_ip=link.used_by_ip,
                    created_at=link.created_at,
                ))
            return link

        by_owner = TempLinkModel.created_by == link.created_by
        by_file = TempLinkModel.file_id == link.file_id
        with translate_errors("insert temp link"), self.db.session_scope() as session:
            self._serialize_issuance(session, link)
            inserted = session.execute(self._insert_within(link, ceilings)).rowcount == 1
            if not inserted:
                owner_active = session.scalar(_count_active(by_owner, link.created_at))
                file_active = session.scalar(_count_active(by_file, link.created_at))

        if not inserted:
            ceilings.check(int(owner_active or 0), int(file_active or 0))
            raise StorageError("Temp link was not inserted", code="METADATA_STORE_ERROR")
        return link

    def _serialize_issuance(self, session, link: TempLink) -> None:
        """
        Make concurrent quota-checked inserts for the same owner or file
        run one after another.

        SQLite needs nothing here: the INSERT opens the transaction and
        takes the database write lock before its counts are read.
        """
        dialect = self.db.engine.dialect.name
        if dialect == "sqlite":
            return
        if dialect == "postgresql":
            session.execute(select(func.pg_advisory_xact_lock(func.hashtext(link.created_by))))
        # Owner lock first, then the file row, in every transaction
        session.execute(
            select(FileModel.id).where(FileModel.id == link.file_id).with_for_update()
        )

    @staticmethod
    def _insert_within(link: TempLink, ceilings: LinkCeilings):
        """INSERT ... SELECT that produces a row only while both counts are below ceiling."""
        owner_active = _count_active(
            TempLinkModel.created_by == link.created_by, link.created_at
        ).correlate(None).scalar_subquery()
        file_active = _count_active(
            TempLinkModel.file_id == link.file_id, link.created_at
        ).correlate(None).scalar_subquery()

        values = {
            "id": link.id,
            "file_id": link.file_id,
            "token": link.token,
            "created_by": link.created_by,
            "expires_at": link.expires_at,
            "is_used": link.is_used,
            "created_at": link.created_at,
        }
        row = select(
            *(literal(value, TempLinkModel.__table__.c[name].type) for name, value in values.items())
        ).where(owner_active < ceilings.per_owner, file_active < ceilings.per_file)
        return insert(TempLinkModel).from_select(list(values), row)

    def redeem(
        self, token: str, now: datetime, client_ip: Optional[str]
    ) -> Optional[RedemptionTarget]:
        file_is_live = (
            select(FileModel.id)
            .where(FileModel.id == TempLinkModel.file_id, *live_file_clause())
            .exists()
        )
        consume = (
            update(TempLinkModel)
            .where(
                TempLinkModel.token == token,
                *_active_clause(now),
                file_is_live,
            )
            .values(is_used=True, used_at=now, used_by_ip=client_ip)
            .execution_options(synchronize_session=False)
        )

        with translate_errors("redeem temp link"), self.db.session_scope() as session:
            # The conditional UPDATE must be the first statement of the transaction
            if self.db.supports_update_returning:
                file_id = session.execute(
                    consume.returning(TempLinkModel.file_id)
                ).scalar_one_or_none()
            else:
                result = session.execute(consume)
                file_id = None
                if result.rowcount == 1:
                    file_id = session.scalar(
                        select(TempLinkModel.file_id).where(TempLinkModel.token == token)
                    )

            if file_id is None:
                return None

            session.execute(
                update(FileModel)
                .where(FileModel.id == file_id)
                .values(download_count=FileModel.download_count + 1)
                .execution_options(synchronize_session=False)
            )
            row = session.execute(
                select(
                    FileModel.storage_key,
                    FileModel.original_name,
                    FileModel.mime_type,
                    FileModel.size_bytes,
                ).where(FileModel.id == file_id)
            ).one()

        logger.debug(f"Temp link consumed for file {file_id}")
        return RedemptionTarget(
            file_id=file_id,
            storage_key=row.storage_key,
            original_name=row.original_name,
            mime_type=row.mime_type,
            size_bytes=row.size_bytes,
        )

    def list_stats(self, owner_id: Optional[str], now: datetime) -> List[LinkStats]:
        stmt = (
            select(TempLinkModel, FileModel.original_name, FileModel.category)
            .join(FileModel, FileModel.id == TempLinkModel.file_id)
            .order_by(TempLinkModel.created_at.desc(), TempLinkModel.id.desc())
        )
        if owner_id is not None:
            stmt = stmt.where(TempLinkModel.created_by == owner_id)

        with translate_errors("list temp links"), self.db.session_scope() as session:
            rows = session.execute(stmt).all()
            return [
                LinkStats(
                    link_id=link.id,
                    file_id=link.file_id,
                    file_name=file_name,
                    file_category=category,
                    created_by=link.created_by,
                    created_at=link.created_at,
                    expires_at=link.expires_at,
                    is_used=bool(link.is_used),
                    used_at=link.used_at,
                    used_by_ip=link.used_by_ip,
                    is_expired=link.expires_at <= now,
                )
                for link, file_name, category in rows
            ]

    def delete_expired_or_used(self, now: datetime) -> int:
        stmt = (
            delete(TempLinkModel)
            .where(or_(TempLinkModel.expires_at <= now, TempLinkModel.is_used.is_(True)))
            .execution_options(synchronize_session=False)
        )
        with translate_errors("sweep temp links"), self.db.session_scope() as session:
            return session.execute(stmt).rowcount or 0

    def delete_owned(self, link_id: str, owner_id: str) -> bool:
        stmt = (
            delete(TempLinkModel)
            .where(TempLinkModel.id == link_id, TempLinkModel.created_by == owner_id)
            .execution_options(synchronize_session=False)
        )
        with translate_errors("delete temp link"), self.db.session_scope() as session:
            return session.execute(stmt).rowcount == 1

    def find_by_token(self, token: str) -> Optional[TempLink]:
        with translate_errors("load temp link"), self.db.session_scope() as session:
            model = session.scalar(select(TempLinkModel).where(TempLinkModel.token == token))
            return to_entity(model) if model is not None else None
