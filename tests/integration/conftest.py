"""
Integration fixtures: a file-backed SQLite metadata store and a local
content store, both under pytest's tmp_path.
"""

import pytest

from filevault.config.settings import FileLimits, TempLinkLimits
from filevault.domain.access import AccessPolicy
from filevault.domain.file_management.services import FileLifecycleManager
from filevault.domain.file_storage.signed_url_service import SignedUrlService
from filevault.domain.temp_links.services import TempLinkManager
from filevault.infrastructure.database import Database
from filevault.infrastructure.local_content_store import LocalContentStore
from filevault.infrastructure.sql_file_repository import SQLFileRecordRepository
from filevault.infrastructure.sql_temp_link_repository import SQLTempLinkRepository


@pytest.fixture
def database(tmp_path):
    """Database with the strict uniqueness index."""
    db = Database(f"sqlite:///{tmp_path / 'meta' / 'filevault.db'}")
    db.create_schema(strict_dedup=True)
    yield db
    db.dispose()


@pytest.fixture
def lenient_database(tmp_path):
    """Database without the uniqueness index, as legacy deployments have."""
    db = Database(f"sqlite:///{tmp_path / 'lenient.db'}")
    db.create_schema(strict_dedup=False)
    yield db
    db.dispose()


@pytest.fixture
def sql_file_repository(database):
    return SQLFileRecordRepository(database)


@pytest.fixture
def sql_link_repository(database):
    return SQLTempLinkRepository(database)


@pytest.fixture
def local_store(tmp_path):
    return LocalContentStore(
        str(tmp_path / "blobs"),
        signer=SignedUrlService(secret_key="integration-secret", base_url="/storage"),
    )


@pytest.fixture
def sql_file_manager(sql_file_repository, local_store):
    return FileLifecycleManager(
        file_repository=sql_file_repository,
        content_store=local_store,
        access_policy=AccessPolicy(),
        limits=FileLimits(max_file_size=1024 * 1024, max_total_size_per_owner=10 * 1024 * 1024),
    )


@pytest.fixture
def sql_link_manager(sql_link_repository, sql_file_repository, local_store):
    return TempLinkManager(
        link_repository=sql_link_repository,
        file_repository=sql_file_repository,
        content_store=local_store,
        access_policy=AccessPolicy(),
        limits=TempLinkLimits(base_url="https://files.test/download/temp"),
    )
