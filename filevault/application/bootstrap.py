"""
Bootstrap

Builds the object graph once per process: database, schema, repositories,
content store, access policy, event publisher and the two managers.
Web workers and Celery workers both start from build_container().
"""

import logging
from typing import Any, Dict, Optional

from filevault.config.settings import Settings
from filevault.domain.access import AccessPolicy
from filevault.domain.file_management.repositories import IFileRecordRepository
from filevault.domain.file_management.services import FileLifecycleManager
from filevault.domain.file_storage.storage_repository import IContentStore
from filevault.domain.temp_links.repositories import ITempLinkRepository
from filevault.domain.temp_links.services import TempLinkManager
from filevault.infrastructure.database import Database
from filevault.infrastructure.sql_file_repository import SQLFileRecordRepository
from filevault.infrastructure.sql_temp_link_repository import SQLTempLinkRepository
from filevault.infrastructure.storage_factory import StorageFactory

from .dependency_container import DependencyContainer
from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)


def build_container(
    settings: Optional[Settings] = None,
    content_store: Optional[IContentStore] = None,
    database: Optional[Database] = None,
) -> DependencyContainer:
    """
    Create and wire every service.

    Args:
        settings: Configuration (loaded from the environment if omitted)
        content_store: Pre-built content store (selected by StorageFactory if omitted)
        database: Pre-built Database (created from ``settings.database_url`` if omitted)

    Returns:
        Populated DependencyContainer
    """
    settings = settings or Settings.from_env()
    container = DependencyContainer()

    database = database or Database(settings.database_url)
    database.create_schema(strict_dedup=settings.strict_dedup)

    content_store = content_store or StorageFactory.create_storage(settings.storage)
    file_repository = SQLFileRecordRepository(database)
    link_repository = SQLTempLinkRepository(database)
    access_policy = AccessPolicy(settings.elevated_roles)

    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)

    file_manager = FileLifecycleManager(
        file_repository=file_repository,
        content_store=content_store,
        access_policy=access_policy,
        limits=settings.files,
        pagination=settings.pagination,
        cleanup=settings.cleanup,
        event_publisher=event_publisher,
    )
    link_manager = TempLinkManager(
        link_repository=link_repository,
        file_repository=file_repository,
        content_store=content_store,
        access_policy=access_policy,
        limits=settings.temp_links,
        event_publisher=event_publisher,
    )

    container.register_singleton(Settings, settings)
    container.register_singleton(Database, database)
    container.register_singleton(IContentStore, content_store)
    container.register_singleton(IFileRecordRepository, file_repository)
    container.register_singleton(ITempLinkRepository, link_repository)
    container.register_singleton(AccessPolicy, access_policy)
    container.register_singleton(EventPublisher, event_publisher)
    container.register_singleton(FileLifecycleManager, file_manager)
    container.register_singleton(TempLinkManager, link_manager)

    logger.info("filevault services initialized")
    return container


def health_check(container: DependencyContainer) -> Dict[str, Any]:
    """
    Report the status of the metadata store and the content store.

    Returns:
        Dict with a boolean per collaborator and an overall ``healthy`` flag
    """
    database_ok = container.resolve(Database).health_check()
    store_ok = container.resolve(IContentStore).health_check()
    return {
        "database": database_ok,
        "content_store": store_ok,
        "healthy": database_ok and store_ok,
    }


def shutdown(container: DependencyContainer) -> None:
    """Release pooled database connections."""
    container.resolve(Database).dispose()
    logger.info("filevault services shut down")
