"""
Cleanup Tasks

Celery beat tasks for periodic maintenance. Thin wrappers that resolve
the managers from the container and delegate to them.
"""

import logging

from filevault.celery_app import celery_app
from filevault.config.celery_config import CLEANUP_TASK, SWEEP_TASK

logger = logging.getLogger(__name__)

SYSTEM_PRINCIPAL = "system:cleanup"


@celery_app.task(bind=True, name=SWEEP_TASK)
def sweep_expired_links(self):
    """
    Delete expired and used temporary links.

    Runs hourly. Never raises; failures are reported in the result.

    Returns:
        dict: Number of deleted links and errors
    """
    logger.info("Starting temp link sweep")
    stats = {"links_deleted": 0, "errors": []}

    try:
        from filevault.celery_app import get_container
        from filevault.domain.temp_links.services import TempLinkManager

        link_manager = get_container().resolve(TempLinkManager)
        stats["links_deleted"] = link_manager.sweep_expired()
        logger.info(f"Temp link sweep completed - deleted: {stats['links_deleted']}")
    except Exception as e:
        error_msg = f"Temp link sweep failed: {e}"
        stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    return stats


@celery_app.task(bind=True, name=CLEANUP_TASK)
def cleanup_abandoned_uploads(self, days_old=None):
    """
    Soft-delete uploads that were never activated.

    Runs daily under the configured maintenance role. Never raises;
    failures are reported in the result.

    Args:
        days_old: Age threshold in days (default from settings)

    Returns:
        dict: Deleted file IDs, candidate count and errors
    """
    logger.info("Starting abandoned-upload cleanup")
    stats = {"files_deleted": 0, "deleted_ids": [], "candidates": 0, "errors": []}

    try:
        from filevault.celery_app import get_container
        from filevault.config.settings import Settings
        from filevault.domain.file_management.services import FileLifecycleManager

        container = get_container()
        role = container.resolve(Settings).maintenance_role
        file_manager = container.resolve(FileLifecycleManager)
        report = file_manager.cleanup_old_files(role, SYSTEM_PRINCIPAL, days_old)

        stats["files_deleted"] = len(report.deleted)
        stats["deleted_ids"] = list(report.deleted)
        stats["candidates"] = report.total
        stats["errors"] = [f"{item['file_id']}: {item['error']}" for item in report.errors]

        logger.info(
            f"Abandoned-upload cleanup completed - deleted: {stats['files_deleted']}, "
            f"candidates: {stats['candidates']}, errors: {len(stats['errors'])}"
        )
        if stats["errors"]:
            logger.warning(f"Cleanup errors: {stats['errors']}")
    except Exception as e:
        error_msg = f"Abandoned-upload cleanup failed: {e}"
        stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    return stats
