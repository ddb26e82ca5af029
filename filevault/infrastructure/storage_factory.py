"""
Storage Factory

Factory for creating the content store implementation.

Uses Google Cloud Storage when a bucket is configured and falls back to
the local filesystem otherwise. The managers stay decoupled from the
concrete store via the IContentStore interface.
"""

import logging

from filevault.config.settings import StorageSettings
from filevault.domain.errors import StorageError
from filevault.domain.file_storage.signed_url_service import SignedUrlService
from filevault.domain.file_storage.storage_repository import IContentStore

from .local_content_store import LocalContentStore

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory that selects the content store from configuration."""

    @staticmethod
    def create_storage(settings: StorageSettings) -> IContentStore:
        """
        Create the content store.

        Args:
            settings: Storage settings

        Returns:
            GCSContentStore if ``gcs_bucket_name`` is set, LocalContentStore otherwise

        Raises:
            StorageError: If the selected store cannot be initialized
        """
        if settings.gcs_bucket_name:
            return StorageFactory._create_gcs_storage(settings)
        return StorageFactory._create_local_storage(settings)

    @staticmethod
    def _create_gcs_storage(settings: StorageSettings) -> IContentStore:
        from .gcs_content_store import GCSContentStore

        try:
            store = GCSContentStore(settings.gcs_bucket_name)
        except Exception as e:
            raise StorageError(
                f"Failed to initialize GCS storage: {e}",
                code="CONTENT_STORE_ERROR",
                original_error=e,
            ) from e
        logger.info(f"Storage factory: Using GCS bucket {settings.gcs_bucket_name}")
        return store

    @staticmethod
    def _create_local_storage(settings: StorageSettings) -> IContentStore:
        signer = SignedUrlService(secret_key=settings.secret_key, base_url=settings.base_url)
        store = LocalContentStore(settings.storage_dir, signer=signer)
        logger.info(f"Storage factory: Using local filesystem storage at {settings.storage_dir}")
        return store
