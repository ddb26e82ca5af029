"""
Google Cloud Storage Content Store Implementation

Concrete implementation of IContentStore for Google Cloud Storage, using
the google-cloud-storage library. Presigned URLs are GCS v4 signed URLs.
"""

import logging
from datetime import timedelta
from typing import BinaryIO, Dict, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage
from google.cloud.exceptions import NotFound

from filevault.domain.errors import StorageError
from filevault.domain.file_storage.storage_repository import IContentStore, PutResult

logger = logging.getLogger(__name__)


class GCSContentStore(IContentStore):
    """
    Google Cloud Storage implementation of IContentStore.

    Thread Safety:
        The GCS client handles concurrent operations safely.

    Attributes:
        bucket_name: Name of the GCS bucket for blob storage
        client: Google Cloud Storage client instance
        bucket: GCS bucket object
    """

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None):
        """
        Initialize the GCS content store.

        Args:
            bucket_name: Name of the GCS bucket to use for storage
            client: Optional preconfigured client (built from the environment otherwise)

        Raises:
            ValueError: If bucket_name is empty
        """
        if not bucket_name or not bucket_name.strip():
            raise ValueError("bucket_name cannot be empty")

        self.bucket_name = bucket_name
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> PutResult:
        try:
            blob = self.bucket.blob(key)
            blob.metadata = dict(tags or {})
            blob.upload_from_string(data, content_type=content_type)
            return PutResult(etag=blob.etag or blob.md5_hash or "")
        except GoogleAPIError as e:
            logger.error(f"Failed to upload {key} to gs://{self.bucket_name}: {e}")
            raise StorageError(
                f"Failed to store file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e
        except Exception as e:
            # Transport and credential failures are not GoogleAPIError
            logger.error(f"Unexpected error uploading {key} to gs://{self.bucket_name}: {e}")
            raise StorageError(
                f"Failed to store file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

    def get_read_stream(self, key: str) -> BinaryIO:
        try:
            blob = self.bucket.blob(key)
            if not blob.exists():
                raise StorageError(f"File not found in storage: {key}", code="BLOB_NOT_FOUND")
            return blob.open("rb")
        except StorageError:
            raise
        except NotFound as e:
            raise StorageError(
                f"File not found in storage: {key}", code="BLOB_NOT_FOUND", original_error=e
            ) from e
        except Exception as e:
            logger.error(f"Failed to open gs://{self.bucket_name}/{key}: {e}")
            raise StorageError(
                f"Failed to open file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

    def delete(self, key: str) -> None:
        try:
            self.bucket.blob(key).delete()
        except NotFound:
            # Idempotent
            return
        except Exception as e:
            logger.error(f"Failed to delete gs://{self.bucket_name}/{key}: {e}")
            raise StorageError(
                f"Failed to delete file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

    def exists(self, key: str) -> bool:
        try:
            return self.bucket.blob(key).exists()
        except Exception as e:
            logger.warning(f"Existence check for gs://{self.bucket_name}/{key} failed: {e}")
            return False

    def presigned_url(self, key: str, ttl_seconds: int) -> str:
        try:
            return self.bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )
        except Exception as e:
            # Signing needs service-account credentials
            raise StorageError(
                f"Failed to sign URL for {key}", code="PRESIGN_FAILED", original_error=e
            ) from e

    def health_check(self) -> bool:
        try:
            return self.bucket.exists()
        except Exception as e:
            logger.error(f"GCS health check failed: {e}")
            return False
