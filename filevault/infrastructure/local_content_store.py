"""
Local Content Store Implementation

Concrete implementation of IContentStore on the local filesystem.
Blobs live under a base directory; content type and tags are kept in a
JSON sidecar next to each blob. Presigned URLs are HMAC-signed by
SignedUrlService.
"""

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from filevault.domain.errors import StorageError
from filevault.domain.file_storage.signed_url_service import SignedUrlService
from filevault.domain.file_storage.storage_repository import IContentStore, PutResult

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".meta.json"


class LocalContentStore(IContentStore):
    """
    Local filesystem implementation of IContentStore.

    Thread Safety:
        Writes go to a temporary file that is atomically renamed into
        place, so readers never see a partial blob.

    Attributes:
        base_path: Base directory for blob storage
        signer: SignedUrlService used for presigned URLs
    """

    def __init__(self, base_path: str, signer: Optional[SignedUrlService] = None):
        """
        Initialize the local content store.

        Args:
            base_path: Base directory for blob storage
            signer: URL signer (a per-process random key is used if omitted)

        Raises:
            StorageError: If the base directory cannot be created
        """
        self.base_path = Path(base_path).resolve()
        self.signer = signer or SignedUrlService()
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to create storage directory: {self.base_path}",
                code="CONTENT_STORE_ERROR",
                original_error=e,
            ) from e

    def _resolve(self, key: str) -> Path:
        """Map a key to a path, refusing anything outside the base directory."""
        if not key or not key.strip():
            raise StorageError("Storage key cannot be empty", code="INVALID_STORAGE_KEY")
        full_path = (self.base_path / key).resolve()
        if full_path == self.base_path or self.base_path not in full_path.parents:
            raise StorageError(f"Invalid storage key: {key}", code="INVALID_STORAGE_KEY")
        return full_path

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        tags: Optional[Dict[str, str]] = None,
    ) -> PutResult:
        full_path = self._resolve(key)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=full_path.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, full_path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

            sidecar = {"content_type": content_type, "tags": dict(tags or {})}
            full_path.with_name(full_path.name + SIDECAR_SUFFIX).write_text(
                json.dumps(sidecar), encoding="utf-8"
            )
        except OSError as e:
            logger.error(f"Failed to write blob {key}: {e}")
            raise StorageError(
                f"Failed to store file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

        return PutResult(etag=hashlib.md5(data).hexdigest())

    def get_read_stream(self, key: str) -> BinaryIO:
        full_path = self._resolve(key)
        try:
            return open(full_path, "rb")
        except FileNotFoundError as e:
            raise StorageError(
                f"File not found in storage: {key}", code="BLOB_NOT_FOUND", original_error=e
            ) from e
        except OSError as e:
            raise StorageError(
                f"Failed to open file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

    def delete(self, key: str) -> None:
        full_path = self._resolve(key)
        try:
            full_path.unlink(missing_ok=True)
            full_path.with_name(full_path.name + SIDECAR_SUFFIX).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to delete file: {key}", code="CONTENT_STORE_ERROR", original_error=e
            ) from e

    def exists(self, key: str) -> bool:
        try:
            return self._resolve(key).is_file()
        except (StorageError, OSError):
            return False

    def presigned_url(self, key: str, ttl_seconds: int) -> str:
        self._resolve(key)
        return self.signer.generate_signed_url(key, ttl_seconds).url

    def read_tags(self, key: str) -> Dict[str, str]:
        """Tags recorded by put(), or an empty dict."""
        sidecar = self._resolve(key)
        sidecar = sidecar.with_name(sidecar.name + SIDECAR_SUFFIX)
        try:
            return json.loads(sidecar.read_text(encoding="utf-8")).get("tags", {})
        except (OSError, ValueError):
            return {}

    def health_check(self) -> bool:
        return self.base_path.is_dir() and os.access(self.base_path, os.W_OK)
