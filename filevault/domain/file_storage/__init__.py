"""
File Storage Domain

Contract for the blob store and HMAC-signed URLs for local storage.
"""

from .signed_url_service import SignedUrl, SignedUrlService
from .storage_repository import IContentStore, PutResult

__all__ = [
    "SignedUrl",
    "SignedUrlService",
    "IContentStore",
    "PutResult",
]
