"""
File Management Domain

Manages uploaded file records: classification, deduplication, activation,
verification and cleanup.
"""

from .classifier import classify
from .entities import FilePage, FileRecord, FileView
from .repositories import IFileRecordRepository
from .services import FileLifecycleManager
from .value_objects import (
    AcceptedUpload,
    CleanupReport,
    ContentHash,
    FileCategory,
    FileStatus,
    PageRequest,
    RejectedUpload,
    RelatedEntityType,
    UploadItem,
    UploadOptions,
    UploadResult,
)

__all__ = [
    "classify",
    "FilePage",
    "FileRecord",
    "FileView",
    "IFileRecordRepository",
    "FileLifecycleManager",
    "AcceptedUpload",
    "CleanupReport",
    "ContentHash",
    "FileCategory",
    "FileStatus",
    "PageRequest",
    "RejectedUpload",
    "RelatedEntityType",
    "UploadItem",
    "UploadOptions",
    "UploadResult",
]
