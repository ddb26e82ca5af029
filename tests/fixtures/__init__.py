"""
Test fixtures package.

Provides factory functions and in-memory implementations for testing.
"""

from .domain_fixtures import create_file_record, create_temp_link, create_upload_item
from .mock_repositories import (
    InMemoryContentStore,
    InMemoryFileRecordRepository,
    InMemoryTempLinkRepository,
)

__all__ = [
    "create_file_record",
    "create_temp_link",
    "create_upload_item",
    "InMemoryContentStore",
    "InMemoryFileRecordRepository",
    "InMemoryTempLinkRepository",
]
