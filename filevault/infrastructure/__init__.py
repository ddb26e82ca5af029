"""Infrastructure layer: SQLAlchemy repositories and content stores."""

from .database import Database
from .local_content_store import LocalContentStore
from .sql_file_repository import SQLFileRecordRepository
from .sql_temp_link_repository import SQLTempLinkRepository
from .storage_factory import StorageFactory

__all__ = [
    "Database",
    "LocalContentStore",
    "SQLFileRecordRepository",
    "SQLTempLinkRepository",
    "StorageFactory",
]
