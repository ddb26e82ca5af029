"""
Service Configuration

Environment-based configuration for the file lifecycle and temporary
link managers. Provides centralized configuration management with
sensible defaults.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_ALLOWED_MIME_TYPES: Tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
)


def _parse_list(value: str) -> Tuple[str, ...]:
    """
    Parse a comma-separated list.

    Example: "admin,super_admin" -> ("admin", "super_admin")
    """
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class FileLimits:
    """Upload limits and presigned URL lifetime."""

    max_file_size: int = 10 * 1024 * 1024
    max_files_per_upload: int = 5
    max_total_size_per_owner: int = 100 * 1024 * 1024
    presigned_url_ttl_seconds: int = 3600
    allowed_mime_types: Tuple[str, ...] = DEFAULT_ALLOWED_MIME_TYPES

    @classmethod
    def from_env(cls) -> "FileLimits":
        return cls(
            max_file_size=int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024))),
            max_files_per_upload=int(os.getenv("MAX_FILES_PER_UPLOAD", "5")),
            max_total_size_per_owner=int(
                os.getenv("MAX_TOTAL_SIZE_PER_OWNER", str(100 * 1024 * 1024))
            ),
            presigned_url_ttl_seconds=int(os.getenv("PRESIGNED_URL_TTL_SECONDS", "3600")),
            allowed_mime_types=(
                _parse_list(os.getenv("ALLOWED_MIME_TYPES", ""))
                or DEFAULT_ALLOWED_MIME_TYPES
            ),
        )


@dataclass(frozen=True)
class TempLinkLimits:
    """
    Temporary download link limits.

    Expiry bounds are in hours; the per-file ceiling is expected to be
    smaller than the per-owner ceiling.
    """

    min_expiry_hours: int = 1
    max_expiry_hours: int = 168
    default_expiry_hours: int = 24
    max_active_links_per_owner: int = 50
    max_active_links_per_file: int = 10
    base_url: str = "http://localhost:3000/api/files/download/temp"

    @classmethod
    def from_env(cls) -> "TempLinkLimits":
        return cls(
            min_expiry_hours=int(os.getenv("TEMP_LINK_MIN_EXPIRY_HOURS", "1")),
            max_expiry_hours=int(os.getenv("TEMP_LINK_MAX_EXPIRY_HOURS", "168")),
            default_expiry_hours=int(os.getenv("TEMP_LINK_DEFAULT_EXPIRY_HOURS", "24")),
            max_active_links_per_owner=int(os.getenv("MAX_ACTIVE_LINKS_PER_OWNER", "50")),
            max_active_links_per_file=int(os.getenv("MAX_ACTIVE_LINKS_PER_FILE", "10")),
            base_url=os.getenv(
                "TEMP_LINK_BASE_URL", "http://localhost:3000/api/files/download/temp"
            ).rstrip("/"),
        )


@dataclass(frozen=True)
class CleanupSettings:
    """Age window for abandoned-upload cleanup, in days."""

    default_days_old: int = 7
    max_days_old: int = 30

    @classmethod
    def from_env(cls) -> "CleanupSettings":
        return cls(
            default_days_old=int(os.getenv("CLEANUP_DEFAULT_DAYS_OLD", "7")),
            max_days_old=int(os.getenv("CLEANUP_MAX_DAYS_OLD", "30")),
        )


@dataclass(frozen=True)
class PaginationSettings:
    default_page_size: int = 20
    max_page_size: int = 100

    @classmethod
    def from_env(cls) -> "PaginationSettings":
        return cls(
            default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", "20")),
            max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
        )


@dataclass(frozen=True)
class StorageSettings:
    """
    Content store selection.

    GCS is used when a bucket name is configured, otherwise files live
    under ``storage_dir`` on the local filesystem.
    """

    gcs_bucket_name: str = ""
    storage_dir: str = "/tmp/filevault"
    secret_key: str = ""
    base_url: str = "/storage"

    @classmethod
    def from_env(cls) -> "StorageSettings":
        return cls(
            gcs_bucket_name=os.getenv("GCS_BUCKET_NAME", ""),
            storage_dir=os.getenv("STORAGE_DIR", "/tmp/filevault"),
            secret_key=os.getenv("SECRET_KEY", ""),
            base_url=os.getenv("STORAGE_BASE_URL", "/storage"),
        )


@dataclass(frozen=True)
class Settings:
    """Top-level settings aggregate."""

    database_url: str = "sqlite:////tmp/filevault/filevault.db"
    elevated_roles: Tuple[str, ...] = ("admin", "super_admin")
    # Role the scheduled cleanup acts under; must be one of elevated_roles
    maintenance_role: str = "admin"
    strict_dedup: bool = True
    files: FileLimits = field(default_factory=FileLimits)
    temp_links: TempLinkLimits = field(default_factory=TempLinkLimits)
    cleanup: CleanupSettings = field(default_factory=CleanupSettings)
    pagination: PaginationSettings = field(default_factory=PaginationSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    def __post_init__(self):
        if self.maintenance_role not in self.elevated_roles:
            raise ValueError(
                f"MAINTENANCE_ROLE {self.maintenance_role!r} is not one of "
                f"ELEVATED_ROLES {list(self.elevated_roles)}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Returns:
            Settings instance with loaded configuration
        """
        elevated_roles = _parse_list(os.getenv("ELEVATED_ROLES", "")) or ("admin", "super_admin")
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:////tmp/filevault/filevault.db"),
            elevated_roles=elevated_roles,
            maintenance_role=os.getenv("MAINTENANCE_ROLE", elevated_roles[0]),
            strict_dedup=_parse_bool(os.getenv("STRICT_DEDUP", "true")),
            files=FileLimits.from_env(),
            temp_links=TempLinkLimits.from_env(),
            cleanup=CleanupSettings.from_env(),
            pagination=PaginationSettings.from_env(),
            storage=StorageSettings.from_env(),
        )
