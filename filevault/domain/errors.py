"""
Error Handling Module

Defines the typed error taxonomy raised by the file lifecycle and
temporary link managers. Every error carries a machine-readable code,
a human-readable message and a category the boundary layer can map to
an HTTP status.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    VALIDATION_ERROR = "validation_error"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"
    STORAGE_ERROR = "storage_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.NOT_FOUND: {
        "title": "Not Found",
        "message": "The requested file or link does not exist, has expired or was already used.",
        "action": "Check the identifier or request a new download link.",
    },
    ErrorCategory.PERMISSION_DENIED: {
        "title": "Permission Denied",
        "message": "You are not allowed to perform this action on this resource.",
        "action": "Ask the owner of the file or an administrator for access.",
    },
    ErrorCategory.VALIDATION_ERROR: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.BUSINESS_RULE_VIOLATION: {
        "title": "Request Not Allowed",
        "message": "The request violates a limit or rule of the file service.",
        "action": "Free up quota or adjust the request before trying again.",
    },
    ErrorCategory.STORAGE_ERROR: {
        "title": "Storage Unavailable",
        "message": "The file storage is temporarily unavailable.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}

HTTP_STATUS_CODES: Dict[ErrorCategory, int] = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.PERMISSION_DENIED: 403,
    ErrorCategory.VALIDATION_ERROR: 400,
    ErrorCategory.BUSINESS_RULE_VIOLATION: 409,
    ErrorCategory.STORAGE_ERROR: 503,
}


class FileVaultError(Exception):
    """
    Base exception for all errors raised by the core.

    Subclasses fix the category; callers choose the code and message.
    They can optionally wrap original errors for context.
    """

    category: ErrorCategory = ErrorCategory.STORAGE_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (defaults per subclass)
            details: Additional context information
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.original_error = original_error

    @property
    def http_status(self) -> int:
        """HTTP status the boundary layer should answer with."""
        return HTTP_STATUS_CODES[self.category]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        info = ERROR_MESSAGES[self.category]
        return {
            "error": self.category.value,
            "code": self.code,
            "title": info["title"],
            "message": self.message,
            "action": info["action"],
            "details": self.details,
        }


class NotFoundError(FileVaultError):
    """Raised when no live file or active link matches the request."""

    category = ErrorCategory.NOT_FOUND
    default_code = "NOT_FOUND"


class PermissionDeniedError(FileVaultError):
    """Raised when a role or ownership check fails."""

    category = ErrorCategory.PERMISSION_DENIED
    default_code = "ACCESS_DENIED"


class ValidationError(FileVaultError):
    """Raised for malformed input or a disallowed type or size."""

    category = ErrorCategory.VALIDATION_ERROR
    default_code = "VALIDATION_FAILED"


class BusinessRuleViolation(FileVaultError):
    """Raised when a request is well-formed but breaks a service rule."""

    category = ErrorCategory.BUSINESS_RULE_VIOLATION
    default_code = "BUSINESS_RULE_VIOLATION"


class StorageError(FileVaultError):
    """
    Raised when the content store or the metadata store fails.

    Always wraps the collaborator's own exception in ``original_error``.
    """

    category = ErrorCategory.STORAGE_ERROR
    default_code = "STORAGE_ERROR"


# ============================================================================
# Specialised errors
# ============================================================================

class LinkExpiredOrUsedError(NotFoundError):
    """
    Raised when a temp link token cannot be redeemed.

    Unknown, expired and already used tokens all map to this one
    error so callers cannot tell them apart.
    """

    default_code = "LINK_NOT_FOUND"

    def __init__(self, message: str = "Temporary link not found, expired or already used"):
        super().__init__(message)


class FileSetMismatchError(BusinessRuleViolation):
    """Raised when a batch activation does not resolve every requested file."""

    default_code = "FILES_NOT_FOUND_OR_ACCESS_DENIED"

    def __init__(self, requested_count: int, found_count: int, file_ids=None):
        super().__init__(
            f"Some files were not found or do not belong to you "
            f"(requested {requested_count}, found {found_count})",
            details={
                "requested_count": requested_count,
                "found_count": found_count,
                "file_ids": list(file_ids or []),
            },
        )
        self.requested_count = requested_count
        self.found_count = found_count


class QuotaExceededError(BusinessRuleViolation):
    """Raised when a per-owner or per-file ceiling has been reached."""

    default_code = "QUOTA_EXCEEDED"


class DuplicateFileError(BusinessRuleViolation):
    """
    Raised by a repository when the live-file uniqueness constraint fires.

    The lifecycle manager converts it into a "duplicate found" outcome;
    it never escapes the core.
    """

    default_code = "DUPLICATE_FILE"

    def __init__(self, owner_id: str, content_hash: str, category: str,
                 original_error: Optional[Exception] = None):
        super().__init__(
            f"A live file with the same content already exists for {owner_id}",
            details={
                "owner_id": owner_id,
                "content_hash": content_hash,
                "category": category,
            },
            original_error=original_error,
        )
        self.owner_id = owner_id
        self.content_hash = content_hash
        self.file_category = category
