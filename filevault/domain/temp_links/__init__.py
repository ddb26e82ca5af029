"""
Temporary Links Domain

Single-use, time-bounded download links with atomic redemption.
"""

from .entities import TempLink
from .repositories import ITempLinkRepository
from .services import TempLinkManager
from .value_objects import (
    ClientContext,
    DownloadHandle,
    InvalidLinkTokenError,
    IssuedLink,
    LinkStats,
    LinkToken,
    RedemptionTarget,
)

__all__ = [
    "TempLink",
    "ITempLinkRepository",
    "TempLinkManager",
    "ClientContext",
    "DownloadHandle",
    "InvalidLinkTokenError",
    "IssuedLink",
    "LinkStats",
    "LinkToken",
    "RedemptionTarget",
]
