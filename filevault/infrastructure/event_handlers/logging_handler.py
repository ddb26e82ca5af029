"""
Logging Event Handler

Writes one audit line per domain event. Subscribed at bootstrap so the
managers never log their own business outcomes.
"""

import logging
from typing import Callable, Dict, Tuple, Type

from filevault.domain.events import (
    DomainEvent,
    DuplicateUploadDetectedEvent,
    FileDeletedEvent,
    FilesActivatedEvent,
    FileUploadedEvent,
    FileVerifiedEvent,
    TempLinkIssuedEvent,
    TempLinkRedeemedEvent,
    TempLinksSweptEvent,
)

Formatter = Callable[[DomainEvent], Tuple[int, str]]


def _uploaded(e: FileUploadedEvent):
    return logging.INFO, (
        f"File uploaded: file_id={e.aggregate_id}, owner={e.owner_id}, "
        f"category={e.category}, size={e.size_bytes} bytes"
    )


def _duplicate(e: DuplicateUploadDetectedEvent):
    return logging.INFO, f"Duplicate upload: file_id={e.aggregate_id}, owner={e.owner_id}"


def _activated(e: FilesActivatedEvent):
    return logging.INFO, (
        f"Files activated: {len(e.file_ids)} file(s) of {e.owner_id} "
        f"bound to {e.related_entity_type}:{e.aggregate_id}"
    )


def _deleted(e: FileDeletedEvent):
    message = f"File deleted: file_id={e.aggregate_id}, by={e.deleted_by}, reason={e.reason}"
    if e.blob_removed:
        return logging.INFO, message
    return logging.WARNING, f"{message} (blob left in storage)"


def _verified(e: FileVerifiedEvent):
    return logging.INFO, (
        f"File verification: file_id={e.aggregate_id}, verified={e.verified}, by={e.verified_by}"
    )


def _link_issued(e: TempLinkIssuedEvent):
    return logging.INFO, (
        f"Temp link issued: link_id={e.aggregate_id}, file_id={e.file_id}, "
        f"by={e.created_by}, expires_at={e.expires_at.isoformat()}"
    )


def _link_redeemed(e: TempLinkRedeemedEvent):
    return logging.INFO, f"Temp link redeemed: file_id={e.aggregate_id}, ip={e.client_ip}"


def _links_swept(e: TempLinksSweptEvent):
    return logging.INFO, f"Temp links swept: {e.deleted_count} deleted"


FORMATTERS: Dict[Type[DomainEvent], Formatter] = {
    FileUploadedEvent: _uploaded,
    DuplicateUploadDetectedEvent: _duplicate,
    FilesActivatedEvent: _activated,
    FileDeletedEvent: _deleted,
    FileVerifiedEvent: _verified,
    TempLinkIssuedEvent: _link_issued,
    TempLinkRedeemedEvent: _link_redeemed,
    TempLinksSweptEvent: _links_swept,
}


class LoggingEventHandler:
    """Audit logger for domain events; unknown event types go to DEBUG."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        formatter = FORMATTERS.get(type(event))
        try:
            if formatter is None:
                self.logger.debug(
                    f"Unhandled event: {type(event).__name__} (aggregate_id={event.aggregate_id})"
                )
                return
            level, message = formatter(event)
            self._emit(level, message)
        except Exception as e:
            # Audit logging never fails the operation that raised the event
            self.logger.error(
                f"Logging handler failed for {type(event).__name__}: {e}", exc_info=True
            )

    def _emit(self, level: int, message: str) -> None:
        if level >= logging.WARNING:
            self.logger.warning(message)
        else:
            self.logger.info(message)
