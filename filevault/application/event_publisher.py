"""
Event Publisher

Fans out domain events raised by the file and link managers to whatever
side-effect handlers were subscribed at bootstrap (audit logging today).
"""

import logging
from threading import Lock
from typing import Callable, List, Tuple, Type

from filevault.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher:
    """
    Synchronous in-process event bus.

    A subscription matches an event when the event is an instance of the
    subscribed type, so subscribing to DomainEvent observes everything.
    Handlers run in subscription order; a failing handler is logged and
    the remaining handlers still run.
    """

    def __init__(self):
        self._subscriptions: List[Tuple[Type[DomainEvent], EventHandler]] = []
        self._lock = Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Args:
            event_type: Event class (or base class) to receive
            handler: Callable invoked with the event
        """
        with self._lock:
            self._subscriptions.append((event_type, handler))
        logger.debug(f"Subscribed {_handler_name(handler)} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> bool:
        """Drop a subscription; returns False if it was not present."""
        with self._lock:
            try:
                self._subscriptions.remove((event_type, handler))
            except ValueError:
                return False
        return True

    def publish(self, event: DomainEvent) -> int:
        """
        Deliver ``event`` to every matching handler.

        Returns:
            Number of handlers that completed without raising
        """
        with self._lock:
            matching = [h for t, h in self._subscriptions if isinstance(event, t)]

        delivered = 0
        for handler in matching:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Handler {_handler_name(handler)} failed on "
                    f"{type(event).__name__} for {event.aggregate_id}: {e}",
                    exc_info=True
                )
        return delivered


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, '__qualname__', None) or repr(handler)
