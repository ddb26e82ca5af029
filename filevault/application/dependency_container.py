"""
Dependency Injection Container

Holds the services that bootstrap.build_container() wires together so web
handlers and Celery tasks resolve the same file manager, link manager and
stores instead of reaching for module-level globals.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(LookupError):
    """Raised when a service type was never registered."""


class DependencyContainer:
    """
    Registry of process-wide services keyed by their interface type.

    Services are either registered as ready instances or as factories that
    run once on first resolution; the built instance is then cached.
    """

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._lock = threading.RLock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register an already built service.

        Args:
            interface: Type the service is looked up by
            implementation: Instance returned for every resolution
        """
        with self._lock:
            self._factories.pop(interface, None)
            self._instances[interface] = implementation
        logger.debug(f"Registered {interface.__name__}")

    def register_lazy(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """
        Register a factory that builds the service on first use.

        Args:
            interface: Type the service is looked up by
            factory: Zero-argument callable; it may resolve other services
        """
        with self._lock:
            self._instances.pop(interface, None)
            self._factories[interface] = factory
        logger.debug(f"Registered lazy {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Return the service registered for ``interface``.

        Raises:
            DependencyNotFoundError: If nothing was registered for the type
        """
        with self._lock:
            if interface in self._instances:
                return self._instances[interface]
            factory = self._factories.get(interface)
            if factory is None:
                raise DependencyNotFoundError(
                    f"No service registered for {interface.__name__}"
                )
            # RLock lets the factory resolve its own collaborators
            instance = factory()
            self._instances[interface] = instance
            del self._factories[interface]
            return instance

    def __contains__(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._instances or interface in self._factories

    def setup_event_handlers(
        self,
        event_publisher,
        handlers: Optional[Iterable[Any]] = None,
    ) -> None:
        """
        Subscribe event handlers to every domain event.

        Args:
            event_publisher: EventPublisher the managers publish to
            handlers: Objects with a ``handle(event)`` method; defaults to a
                LoggingEventHandler writing to the ``filevault`` logger
        """
        from filevault.domain.events import DomainEvent
        from filevault.infrastructure.event_handlers.logging_handler import LoggingEventHandler

        if handlers is None:
            handlers = [LoggingEventHandler(logging.getLogger("filevault"))]

        for handler in handlers:
            event_publisher.subscribe(DomainEvent, handler.handle)
            logger.debug(f"Subscribed {type(handler).__name__} to domain events")
