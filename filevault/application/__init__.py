"""Application layer: dependency container, event publishing and bootstrap."""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .event_publisher import EventPublisher

__all__ = [
    "DependencyContainer",
    "DependencyNotFoundError",
    "EventPublisher",
]
