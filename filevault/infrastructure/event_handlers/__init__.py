"""Infrastructure event handlers subscribed at bootstrap."""

from .logging_handler import LoggingEventHandler

__all__ = ["LoggingEventHandler"]
