"""
Celery Application Instance

Creates the Celery app instance for use by workers and beat scheduler.
The service container is built lazily, on the first task that needs it,
so importing this module has no side effects.
"""

import threading
from typing import Optional

from filevault.application.dependency_container import DependencyContainer
from filevault.config.celery_config import make_celery

celery_app = make_celery()

# Imported by name when the worker starts, after celery_app exists
celery_app.conf.imports = (
    "filevault.tasks.cleanup_task",
)

_container: Optional[DependencyContainer] = None
_container_lock = threading.Lock()


def get_container() -> DependencyContainer:
    """Return the process-wide container, building it on first use."""
    global _container
    with _container_lock:
        if _container is None:
            from filevault.application.bootstrap import build_container

            _container = build_container()
        return _container
