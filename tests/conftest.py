"""
Shared pytest fixtures for the filevault test suite: Hypothesis profiles,
in-memory collaborators and managers wired to them. Integration tests
add SQLite-backed fixtures in tests/integration/conftest.py.
"""

import os

import pytest
from hypothesis import HealthCheck, settings

from filevault.application.event_publisher import EventPublisher
from filevault.config.settings import (
    CleanupSettings,
    FileLimits,
    PaginationSettings,
    TempLinkLimits,
)
from filevault.domain.access import AccessPolicy
from filevault.domain.file_management.services import FileLifecycleManager
from filevault.domain.temp_links.services import TempLinkManager
from tests.fixtures.mock_repositories import (
    InMemoryContentStore,
    InMemoryFileRecordRepository,
    InMemoryTempLinkRepository,
)

# HYPOTHESIS_PROFILE=ci for the long run, =dev while iterating
for _name, _examples in (("default", 100), ("ci", 300), ("dev", 10)):
    settings.register_profile(
        _name,
        max_examples=_examples,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow],
    )
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def file_repository() -> InMemoryFileRecordRepository:
    return InMemoryFileRecordRepository()


@pytest.fixture
def link_repository(file_repository) -> InMemoryTempLinkRepository:
    return InMemoryTempLinkRepository(file_repository)


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture
def access_policy() -> AccessPolicy:
    return AccessPolicy()


@pytest.fixture
def file_limits() -> FileLimits:
    """Small limits so quota paths are cheap to reach."""
    return FileLimits(
        max_file_size=1024,
        max_files_per_upload=5,
        max_total_size_per_owner=4096,
        presigned_url_ttl_seconds=600,
    )


@pytest.fixture
def link_limits() -> TempLinkLimits:
    return TempLinkLimits(
        max_active_links_per_owner=5,
        max_active_links_per_file=3,
        base_url="https://files.test/download/temp",
    )


@pytest.fixture
def event_publisher() -> EventPublisher:
    return EventPublisher()


@pytest.fixture
def file_manager(
    file_repository, content_store, access_policy, file_limits, event_publisher
) -> FileLifecycleManager:
    """FileLifecycleManager wired to in-memory collaborators."""
    return FileLifecycleManager(
        file_repository=file_repository,
        content_store=content_store,
        access_policy=access_policy,
        limits=file_limits,
        pagination=PaginationSettings(default_page_size=20, max_page_size=100),
        cleanup=CleanupSettings(default_days_old=7, max_days_old=30),
        event_publisher=event_publisher,
    )


@pytest.fixture
def link_manager(
    link_repository, file_repository, content_store, access_policy, link_limits, event_publisher
) -> TempLinkManager:
    """TempLinkManager wired to in-memory collaborators."""
    return TempLinkManager(
        link_repository=link_repository,
        file_repository=file_repository,
        content_store=content_store,
        access_policy=access_policy,
        limits=link_limits,
        event_publisher=event_publisher,
    )


# =============================================================================
# Markers by directory
# =============================================================================

SUITE_MARKERS = {
    "unit": "in-memory collaborators only",
    "integration": "SQLite database and temp directories",
    "e2e": "full workflows through build_container()",
    "property": "Hypothesis property tests",
}


def pytest_configure(config):
    for name, description in SUITE_MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_collection_modifyitems(config, items):
    for item in items:
        parts = item.path.parts
        for name in SUITE_MARKERS:
            if name in parts:
                item.add_marker(getattr(pytest.mark, name))
                break
