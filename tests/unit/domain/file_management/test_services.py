"""
Unit tests for FileLifecycleManager

Covers upload deduplication, per-item failure isolation, quota
enforcement, listing, access checks, activation, verification and
both cleanup passes, using in-memory collaborators.
"""

from datetime import datetime, timedelta

import pytest

from filevault.domain.errors import (
    FileSetMismatchError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from filevault.domain.events import (
    DomainEvent,
    DuplicateUploadDetectedEvent,
    FileDeletedEvent,
    FileUploadedEvent,
)
from filevault.domain.file_management.value_objects import (
    FileCategory,
    FileStatus,
    UploadOptions,
)
from tests.fixtures.domain_fixtures import create_file_record, create_upload_item
from tests.fixtures.mock_repositories import InMemoryContentStore, InMemoryFileRecordRepository


@pytest.fixture
def captured_events(event_publisher):
    events = []
    event_publisher.subscribe(DomainEvent, events.append)
    return events


def _upload_one(file_manager, owner="user-1", **item_kwargs):
    result = file_manager.upload_files([create_upload_item(**item_kwargs)], None, owner)
    assert len(result.accepted) == 1, result.rejected
    return result.accepted[0]


class TestUpload:
    """Tests for upload_files."""

    def test_new_file_creates_uploading_record_and_blob(
        self, file_manager, file_repository, content_store
    ):
        # Arrange
        item = create_upload_item(original_name="cv.pdf", content=b"x" * 100)

        # Act
        result = file_manager.upload_files([item], None, "user-1")

        # Assert
        assert result.rejected == []
        accepted = result.accepted[0]
        assert accepted.duplicate is False
        assert accepted.status == "uploading"
        assert accepted.size_bytes == 100
        assert accepted.url is not None

        record = file_repository.get_any(accepted.file_id)
        assert record.status == FileStatus.UPLOADING
        assert record.related_entity_type == "user"
        assert record.related_entity_id == "user-1"
        assert record.metadata["etag"]
        assert "uploaded_at" in record.metadata
        assert content_store.blob(record.storage_key) == b"x" * 100

    def test_storage_key_is_namespaced_and_unpredictable(self, file_manager):
        first = _upload_one(file_manager, original_name="a.pdf", content=b"one")
        second = _upload_one(file_manager, original_name="a.pdf", content=b"two")

        assert first.storage_key.startswith("document/user-1/")
        assert first.storage_key.endswith(".pdf")
        assert first.storage_key != second.storage_key
        assert "a.pdf" not in first.storage_key

    def test_blob_is_tagged_with_uploader_and_encoded_name(self, file_manager, content_store):
        accepted = _upload_one(file_manager, original_name="résumé.pdf", content=b"abc")

        tags = content_store.tags(accepted.storage_key)
        assert tags["uploaded-by"] == "user-1"
        assert tags["original-name"] == "csOpc3Vtw6kucGRm"

    def test_same_content_twice_returns_existing_record(
        self, file_manager, file_repository, content_store
    ):
        first = _upload_one(file_manager, content=b"same bytes")

        second = _upload_one(file_manager, content=b"same bytes")

        assert second.file_id == first.file_id
        assert second.duplicate is True
        assert second.url is not None
        assert len(file_repository.all_records()) == 1
        assert len(content_store.put_calls) == 1

    def test_same_content_different_category_is_a_new_record(self, file_manager):
        as_document = file_manager.upload_files(
            [create_upload_item(content=b"same")], UploadOptions(category="document"), "user-1"
        ).accepted[0]
        as_passport = file_manager.upload_files(
            [create_upload_item(content=b"same")], UploadOptions(category="passport"), "user-1"
        ).accepted[0]

        assert as_document.file_id != as_passport.file_id
        assert as_passport.category == "passport"

    def test_same_content_different_owner_is_a_new_record(self, file_manager):
        mine = _upload_one(file_manager, owner="user-1", content=b"shared")
        theirs = _upload_one(file_manager, owner="user-2", content=b"shared")

        assert mine.file_id != theirs.file_id
        assert theirs.duplicate is False

    def test_duplicate_publishes_event(self, file_manager, captured_events):
        _upload_one(file_manager, content=b"dup")
        _upload_one(file_manager, content=b"dup")

        assert [type(e) for e in captured_events] == [
            FileUploadedEvent,
            DuplicateUploadDetectedEvent,
        ]

    def test_category_comes_from_field_name(self, file_manager):
        accepted = _upload_one(
            file_manager, field_name="avatar", original_name="me.png", mime_type="image/png"
        )
        assert accepted.category == "avatar"

    def test_one_bad_item_does_not_stop_the_batch(self, file_manager):
        items = [
            create_upload_item(original_name="good.pdf", content=b"good"),
            create_upload_item(original_name="evil.exe", mime_type="application/x-msdownload"),
            create_upload_item(original_name="also-good.txt", content=b"fine", mime_type="text/plain"),
        ]

        result = file_manager.upload_files(items, None, "user-1")

        assert [a.original_name for a in result.accepted] == ["good.pdf", "also-good.txt"]
        assert len(result.rejected) == 1
        assert result.rejected[0].original_name == "evil.exe"
        assert result.rejected[0].code == "INVALID_FILE_TYPE"

    @pytest.mark.parametrize(
        "kwargs, code",
        [
            ({"content": b""}, "EMPTY_FILE"),
            ({"content": b"x" * 1025}, "FILE_TOO_LARGE"),
            ({"original_name": "README"}, "MISSING_EXTENSION"),
            ({"original_name": "   "}, "MISSING_FILE_NAME"),
            ({"mime_type": "video/mp4"}, "INVALID_FILE_TYPE"),
        ],
    )
    def test_invalid_item_is_rejected_with_code(self, file_manager, content_store, kwargs, code):
        result = file_manager.upload_files([create_upload_item(**kwargs)], None, "user-1")

        assert result.accepted == []
        assert result.rejected[0].code == code
        assert content_store.put_calls == []

    def test_owner_quota_rejects_items_past_the_limit(self, file_manager):
        # 4096 byte quota, 1000 byte items
        items = [create_upload_item(content=bytes([i]) * 1000) for i in range(5)]

        result = file_manager.upload_files(items, None, "user-1")

        assert len(result.accepted) == 4
        assert len(result.rejected) == 1
        assert result.rejected[0].code == "STORAGE_QUOTA_EXCEEDED"
        assert file_manager.get_storage_usage("user-1") == 4000

    def test_deleted_files_free_quota(self, file_manager):
        items = [create_upload_item(content=bytes([i]) * 1000) for i in range(4)]
        accepted = file_manager.upload_files(items, None, "user-1").accepted
        file_manager.delete_file(accepted[0].file_id, "user-1", "user")

        result = file_manager.upload_files(
            [create_upload_item(content=b"z" * 1000)], None, "user-1"
        )

        assert len(result.accepted) == 1

    def test_store_failure_leaves_no_record(self, file_manager, file_repository, content_store):
        content_store.fail_put = True

        result = file_manager.upload_files([create_upload_item()], None, "user-1")

        assert result.accepted == []
        assert result.rejected[0].code == "CONTENT_STORE_ERROR"
        assert file_repository.all_records() == []

    def test_unexpected_store_error_rejects_only_that_item(self, file_manager, file_repository):
        class FlakyStore(InMemoryContentStore):
            """Second put fails with a transport error rather than a StorageError."""

            def put(self, key, data, content_type, tags=None):
                if len(self.put_calls) == 1:
                    self.put_calls.append(key)
                    raise ConnectionResetError("connection reset by peer")
                return super().put(key, data, content_type, tags)

        file_manager.content_store = FlakyStore()
        items = [
            create_upload_item(original_name=f"doc-{i}.pdf", content=f"body-{i}".encode())
            for i in range(3)
        ]

        result = file_manager.upload_files(items, None, "user-1")

        assert [a.original_name for a in result.accepted] == ["doc-0.pdf", "doc-2.pdf"]
        assert len(result.rejected) == 1
        assert result.rejected[0].original_name == "doc-1.pdf"
        assert result.rejected[0].code == "UPLOAD_FAILED"
        assert len(file_repository.all_records()) == 2

    def test_unexpected_insert_error_removes_blob(self, file_manager, content_store):
        class BrokenRepository(InMemoryFileRecordRepository):
            def add(self, record):
                raise RuntimeError("driver crashed")

        file_manager.file_repo = BrokenRepository()

        result = file_manager.upload_files([create_upload_item()], None, "user-1")

        assert result.accepted == []
        assert result.rejected[0].code == "UPLOAD_FAILED"
        assert content_store.delete_calls == content_store.put_calls
        assert content_store.blob_count() == 0

    def test_lost_insert_race_returns_winner_and_removes_blob(self, content_store, file_manager):
        winner = create_file_record(content=b"raced")

        class RacingRepository(InMemoryFileRecordRepository):
            """Lookup misses the winner, insert then hits the unique index."""

            def find_live_duplicate(self, owner_id, content_hash, category):
                if not getattr(self, "_missed", False):
                    self._missed = True
                    return None
                return super().find_live_duplicate(owner_id, content_hash, category)

        repository = RacingRepository()
        repository.put_record(winner)
        file_manager.file_repo = repository

        result = file_manager.upload_files([create_upload_item(content=b"raced")], None, "user-1")

        accepted = result.accepted[0]
        assert accepted.file_id == winner.id
        assert accepted.duplicate is True
        assert content_store.delete_calls == content_store.put_calls
        assert content_store.blob_count() == 0
        assert len(repository.all_records()) == 1

    def test_entity_association_from_options(self, file_manager, file_repository):
        options = UploadOptions(related_entity_type="application", related_entity_id="app-9")

        accepted = file_manager.upload_files([create_upload_item()], options, "user-1").accepted[0]

        record = file_repository.get_any(accepted.file_id)
        assert (record.related_entity_type, record.related_entity_id) == ("application", "app-9")

    @pytest.mark.parametrize(
        "items, options, code",
        [
            ([], None, "NO_FILES"),
            ([create_upload_item()] * 6, None, "TOO_MANY_FILES"),
            ([create_upload_item()], UploadOptions(category="selfie"), "INVALID_CATEGORY"),
            ([create_upload_item()], UploadOptions(related_entity_type="invoice"), "INVALID_ENTITY_TYPE"),
            ([create_upload_item()], UploadOptions(related_entity_id="  "), "INVALID_ENTITY_ID"),
        ],
    )
    def test_invalid_request_raises_before_any_write(
        self, file_manager, content_store, items, options, code
    ):
        with pytest.raises(ValidationError) as exc_info:
            file_manager.upload_files(items, options, "user-1")

        assert exc_info.value.code == code
        assert content_store.put_calls == []


class TestListing:
    """Tests for get_user_files."""

    def _seed(self, file_repository, count, owner="user-1"):
        base = datetime.utcnow() - timedelta(hours=1)
        records = []
        for i in range(count):
            record = create_file_record(
                owner_id=owner, content=f"file-{i}".encode(), created_at=base + timedelta(minutes=i)
            )
            records.append(file_repository.put_record(record))
        return records

    def test_newest_first_with_pagination_metadata(self, file_manager, file_repository):
        records = self._seed(file_repository, 5)

        page = file_manager.get_user_files("user-1", "user", page=1, limit=2)

        assert [v.record.id for v in page.items] == [records[4].id, records[3].id]
        assert page.total == 5
        assert page.total_pages == 3
        assert page.has_next_page is True
        assert page.has_prev_page is False

    @pytest.mark.parametrize(
        "page, limit, expected_page, expected_limit",
        [
            (0, 0, 1, 1),
            (-3, 1000, 1, 100),
            ("2", "5", 2, 5),
            (None, None, 1, 20),
            ("abc", "xyz", 1, 20),
        ],
    )
    def test_pagination_is_clamped(
        self, file_manager, page, limit, expected_page, expected_limit
    ):
        result = file_manager.get_user_files("user-1", "user", page=page, limit=limit)

        assert result.page == expected_page
        assert result.limit == expected_limit

    def test_deleted_files_are_hidden(self, file_manager, file_repository):
        records = self._seed(file_repository, 2)
        file_manager.delete_file(records[0].id, "user-1", "user")

        page = file_manager.get_user_files("user-1", "user")

        assert [v.record.id for v in page.items] == [records[1].id]

    def test_category_filter(self, file_manager, file_repository):
        self._seed(file_repository, 2)
        avatar = file_repository.put_record(
            create_file_record(content=b"face", category=FileCategory.AVATAR)
        )

        page = file_manager.get_user_files("user-1", "user", category="avatar")

        assert [v.record.id for v in page.items] == [avatar.id]

    def test_invalid_category_filter(self, file_manager):
        with pytest.raises(ValidationError):
            file_manager.get_user_files("user-1", "user", category="selfie")

    def test_listing_another_owner_requires_elevated_role(self, file_manager, file_repository):
        self._seed(file_repository, 1, owner="user-2")

        with pytest.raises(PermissionDeniedError):
            file_manager.get_user_files("user-1", "user", target_owner_id="user-2")

        page = file_manager.get_user_files("admin-1", "admin", target_owner_id="user-2")
        assert page.total == 1

    def test_presign_failure_degrades_to_null_url(self, file_manager, file_repository, content_store):
        self._seed(file_repository, 2)
        content_store.fail_presign = True

        page = file_manager.get_user_files("user-1", "user")

        assert len(page.items) == 2
        assert all(view.url is None for view in page.items)


class TestGetFileById:
    """Tests for get_file_by_id."""

    def test_owner_gets_file_with_url(self, file_manager, file_repository):
        record = file_repository.put_record(create_file_record())

        view = file_manager.get_file_by_id(record.id, "user-1", "user")

        assert view.record.id == record.id
        assert view.url.startswith("https://storage.test/")

    def test_missing_file(self, file_manager):
        with pytest.raises(NotFoundError):
            file_manager.get_file_by_id("nope", "user-1", "user")

    def test_foreign_file_denied_without_capability(self, file_manager, file_repository):
        record = file_repository.put_record(create_file_record(owner_id="user-2"))

        with pytest.raises(PermissionDeniedError):
            file_manager.get_file_by_id(record.id, "user-1", "user")

        assert file_manager.get_file_by_id(record.id, "admin-1", "super_admin").record.id == record.id

    def test_increment_download(self, file_manager, file_repository):
        record = file_repository.put_record(create_file_record())

        view = file_manager.get_file_by_id(record.id, "user-1", "user", increment_download=True)
        file_manager.get_file_by_id(record.id, "user-1", "user", increment_download=True)

        assert view.record.download_count == 1
        assert file_repository.get_any(record.id).download_count == 2

    def test_presign_failure_raises_storage_error(self, file_manager, file_repository, content_store):
        record = file_repository.put_record(create_file_record())
        content_store.fail_presign = True

        with pytest.raises(StorageError):
            file_manager.get_file_by_id(record.id, "user-1", "user", increment_download=True)

        assert file_repository.get_any(record.id).download_count == 0


class TestDelete:
    """Tests for delete_file."""

    def test_soft_deletes_record_and_removes_blob(
        self, file_manager, file_repository, content_store, captured_events
    ):
        accepted = _upload_one(file_manager)

        deleted = file_manager.delete_file(accepted.file_id, "user-1", "user")

        assert deleted.status == FileStatus.DELETED
        assert deleted.deleted_at is not None
        assert file_repository.get_any(accepted.file_id).status == FileStatus.DELETED
        assert not content_store.exists(accepted.storage_key)
        assert isinstance(captured_events[-1], FileDeletedEvent)
        assert captured_events[-1].blob_removed is True

    def test_blob_failure_is_swallowed(self, file_manager, file_repository, content_store):
        accepted = _upload_one(file_manager)
        content_store.fail_delete = True

        deleted = file_manager.delete_file(accepted.file_id, "user-1", "user")

        assert deleted.status == FileStatus.DELETED
        assert content_store.exists(accepted.storage_key)

    def test_unexpected_blob_error_does_not_fail_the_call(
        self, file_manager, file_repository, content_store, captured_events
    ):
        accepted = _upload_one(file_manager)

        def reset(key):
            raise ConnectionResetError("connection reset by peer")

        content_store.delete = reset

        deleted = file_manager.delete_file(accepted.file_id, "user-1", "user")

        assert deleted.status == FileStatus.DELETED
        assert file_repository.get_any(accepted.file_id).status == FileStatus.DELETED
        assert captured_events[-1].blob_removed is False

    def test_second_delete_is_not_found(self, file_manager):
        accepted = _upload_one(file_manager)
        file_manager.delete_file(accepted.file_id, "user-1", "user")

        with pytest.raises(NotFoundError):
            file_manager.delete_file(accepted.file_id, "user-1", "user")

    def test_foreign_delete_denied(self, file_manager, file_repository):
        accepted = _upload_one(file_manager, owner="user-2")

        with pytest.raises(PermissionDeniedError):
            file_manager.delete_file(accepted.file_id, "user-1", "user")

        assert file_repository.get_any(accepted.file_id).status == FileStatus.UPLOADING

    def test_reupload_after_delete_creates_new_record(self, file_manager):
        first = _upload_one(file_manager, content=b"again")
        file_manager.delete_file(first.file_id, "user-1", "user")

        second = _upload_one(file_manager, content=b"again")

        assert second.file_id != first.file_id
        assert second.duplicate is False


class TestActivate:
    """Tests for activate_files."""

    def test_activates_and_rebinds(self, file_manager, file_repository):
        first = _upload_one(file_manager, content=b"1")
        second = _upload_one(file_manager, content=b"2")

        activated = file_manager.activate_files(
            [first.file_id, second.file_id, first.file_id], "user-1", "application", "app-1"
        )

        assert {r.id for r in activated} == {first.file_id, second.file_id}
        for file_id in (first.file_id, second.file_id):
            record = file_repository.get_any(file_id)
            assert record.status == FileStatus.ACTIVE
            assert (record.related_entity_type, record.related_entity_id) == ("application", "app-1")

    def test_active_file_can_be_rebound(self, file_manager, file_repository):
        accepted = _upload_one(file_manager)
        file_manager.activate_files([accepted.file_id], "user-1", "application", "app-1")

        file_manager.activate_files([accepted.file_id], "user-1", "profile", "p-1")

        record = file_repository.get_any(accepted.file_id)
        assert record.status == FileStatus.ACTIVE
        assert record.related_entity_id == "p-1"

    def test_mismatch_changes_nothing(self, file_manager, file_repository):
        mine = _upload_one(file_manager, content=b"mine")
        theirs = _upload_one(file_manager, owner="user-2", content=b"theirs")

        with pytest.raises(FileSetMismatchError) as exc_info:
            file_manager.activate_files(
                [mine.file_id, theirs.file_id], "user-1", "application", "app-1"
            )

        assert exc_info.value.code == "FILES_NOT_FOUND_OR_ACCESS_DENIED"
        assert exc_info.value.details["requested_count"] == 2
        assert exc_info.value.details["found_count"] == 1
        assert file_repository.get_any(mine.file_id).status == FileStatus.UPLOADING

    def test_deleted_file_cannot_be_activated(self, file_manager):
        accepted = _upload_one(file_manager)
        file_manager.delete_file(accepted.file_id, "user-1", "user")

        with pytest.raises(FileSetMismatchError):
            file_manager.activate_files([accepted.file_id], "user-1", "application", "app-1")

    @pytest.mark.parametrize(
        "file_ids, entity_type, entity_id, code",
        [
            ([], "application", "a", "NO_FILES"),
            (["1", "2", "3", "4", "5", "6"], "application", "a", "TOO_MANY_FILES"),
            (["1", " "], "application", "a", "INVALID_FILE_ID"),
            (["1"], "invoice", "a", "INVALID_ENTITY_TYPE"),
            (["1"], "application", "", "INVALID_ENTITY_ID"),
        ],
    )
    def test_validation(self, file_manager, file_ids, entity_type, entity_id, code):
        with pytest.raises(ValidationError) as exc_info:
            file_manager.activate_files(file_ids, "user-1", entity_type, entity_id)
        assert exc_info.value.code == code


class TestVerify:
    """Tests for verify_file."""

    def test_admin_verifies_active_file(self, file_manager):
        accepted = _upload_one(file_manager)
        file_manager.activate_files([accepted.file_id], "user-1", "application", "app-1")

        record = file_manager.verify_file(accepted.file_id, "admin", "admin-1")

        assert record.is_verified is True
        assert record.verified_by == "admin-1"
        assert record.verified_at is not None

    def test_can_clear_verification(self, file_manager):
        accepted = _upload_one(file_manager)
        file_manager.activate_files([accepted.file_id], "user-1", "application", "app-1")
        file_manager.verify_file(accepted.file_id, "admin", "admin-1")

        record = file_manager.verify_file(accepted.file_id, "admin", "admin-1", verified=False)

        assert record.is_verified is False

    def test_uploading_file_is_not_found(self, file_manager):
        accepted = _upload_one(file_manager)

        with pytest.raises(NotFoundError):
            file_manager.verify_file(accepted.file_id, "admin", "admin-1")

    def test_requires_elevated_role(self, file_manager):
        accepted = _upload_one(file_manager)

        with pytest.raises(PermissionDeniedError):
            file_manager.verify_file(accepted.file_id, "user", "user-1")


class TestCleanupOldFiles:
    """Tests for cleanup_old_files."""

    def test_deletes_only_old_uploading_records(
        self, file_manager, file_repository, content_store
    ):
        old = datetime.utcnow() - timedelta(days=10)
        stale = file_repository.put_record(create_file_record(content=b"stale", created_at=old))
        content_store.put(stale.storage_key, b"stale", "application/pdf")
        active = file_repository.put_record(
            create_file_record(content=b"active", created_at=old, status=FileStatus.ACTIVE)
        )
        fresh = file_repository.put_record(create_file_record(content=b"fresh"))

        report = file_manager.cleanup_old_files("admin", "admin-1")

        assert report.deleted == [stale.id]
        assert report.total == 1
        assert report.errors == []
        assert file_repository.get_any(stale.id).status == FileStatus.DELETED
        assert file_repository.get_any(active.id).status == FileStatus.ACTIVE
        assert file_repository.get_any(fresh.id).status == FileStatus.UPLOADING
        assert not content_store.exists(stale.storage_key)

    def test_custom_age(self, file_manager, file_repository):
        record = file_repository.put_record(
            create_file_record(created_at=datetime.utcnow() - timedelta(days=2))
        )

        assert file_manager.cleanup_old_files("admin", "admin-1", days_old=7).deleted == []
        assert file_manager.cleanup_old_files("admin", "admin-1", days_old=1).deleted == [record.id]

    @pytest.mark.parametrize("days_old", [0, 31, -1, "7", 2.5, True])
    def test_days_old_out_of_range(self, file_manager, days_old):
        with pytest.raises(ValidationError):
            file_manager.cleanup_old_files("admin", "admin-1", days_old=days_old)

    def test_requires_elevated_role(self, file_manager):
        with pytest.raises(PermissionDeniedError):
            file_manager.cleanup_old_files("user", "user-1")

    def test_unconfigured_role_is_denied(self, file_manager):
        with pytest.raises(PermissionDeniedError):
            file_manager.cleanup_old_files("system", "system:cleanup")


class TestCleanupDuplicates:
    """Tests for cleanup_duplicate_files."""

    def test_keeps_earliest_of_each_group(self, file_manager, file_repository):
        base = datetime.utcnow() - timedelta(days=1)
        keeper = file_repository.put_record(create_file_record(content=b"dup", created_at=base))
        extra = file_repository.put_record(
            create_file_record(content=b"dup", created_at=base + timedelta(minutes=5))
        )
        unique = file_repository.put_record(create_file_record(content=b"unique"))

        report = file_manager.cleanup_duplicate_files("admin", "admin-1")

        assert report.deleted == [extra.id]
        assert file_repository.get_any(keeper.id).is_live()
        assert file_repository.get_any(unique.id).is_live()
        assert not file_repository.get_any(extra.id).is_live()

    def test_tie_keeps_smallest_id(self, file_manager, file_repository):
        same_time = datetime.utcnow() - timedelta(days=1)
        a = file_repository.put_record(
            create_file_record(content=b"tie", created_at=same_time, file_id="aaaa")
        )
        b = file_repository.put_record(
            create_file_record(content=b"tie", created_at=same_time, file_id="bbbb")
        )

        report = file_manager.cleanup_duplicate_files("admin", "admin-1")

        assert report.deleted == [b.id]
        assert file_repository.get_any(a.id).is_live()

    def test_second_run_finds_nothing(self, file_manager, file_repository):
        file_repository.put_record(create_file_record(content=b"d"))
        file_repository.put_record(create_file_record(content=b"d"))

        file_manager.cleanup_duplicate_files("admin", "admin-1")

        assert file_manager.cleanup_duplicate_files("admin", "admin-1").total == 0

    def test_requires_elevated_role(self, file_manager):
        with pytest.raises(PermissionDeniedError):
            file_manager.cleanup_duplicate_files("user", "user-1")
