"""Tests for single-prefix restoration."""

import pytest

from s3_restore.core.exceptions import (
    PrefixRestoreError,
    TransientStorageError,
    ValidationError,
)
from s3_restore.restore.prefix_restorer import PrefixRestorer, is_restorable
from s3_restore.schemas import DeleteMarkerEntry, PrefixStatus, RestoreMode

BUCKET = "restore-bucket"


def entry(key, version_id="v1", is_latest=True):
    return DeleteMarkerEntry(key=key, version_id=version_id, is_latest=is_latest)


class TestIsRestorable:
    """Test delete-marker eligibility."""

    def test_latest_marker_under_prefix(self):
        """Test latest marker with matching key qualifies."""
        assert is_restorable(entry("logs/a.txt"), "logs/") is True

    def test_non_latest_marker(self):
        """Test non-latest markers never qualify."""
        assert is_restorable(entry("logs/a.txt", is_latest=False), "logs/") is False

    def test_key_outside_prefix(self):
        """Test keys returned outside the prefix are rejected."""
        assert is_restorable(entry("logsx/a.txt"), "logs/") is False


class TestPrefixRestorer:
    """Test prefix restoration against a fake version store."""

    def test_apply_restores_only_qualifying_markers(self, fake_store, reporter):
        """Test apply mode deletes latest markers under the prefix only."""
        store = fake_store(
            pages={
                "logs/": [
                    [
                        entry("logs/a.txt", "va"),
                        entry("logs/b.txt", "vb", is_latest=False),
                        entry("other/c.txt", "vc"),
                    ]
                ]
            }
        )
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY, reporter)

        result = restorer.restore("logs/")

        assert result.status is PrefixStatus.COMPLETED
        assert result.restored_count == 1
        assert result.candidate_count == 1
        assert store.deleted == [("logs/a.txt", "va")]
        assert reporter.restored == ["logs/a.txt"]

    def test_dry_run_never_deletes(self, fake_store, reporter):
        """Test dry run reports candidates without deleting."""
        store = fake_store(
            pages={"logs/": [[entry("logs/a.txt"), entry("logs/b.txt", "vb")]]}
        )
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.DRY_RUN, reporter)

        result = restorer.restore("logs/")

        assert result.restored_count == 0
        assert result.candidate_count == 2
        assert store.deleted == []
        assert reporter.found == ["logs/a.txt", "logs/b.txt"]

    def test_pagination_visits_every_page_once(self, fake_store, reporter):
        """Test markers across several pages are each restored exactly once."""
        pages = [
            [entry("logs/a.txt", "va")],
            [],
            [entry("logs/b.txt", "vb"), entry("logs/c.txt", "vc", is_latest=False)],
            [entry("logs/d.txt", "vd")],
        ]
        store = fake_store(pages={"logs/": pages})
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY, reporter)

        result = restorer.restore("logs/")

        assert result.restored_count == 3
        assert sorted(store.deleted) == [
            ("logs/a.txt", "va"),
            ("logs/b.txt", "vb"),
            ("logs/d.txt", "vd"),
        ]
        assert store.list_calls == [("logs/", page) for page in range(4)]

    def test_empty_listing(self, fake_store, reporter):
        """Test prefix with no markers completes with zero counts."""
        store = fake_store()
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY, reporter)

        result = restorer.restore("nothing/")

        assert result.status is PrefixStatus.COMPLETED
        assert result.restored_count == 0
        assert store.list_calls == [("nothing/", 0)]

    def test_storage_error_carries_partial_result(self, fake_store, reporter):
        """Test a failing page raises PrefixRestoreError with the partial count."""
        store = fake_store(
            pages={"logs/": [[entry("logs/a.txt", "va")], [entry("logs/b.txt")]]},
            failures={"logs/": 1},
        )
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY, reporter)

        with pytest.raises(PrefixRestoreError) as exc_info:
            restorer.restore("logs/")

        error = exc_info.value
        assert error.prefix == "logs/"
        assert error.result.status is PrefixStatus.FAILED
        assert error.result.restored_count == 1
        assert "SlowDown" in error.result.error
        assert isinstance(error.__cause__, TransientStorageError)
        assert reporter.finished == [error.result]

    def test_unexpected_error_carries_partial_result(self, fake_store, reporter):
        """Test a non-storage failure mid-listing is wrapped like a storage one."""
        store = fake_store(pages={"logs/": [[entry("logs/a.txt", "va")], []]})
        original_list = store.list_versions_page

        def list_page(bucket, prefix, cursor):
            if cursor is not None:
                raise KeyError("VersionId")
            return original_list(bucket, prefix, cursor)

        store.list_versions_page = list_page
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY, reporter)

        with pytest.raises(PrefixRestoreError) as exc_info:
            restorer.restore("logs/")

        error = exc_info.value
        assert error.result.status is PrefixStatus.FAILED
        assert error.result.restored_count == 1
        assert error.result.error == "KeyError: 'VersionId'"
        assert isinstance(error.__cause__, KeyError)
        assert reporter.finished == [error.result]

    def test_empty_prefix_rejected(self, fake_store):
        """Test empty prefix raises ValidationError before any listing."""
        store = fake_store()
        restorer = PrefixRestorer(store, BUCKET, RestoreMode.APPLY)

        with pytest.raises(ValidationError, match="prefix must not be empty"):
            restorer.restore("")

        assert store.list_calls == []
