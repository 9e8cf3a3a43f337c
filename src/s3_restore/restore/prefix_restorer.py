"""Restoration of the delete markers under a single prefix."""

import time
from typing import Optional

from s3_restore.core import get_logger, get_tracer
from s3_restore.core.exceptions import PrefixRestoreError, StorageError, ValidationError
from s3_restore.objectstorage.versions import VersionStore, iter_delete_marker_pages
from s3_restore.restore.reporting import LogReporter, RestoreReporter
from s3_restore.schemas import (
    DeleteMarkerEntry,
    PrefixResult,
    PrefixStatus,
    RestoreMode,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)


def describe_error(error: Exception) -> str:
    """Storage errors carry their own context; name the type of anything else."""
    if isinstance(error, StorageError):
        return str(error)
    return f"{type(error).__name__}: {error}"


def is_restorable(marker: DeleteMarkerEntry, prefix: str) -> bool:
    """Return True if the marker hides the current version of a key under prefix.

    The prefix is re-checked locally because some S3-compatible backends
    return keys outside the requested prefix near version boundaries.
    """
    return marker.is_latest and marker.key.startswith(prefix)


class PrefixRestorer:
    """Drives one prefix through its full version listing."""

    def __init__(
        self,
        store: VersionStore,
        bucket: str,
        mode: RestoreMode,
        reporter: Optional[RestoreReporter] = None,
    ):
        """Initialize prefix restorer.

        Args:
            store: Storage backend used for listing and deleting
            bucket: Target bucket name
            mode: DRY_RUN only reports candidates, APPLY removes the markers
            reporter: Progress sink, defaults to structured logging
        """
        self.store = store
        self.bucket = bucket
        self.mode = mode
        self.reporter = reporter or LogReporter()

    def restore(self, prefix: str) -> PrefixResult:
        """Restore every latest delete marker under a prefix.

        Args:
            prefix: Non-empty key prefix

        Returns:
            PrefixResult with status COMPLETED

        Raises:
            ValidationError: If prefix is empty
            PrefixRestoreError: If any listing, delete or reporting call fails;
                the partial result is attached to the exception
        """
        if not prefix:
            raise ValidationError("prefix must not be empty")

        started = time.perf_counter()
        restored = 0
        candidates = 0
        self.reporter.prefix_started(prefix)

        with tracer.start_as_current_span("restore_prefix") as span:
            span.set_attribute("s3.bucket", self.bucket)
            span.set_attribute("s3.prefix", prefix)
            try:
                for page in iter_delete_marker_pages(self.store, self.bucket, prefix):
                    for marker in page:
                        if not is_restorable(marker, prefix):
                            continue
                        candidates += 1
                        if self.mode is RestoreMode.DRY_RUN:
                            self.reporter.marker_found(prefix, marker.key)
                            continue
                        delete_started = time.perf_counter()
                        self.store.delete_marker(
                            self.bucket, marker.key, marker.version_id
                        )
                        restored += 1
                        self.reporter.marker_restored(
                            prefix, marker.key, time.perf_counter() - delete_started
                        )
            except Exception as e:
                result = PrefixResult(
                    prefix=prefix,
                    status=PrefixStatus.FAILED,
                    restored_count=restored,
                    candidate_count=candidates,
                    elapsed_seconds=time.perf_counter() - started,
                    error=describe_error(e),
                )
                logger.error(
                    "Prefix restore failed",
                    prefix=prefix,
                    restored_count=restored,
                    error=result.error,
                    exc_info=not isinstance(e, StorageError),
                )
                span.record_exception(e)
                self.reporter.prefix_finished(result)
                raise PrefixRestoreError(prefix, result, e) from e

            span.set_attribute("restore.restored_count", restored)

        result = PrefixResult(
            prefix=prefix,
            status=PrefixStatus.COMPLETED,
            restored_count=restored,
            candidate_count=candidates,
            elapsed_seconds=time.perf_counter() - started,
        )
        self.reporter.prefix_finished(result)
        return result
