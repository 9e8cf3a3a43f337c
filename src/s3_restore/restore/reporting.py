"""Reporting sinks for restore progress and results."""

from typing import Protocol

from s3_restore.core import get_logger
from s3_restore.schemas import PrefixResult, RestoreOutcome

logger = get_logger(__name__)


class RestoreReporter(Protocol):
    """Receives progress events from restore workers.

    Methods may be called concurrently from several worker threads.
    """

    def prefix_started(self, prefix: str) -> None: ...

    def marker_found(self, prefix: str, key: str) -> None:
        """A marker would be removed (dry run)."""
        ...

    def marker_restored(self, prefix: str, key: str, elapsed_seconds: float) -> None:
        """A marker was removed."""
        ...

    def prefix_finished(self, result: PrefixResult) -> None: ...

    def run_finished(self, outcome: RestoreOutcome) -> None: ...


class LogReporter(RestoreReporter):
    """Reporter that writes every event to the structured log."""

    def prefix_started(self, prefix: str) -> None:
        logger.info("Prefix restore started", prefix=prefix)

    def marker_found(self, prefix: str, key: str) -> None:
        logger.info("Would have restored object", prefix=prefix, key=key)

    def marker_restored(self, prefix: str, key: str, elapsed_seconds: float) -> None:
        logger.info(
            "Object restored", prefix=prefix, key=key, elapsed_seconds=elapsed_seconds
        )

    def prefix_finished(self, result: PrefixResult) -> None:
        logger.info(
            "Prefix restore finished",
            prefix=result.prefix,
            status=result.status.value,
            restored_count=result.restored_count,
            candidate_count=result.candidate_count,
            elapsed_seconds=result.elapsed_seconds,
        )

    def run_finished(self, outcome: RestoreOutcome) -> None:
        logger.info(
            "Restore run finished",
            mode=outcome.mode.value,
            succeeded=outcome.succeeded,
            total_restored=outcome.total_restored,
            total_candidates=outcome.total_candidates,
            elapsed_seconds=outcome.elapsed_seconds,
        )
