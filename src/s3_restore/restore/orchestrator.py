"""Bounded-concurrency orchestration of prefix restores.

The orchestrator fans prefixes out over a fixed-size thread pool. Each worker
returns its own PrefixResult; results are merged only in the calling thread,
so no counter is shared between workers.

Failure policy:
    fail_fast=True (default): the first failed prefix stops dispatch. Prefixes
    that have not started yet are recorded as SKIPPED, in-flight prefixes are
    allowed to drain.
    fail_fast=False: every prefix is attempted regardless of sibling failures.

Either way a run with any FAILED or SKIPPED prefix raises RestoreFailedError
carrying the full per-prefix outcome.
"""

import threading
import time
import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from s3_restore.core import get_logger, get_tracer, log_context
from s3_restore.core.exceptions import (
    ConfigurationError,
    EmptyPrefixSetWarning,
    PrefixRestoreError,
    RestoreFailedError,
    ValidationError,
)
from s3_restore.objectstorage.clients import S3ClientConfig
from s3_restore.objectstorage.versions import S3VersionStore, VersionStore
from s3_restore.restore.prefix_restorer import PrefixRestorer, describe_error
from s3_restore.restore.reporting import LogReporter, RestoreReporter
from s3_restore.schemas import (
    PrefixResult,
    PrefixStatus,
    RestoreConfig,
    RestoreMode,
    RestoreOutcome,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class RestoreOrchestrator:
    """Runs a set of prefixes to completion under a concurrency cap."""

    def __init__(
        self,
        store: VersionStore,
        config: RestoreConfig,
        reporter: Optional[RestoreReporter] = None,
    ):
        """Initialize restore orchestrator.

        Args:
            store: Storage backend shared by all workers
            config: Run configuration (bucket, mode, concurrency, policy)
            reporter: Progress sink, defaults to structured logging
        """
        self.store = store
        self.config = config
        self.reporter = reporter or LogReporter()
        self._stop = threading.Event()
        logger.info(
            "Restore orchestrator initialized",
            bucket=config.bucket,
            mode=config.mode.value,
            max_concurrency=config.max_concurrency,
            fail_fast=config.fail_fast,
        )

    def cancel(self) -> None:
        """Stop dispatching new prefixes; running prefixes finish normally.

        May be called before run(), in which case every prefix is skipped.
        The flag is cleared when run() returns, so the orchestrator can be
        reused for another run.
        """
        logger.warning("Restore run cancelled", bucket=self.config.bucket)
        self._stop.set()

    def run(self, prefixes: Sequence[str]) -> RestoreOutcome:
        """Restore every prefix and aggregate the results.

        Args:
            prefixes: Prefixes to restore, processed independently

        Returns:
            RestoreOutcome with one result per prefix, in input order

        Raises:
            ValidationError: If any prefix is empty
            AuthError: If the bucket check fails on credentials
            NotFoundError: If the bucket does not exist
            RestoreFailedError: If any prefix failed or was never attempted
        """
        try:
            return self._run(list(prefixes))
        finally:
            self._stop.clear()

    def _run(self, prefixes: list[str]) -> RestoreOutcome:
        started = time.perf_counter()

        if not prefixes:
            warnings.warn(
                "No prefixes to restore; nothing to do",
                EmptyPrefixSetWarning,
                stacklevel=3,
            )
            outcome = RestoreOutcome(
                mode=self.config.mode, elapsed_seconds=time.perf_counter() - started
            )
            self.reporter.run_finished(outcome)
            return outcome

        if not all(prefixes):
            raise ValidationError("prefixes must not contain empty strings")

        logger.info(
            "Starting restore run",
            bucket=self.config.bucket,
            mode=self.config.mode.value,
            prefix_count=len(prefixes),
        )

        with tracer.start_as_current_span("restore_run") as span:
            span.set_attribute("s3.bucket", self.config.bucket)
            span.set_attribute("restore.prefix_count", len(prefixes))

            self.store.verify_bucket(self.config.bucket)
            results = self._dispatch(prefixes)

        outcome = RestoreOutcome(
            mode=self.config.mode,
            results=tuple(results),
            elapsed_seconds=time.perf_counter() - started,
        )
        self.reporter.run_finished(outcome)

        if not outcome.succeeded:
            raise RestoreFailedError(outcome)
        return outcome

    def _dispatch(self, prefixes: list[str]) -> list[PrefixResult]:
        restorer = PrefixRestorer(
            self.store, self.config.bucket, self.config.mode, self.reporter
        )
        results: list[Optional[PrefixResult]] = [None] * len(prefixes)
        aborted = False

        with ThreadPoolExecutor(
            max_workers=self.config.max_concurrency, thread_name_prefix="s3-restore"
        ) as executor:
            futures = {
                executor.submit(self._restore_one, restorer, prefix): index
                for index, prefix in enumerate(prefixes)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except PrefixRestoreError as e:
                    results[index] = e.result
                    if self.config.fail_fast and not aborted:
                        aborted = True
                        logger.error(
                            "Aborting restore run after prefix failure",
                            prefix=e.prefix,
                            error=str(e.error),
                        )

        return [result for result in results if result is not None]

    def _restore_one(self, restorer: PrefixRestorer, prefix: str) -> PrefixResult:
        with log_context(
            bucket=self.config.bucket, mode=self.config.mode.value, prefix=prefix
        ):
            if self._stop.is_set():
                logger.info("Prefix skipped")
                return PrefixResult(prefix=prefix, status=PrefixStatus.SKIPPED)
            try:
                return restorer.restore(prefix)
            except PrefixRestoreError:
                # Set before the worker can pick up the next queued prefix
                if self.config.fail_fast:
                    self._stop.set()
                raise
            except Exception as e:
                # Reporter failures outside the listing loop; the count is unknown
                logger.exception("Prefix restore crashed")
                result = PrefixResult(
                    prefix=prefix, status=PrefixStatus.FAILED, error=describe_error(e)
                )
                if self.config.fail_fast:
                    self._stop.set()
                raise PrefixRestoreError(prefix, result, e) from e


def restore_prefixes(
    prefixes: Sequence[str],
    bucket: str,
    mode: RestoreMode = RestoreMode.DRY_RUN,
    max_concurrency: Optional[int] = None,
    fail_fast: Optional[bool] = None,
    client_config: Optional[S3ClientConfig] = None,
    reporter: Optional[RestoreReporter] = None,
) -> RestoreOutcome:
    """Convenience function to restore prefixes in an S3 bucket.

    Args:
        prefixes: Prefixes to restore
        bucket: Target bucket name
        mode: DRY_RUN (report only) or APPLY (remove delete markers)
        max_concurrency: Prefixes processed at once (settings default if None)
        fail_fast: Abort on first failure (settings default if None)
        client_config: S3 client configuration (default credential chain if None)
        reporter: Progress sink

    Returns:
        RestoreOutcome for the run

    Raises:
        ConfigurationError: If bucket or concurrency settings are invalid
    """
    overrides = {"max_concurrency": max_concurrency, "fail_fast": fail_fast}
    try:
        config = RestoreConfig(
            bucket=bucket,
            mode=mode,
            **{name: value for name, value in overrides.items() if value is not None},
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid restore configuration: {e}") from e

    if client_config is None:
        client_config = S3ClientConfig(
            max_pool_connections=max(10, config.max_concurrency)
        )

    store = S3VersionStore(client_config, page_size=config.page_size)
    return RestoreOrchestrator(store, config, reporter).run(prefixes)
