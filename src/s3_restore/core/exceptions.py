"""Exception hierarchy for s3-restore."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3_restore.schemas import PrefixResult, RestoreOutcome


class S3RestoreError(Exception):
    """Base exception for all s3-restore errors."""

    pass


class ValidationError(S3RestoreError):
    """Raised when validation fails."""

    pass


class ConfigurationError(ValidationError):
    """Raised when required configuration is missing or empty."""

    pass


class StorageError(S3RestoreError):
    """Raised when a storage API call fails."""

    pass


class AuthError(StorageError):
    """Raised when credentials are missing, invalid or lack permission."""

    pass


class NotFoundError(StorageError):
    """Raised when the target bucket does not exist."""

    pass


class TransientStorageError(StorageError):
    """Raised on network, throttling or server-side failures."""

    pass


class PrefixRestoreError(S3RestoreError):
    """Raised when restoring a single prefix fails.

    The partial result (markers restored before the failure, elapsed time)
    is kept on ``result`` and the underlying error is chained as ``__cause__``.
    The error is usually a StorageError; anything else points to malformed
    listing data or a failing reporter.
    """

    def __init__(self, prefix: str, result: "PrefixResult", error: Exception):
        self.prefix = prefix
        self.result = result
        self.error = error
        super().__init__(f"Failed to restore prefix '{prefix}': {error}")


class RestoreFailedError(S3RestoreError):
    """Raised when a run finishes with failed or never-attempted prefixes."""

    def __init__(self, outcome: "RestoreOutcome"):
        self.outcome = outcome
        failed = [result.prefix for result in outcome.failed]
        skipped = len(outcome.skipped)
        super().__init__(
            f"Restore failed for {len(failed)} prefix(es) {failed}; "
            f"{skipped} prefix(es) not attempted"
        )


class EmptyPrefixSetWarning(UserWarning):
    """Emitted when a run is started with no prefixes."""

    pass
