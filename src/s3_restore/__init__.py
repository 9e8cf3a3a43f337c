"""Restore deleted objects in versioned S3 buckets.

This package removes the latest delete marker of every key under a list of
prefixes, making the previous object version visible again. Prefixes are
processed concurrently under a configurable limit, and each run can be a dry
run that only reports what would be restored.

Key Features:
    - Bounded-concurrency restore orchestrator
    - Cursor-driven version listing per prefix
    - Dry-run reporting and apply mode
    - Per-prefix status reporting on failure
    - CLI interface

Recommended Usage:

    >>> from s3_restore import RestoreMode, restore_prefixes
    >>> outcome = restore_prefixes(
    ...     ["orders/2020/", "orders/2021/"],
    ...     bucket="my-bucket",
    ...     mode=RestoreMode.APPLY,
    ... )
    >>> outcome.total_restored

Advanced Usage:

    >>> from s3_restore.objectstorage import S3VersionStore
    >>> from s3_restore.restore import RestoreOrchestrator
"""

__version__ = "0.1.0"

from .objectstorage import S3ClientConfig, S3VersionStore, VersionStore
from .prefixes import load_prefixes, parse_prefixes
from .restore import PrefixRestorer, RestoreOrchestrator, restore_prefixes
from .schemas import (
    DeleteMarkerEntry,
    ListingCursor,
    PrefixResult,
    PrefixStatus,
    RestoreConfig,
    RestoreMode,
    RestoreOutcome,
)

__all__ = [
    # Data model
    "DeleteMarkerEntry",
    "ListingCursor",
    "PrefixResult",
    "PrefixStatus",
    "RestoreConfig",
    "RestoreMode",
    "RestoreOutcome",
    # Storage
    "S3ClientConfig",
    "S3VersionStore",
    "VersionStore",
    # Restore
    "PrefixRestorer",
    "RestoreOrchestrator",
    "restore_prefixes",
    # Prefix source
    "load_prefixes",
    "parse_prefixes",
]
