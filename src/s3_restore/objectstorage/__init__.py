"""Object storage operations for S3-compatible services."""

from .clients import S3ClientConfig, S3ClientManager, translate_client_error
from .versions import S3VersionStore, VersionStore, iter_delete_marker_pages

__all__ = [
    "S3ClientConfig",
    "S3ClientManager",
    "S3VersionStore",
    "VersionStore",
    "iter_delete_marker_pages",
    "translate_client_error",
]
