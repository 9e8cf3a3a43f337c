"""Versioned object listing and delete-marker operations."""

from .version_store import S3VersionStore, VersionStore, iter_delete_marker_pages

__all__ = ["S3VersionStore", "VersionStore", "iter_delete_marker_pages"]
