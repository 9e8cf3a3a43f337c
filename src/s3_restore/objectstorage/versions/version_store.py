"""Version listing and delete-marker removal for versioned buckets."""

from typing import Iterator, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from s3_restore.core import get_logger
from s3_restore.objectstorage.clients import S3ClientConfig, S3ClientManager
from s3_restore.objectstorage.clients.s3_client import (
    client_error_code,
    translate_client_error,
)
from s3_restore.schemas import DeleteMarkerEntry, ListingCursor

logger = get_logger(__name__)

# A missing version means the marker is already gone
ALREADY_RESTORED_CODES = frozenset({"NoSuchVersion", "NoSuchKey"})

Page = tuple[list[DeleteMarkerEntry], Optional[ListingCursor]]


class VersionStore(Protocol):
    """Protocol for storage backends holding versioned objects."""

    def list_versions_page(
        self, bucket: str, prefix: str, cursor: Optional[ListingCursor]
    ) -> Page:
        """Return the delete markers of one listing page and the next cursor.

        A ``None`` cursor starts the listing; a ``None`` next cursor means the
        listing is exhausted.
        """
        ...

    def delete_marker(self, bucket: str, key: str, version_id: str) -> None:
        """Remove a delete-marker version. Missing markers are not an error."""
        ...

    def verify_bucket(self, bucket: str) -> None:
        """Check that the bucket exists and is reachable with the credentials."""
        ...


class S3VersionStore(VersionStore):
    """VersionStore backed by the S3 ListObjectVersions/DeleteObject APIs."""

    def __init__(self, config: S3ClientConfig, page_size: int = 1000):
        """Initialize S3 version store.

        Args:
            config: S3 client configuration
            page_size: Maximum number of versions requested per listing page
        """
        self.client_manager = S3ClientManager(config)
        self.page_size = page_size
        logger.info("S3 version store initialized", page_size=page_size)

    def list_versions_page(
        self, bucket: str, prefix: str, cursor: Optional[ListingCursor]
    ) -> Page:
        params = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": self.page_size}
        if cursor is not None:
            params["KeyMarker"] = cursor.key_marker
            if cursor.version_id_marker:
                params["VersionIdMarker"] = cursor.version_id_marker

        try:
            response = self.client_manager.client.list_object_versions(**params)
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error(
                e, f"Failed to list versions of s3://{bucket}/{prefix}"
            ) from e

        markers = [
            DeleteMarkerEntry(
                key=marker["Key"],
                version_id=marker["VersionId"],
                is_latest=bool(marker.get("IsLatest", False)),
            )
            for marker in response.get("DeleteMarkers", [])
        ]

        next_cursor = None
        if response.get("IsTruncated") and response.get("NextKeyMarker"):
            next_cursor = ListingCursor(
                key_marker=response["NextKeyMarker"],
                version_id_marker=response.get("NextVersionIdMarker"),
            )

        logger.debug(
            "Version page listed",
            bucket=bucket,
            prefix=prefix,
            marker_count=len(markers),
            truncated=next_cursor is not None,
        )
        return markers, next_cursor

    def delete_marker(self, bucket: str, key: str, version_id: str) -> None:
        try:
            self.client_manager.client.delete_object(
                Bucket=bucket, Key=key, VersionId=version_id
            )
        except ClientError as e:
            if client_error_code(e) in ALREADY_RESTORED_CODES:
                logger.info(
                    "Delete marker already removed", key=key, version_id=version_id
                )
                return
            raise translate_client_error(
                e, f"Failed to remove delete marker {version_id} of '{key}'"
            ) from e
        except BotoCoreError as e:
            raise translate_client_error(
                e, f"Failed to remove delete marker {version_id} of '{key}'"
            ) from e

    def verify_bucket(self, bucket: str) -> None:
        """Check bucket access; the versioning status is advisory only.

        GetBucketVersioning needs a separate permission that restore-only
        roles often lack, so a failure there is logged and ignored.
        """
        client = self.client_manager.client
        try:
            client.head_bucket(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error(
                e, f"Bucket access verification failed for '{bucket}'"
            ) from e

        try:
            versioning = client.get_bucket_versioning(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                "Bucket versioning status unavailable", bucket=bucket, error=str(e)
            )
        else:
            status = versioning.get("Status", "")
            if status != "Enabled":
                logger.warning(
                    "Bucket versioning is not enabled",
                    bucket=bucket,
                    status=status or "Unversioned",
                )
        logger.info("Bucket access verified", bucket=bucket)


def iter_delete_marker_pages(
    store: VersionStore, bucket: str, prefix: str
) -> Iterator[list[DeleteMarkerEntry]]:
    """Lazily yield the delete markers of each listing page for a prefix.

    Pages are fetched strictly in cursor order, one request per ``next()``.
    Calling the function again restarts the listing from the beginning.
    """
    cursor: Optional[ListingCursor] = None
    while True:
        markers, cursor = store.list_versions_page(bucket, prefix, cursor)
        yield markers
        if cursor is None:
            return
