"""Test configuration and fixtures for s3-restore."""

import threading
import time

import boto3
import pytest
from moto import mock_aws

from s3_restore.core.exceptions import TransientStorageError
from s3_restore.objectstorage import S3ClientConfig
from s3_restore.schemas import ListingCursor

BUCKET = "restore-bucket"


class FakeVersionStore:
    """In-memory version store with scripted pages and failures."""

    def __init__(self, pages=None, failures=None, delay=0.0):
        # pages: prefix -> list of pages, each a list of DeleteMarkerEntry
        # failures: prefix -> page index that raises TransientStorageError
        self.pages = pages or {}
        self.failures = failures or {}
        self.delay = delay
        self.list_calls = []
        self.deleted = []
        self.verified = []
        self._lock = threading.Lock()

    def list_versions_page(self, bucket, prefix, cursor):
        index = 0 if cursor is None else int(cursor.key_marker)
        with self._lock:
            self.list_calls.append((prefix, index))
        if self.delay:
            time.sleep(self.delay)
        if self.failures.get(prefix) == index:
            raise TransientStorageError(f"SlowDown on page {index} of {prefix}")

        pages = self.pages.get(prefix, [[]])
        next_cursor = None
        if index + 1 < len(pages):
            next_cursor = ListingCursor(key_marker=str(index + 1))
        return list(pages[index]), next_cursor

    def delete_marker(self, bucket, key, version_id):
        with self._lock:
            self.deleted.append((key, version_id))

    def verify_bucket(self, bucket):
        self.verified.append(bucket)


class RecordingReporter:
    """Reporter that records events and tracks concurrently running prefixes."""

    def __init__(self):
        self.started = []
        self.found = []
        self.restored = []
        self.finished = []
        self.outcomes = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def prefix_started(self, prefix):
        with self._lock:
            self.started.append(prefix)
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def marker_found(self, prefix, key):
        with self._lock:
            self.found.append(key)

    def marker_restored(self, prefix, key, elapsed_seconds):
        with self._lock:
            self.restored.append(key)

    def prefix_finished(self, result):
        with self._lock:
            self.finished.append(result)
            self.active -= 1

    def run_finished(self, outcome):
        self.outcomes.append(outcome)


@pytest.fixture
def fake_store():
    """Factory for FakeVersionStore instances."""
    return FakeVersionStore


@pytest.fixture
def reporter():
    """Recording reporter."""
    return RecordingReporter()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def client_config():
    """S3 client configuration matching the mocked account."""
    return S3ClientConfig(
        access_key_id="testing",
        secret_access_key="testing",
        region_name="us-east-1",
    )


@pytest.fixture
def versioned_bucket(aws_credentials):
    """Versioned bucket with deleted objects under orders/2020/ and orders/2021/.

    - orders/2020/a.csv: deleted (latest delete marker)
    - orders/2020/b.csv: deleted then re-uploaded (non-latest delete marker)
    - orders/2021/c.csv: deleted (latest delete marker)
    - orders/2022/d.csv: deleted, outside the restored prefixes
    """
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)
        s3.put_bucket_versioning(
            Bucket=BUCKET, VersioningConfiguration={"Status": "Enabled"}
        )

        for key in ("orders/2020/a.csv", "orders/2021/c.csv", "orders/2022/d.csv"):
            s3.put_object(Bucket=BUCKET, Key=key, Body=b"content")
            s3.delete_object(Bucket=BUCKET, Key=key)

        s3.put_object(Bucket=BUCKET, Key="orders/2020/b.csv", Body=b"old")
        s3.delete_object(Bucket=BUCKET, Key="orders/2020/b.csv")
        s3.put_object(Bucket=BUCKET, Key="orders/2020/b.csv", Body=b"new")

        yield s3
