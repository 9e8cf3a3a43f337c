"""Data model for delete-marker restoration runs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from s3_restore.core.config import settings


class RestoreMode(str, Enum):
    """Whether a run only reports candidates or actually removes markers."""

    DRY_RUN = "dry-run"
    APPLY = "apply"


class PrefixStatus(str, Enum):
    """Final state of a prefix task."""

    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class DeleteMarkerEntry:
    """A delete-marker version as returned by a listing page."""

    key: str
    version_id: str
    is_latest: bool


@dataclass(frozen=True)
class ListingCursor:
    """Continuation point for a version listing.

    Both markers are required to resume mid-key, since a single key can hold
    more versions than fit on one page.
    """

    key_marker: str
    version_id_marker: Optional[str] = None


@dataclass(frozen=True)
class PrefixResult:
    """Result of restoring (or simulating the restore of) one prefix.

    Attributes:
        prefix: Prefix that was processed
        status: Final prefix status
        restored_count: Markers actually removed (always 0 in dry-run mode)
        candidate_count: Qualifying markers found
        elapsed_seconds: Wall-clock time spent on the prefix
        error: Storage error message when status is FAILED
    """

    prefix: str
    status: PrefixStatus
    restored_count: int = 0
    candidate_count: int = 0
    elapsed_seconds: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True)
class RestoreOutcome:
    """Aggregate result of a whole run, one entry per input prefix."""

    mode: RestoreMode
    results: tuple[PrefixResult, ...] = field(default_factory=tuple)
    elapsed_seconds: float = 0.0

    @property
    def total_restored(self) -> int:
        return sum(result.restored_count for result in self.results)

    @property
    def total_candidates(self) -> int:
        return sum(result.candidate_count for result in self.results)

    @property
    def completed(self) -> list[PrefixResult]:
        return self._with_status(PrefixStatus.COMPLETED)

    @property
    def failed(self) -> list[PrefixResult]:
        return self._with_status(PrefixStatus.FAILED)

    @property
    def skipped(self) -> list[PrefixResult]:
        return self._with_status(PrefixStatus.SKIPPED)

    @property
    def succeeded(self) -> bool:
        """True when every prefix ran to completion."""
        return not self.failed and not self.skipped

    def _with_status(self, status: PrefixStatus) -> list[PrefixResult]:
        return [result for result in self.results if result.status is status]


class RestoreConfig(BaseModel):
    """Run configuration consumed by the restore orchestrator."""

    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(..., description="Target bucket name")
    mode: RestoreMode = Field(RestoreMode.DRY_RUN, description="Dry run or apply")
    max_concurrency: int = Field(
        default_factory=lambda: settings.max_concurrency,
        gt=0,
        description="Maximum number of prefixes restored at the same time",
    )
    fail_fast: bool = Field(
        default_factory=lambda: settings.fail_fast,
        description="Stop dispatching new prefixes after the first failure",
    )
    page_size: int = Field(
        default_factory=lambda: settings.page_size,
        gt=0,
        le=1000,
        description="Maximum versions returned per listing page",
    )

    @field_validator("bucket")
    @classmethod
    def _bucket_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bucket name must not be empty")
        return value
