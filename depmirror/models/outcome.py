"""
Sync Outcome Model — Result of one repository's sync pipeline.

Every pipeline produces exactly one outcome, whether it mirrored a new
archive, found the bucket already current, skipped the repository, or
failed along the way.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

OutcomeStatus = Literal["mirrored", "up_to_date", "skipped", "failed"]


class ErrorDetails(BaseModel):
    """Details about a pipeline failure."""

    code: str
    message: str


class SyncOutcome(BaseModel):
    """Result of syncing one repository."""

    repo: str
    status: OutcomeStatus
    reason: Optional[str] = None
    upstream_version: Optional[str] = None
    mirrored_version: Optional[str] = None
    key: Optional[str] = None
    error: Optional[ErrorDetails] = None
    ts_iso: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @classmethod
    def mirrored(
        cls,
        repo: str,
        upstream_version: str,
        key: str,
        mirrored_version: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> "SyncOutcome":
        """A new archive was written (or would be, on a dry run)."""
        return cls(
            repo=repo,
            status="mirrored",
            upstream_version=upstream_version,
            mirrored_version=mirrored_version,
            key=key,
            reason=reason,
        )

    @classmethod
    def up_to_date(
        cls,
        repo: str,
        upstream_version: str,
        mirrored_version: str,
    ) -> "SyncOutcome":
        """The newest mirrored archive is not older than upstream."""
        return cls(
            repo=repo,
            status="up_to_date",
            upstream_version=upstream_version,
            mirrored_version=mirrored_version,
        )

    @classmethod
    def skipped(cls, repo: str, reason: str) -> "SyncOutcome":
        """The repository was not processed."""
        return cls(repo=repo, status="skipped", reason=reason)

    @classmethod
    def failed(
        cls,
        repo: str,
        error_code: str,
        error_message: str,
        upstream_version: Optional[str] = None,
        mirrored_version: Optional[str] = None,
    ) -> "SyncOutcome":
        """The pipeline stopped on an error."""
        return cls(
            repo=repo,
            status="failed",
            reason=error_message,
            upstream_version=upstream_version,
            mirrored_version=mirrored_version,
            error=ErrorDetails(code=error_code, message=error_message),
        )
