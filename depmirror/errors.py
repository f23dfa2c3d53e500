"""
Errors — Failure taxonomy for a dependency sync run.

Every failure is logged where it happens. The orchestrator turns these
into a SyncOutcome, so none of them escape a repository's pipeline.
"""

from __future__ import annotations

from typing import Optional


class DepMirrorError(Exception):
    """Base class for all depmirror errors."""

    def __init__(self, message: str, repo: Optional[str] = None):
        super().__init__(message)
        self.repo = repo


class ConfigError(DepMirrorError):
    """The dependency config file could not be read at all."""


class ConfigMissing(DepMirrorError):
    """No usable entry for a repository (absent, or lacks path/github_url)."""


class ConfigEmpty(DepMirrorError):
    """An entry exists for the repository but it is an empty object."""


class UpstreamLookupFailed(DepMirrorError):
    """The latest release could not be fetched from GitHub."""

    def __init__(
        self,
        message: str,
        repo: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, repo=repo)
        self.status_code = status_code


class InventoryReadFailed(DepMirrorError):
    """Listing mirrored archives in the bucket failed."""


class TransferFailed(DepMirrorError):
    """Downloading a release tarball or uploading it failed."""
