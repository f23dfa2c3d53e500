"""
Dependency Models — Records passed between the sync components.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RepositoryConfig(BaseModel):
    """Where a repository's archives live and who owns it upstream."""

    model_config = ConfigDict(frozen=True)

    name: str
    storage_path: str
    owner: str


class ReleaseInfo(BaseModel):
    """The latest published release of an upstream repository."""

    tag_name: str
    name: Optional[str] = None
    published_at: Optional[str] = None
    tarball_url: Optional[str] = None


class MirrorArchiveEntry(BaseModel):
    """A tarball already mirrored into the bucket."""

    key: str
    last_modified: datetime
    size: Optional[int] = None
