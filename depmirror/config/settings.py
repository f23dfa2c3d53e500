"""
Settings — Process-wide configuration resolved once at startup.

Values come from DEPMIRROR_* environment variables. When the tool runs as a
GitHub Actions step, the action inputs (INPUT_BUCKETNAME, INPUT_TOKEN,
INPUT_REPO, INPUT_DEPPATH) are used as fallbacks.

Minimal required config:
    DEPMIRROR_BUCKET=my-artifacts
    DEPMIRROR_REPOS=libfoo,libbar
    DEPMIRROR_CONFIG=dependencies.json

The resolved Settings object is handed to each component explicitly; no
module reads the environment on its own.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "depmirror"
DEFAULT_TIMEOUT = 60.0


def _env(*names: str) -> Optional[str]:
    """First non-empty value among the given environment variables."""
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def parse_repo_list(text: Optional[str]) -> List[str]:
    """Split a comma-separated repository list, dropping blanks and repeats."""
    if not text:
        return []
    names = [name.strip() for name in text.split(",") if name.strip()]
    return list(dict.fromkeys(names))


@dataclass
class Settings:
    """Configuration shared by every repository pipeline in one run."""

    bucket: Optional[str] = None
    token: Optional[str] = None
    repos: List[str] = field(default_factory=list)
    config_path: Optional[Path] = None
    api_url: str = DEFAULT_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    work_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        """Parse settings from environment variables."""
        config_path = _env("DEPMIRROR_CONFIG", "INPUT_DEPPATH")
        work_dir = _env("DEPMIRROR_WORK_DIR")

        timeout = DEFAULT_TIMEOUT
        raw_timeout = _env("DEPMIRROR_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    f"DEPMIRROR_TIMEOUT={raw_timeout!r} is not a number, "
                    f"using {DEFAULT_TIMEOUT}"
                )

        settings = cls(
            bucket=_env("DEPMIRROR_BUCKET", "INPUT_BUCKETNAME"),
            token=_env("DEPMIRROR_TOKEN", "INPUT_TOKEN", "GITHUB_TOKEN"),
            repos=parse_repo_list(_env("DEPMIRROR_REPOS", "INPUT_REPO")),
            config_path=Path(config_path) if config_path else None,
            api_url=(_env("DEPMIRROR_API_URL") or DEFAULT_API_URL).rstrip("/"),
            timeout=timeout,
        )
        if work_dir:
            settings.work_dir = Path(work_dir)

        if not settings.token:
            logger.debug("No GitHub token configured, using anonymous API access")

        return settings

    def missing(self) -> List[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.bucket:
            missing.append("bucket")
        if not self.repos:
            missing.append("repos")
        if not self.config_path:
            missing.append("config")
        return missing
