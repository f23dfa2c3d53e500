"""
Dependency Config Loader — Resolve per-repository mirror settings.

The dependency file maps a repository name to where its archives are
stored and where it lives on GitHub:

    {
        "libfoo": {"path": "Dependencies/libfoo", "github_url": "acme/libfoo"},
        "libbar": {"path": "Dependencies/libbar", "github_url": "https://github.com/acme/libbar"}
    }

Files ending in .yml or .yaml are parsed as YAML. Anything else is parsed
as JSON.

## Usage

    from depmirror.config.loader import DependencyConfig

    config = DependencyConfig.load(Path("dependencies.json"))
    repo_config = config.resolve("libfoo")   # raises ConfigMissing / ConfigEmpty
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..errors import ConfigEmpty, ConfigError, ConfigMissing
from ..models.dependency import RepositoryConfig

logger = logging.getLogger(__name__)

GITHUB_PREFIXES = ("https://github.com/", "http://github.com/", "github.com/")
YAML_SUFFIXES = (".yml", ".yaml")


def parse_owner(github_url: str) -> str:
    """Owner (user or org) of a ``owner/repo`` style GitHub reference."""
    ref = github_url.strip()
    for prefix in GITHUB_PREFIXES:
        if ref.startswith(prefix):
            ref = ref[len(prefix):]
            break
    return ref.split("/")[0]


class DependencyConfig:
    """The repository-name -> mirror settings mapping for one run."""

    def __init__(self, entries: Dict[str, Any]):
        self.entries = entries

    @classmethod
    def load(cls, path: Path) -> "DependencyConfig":
        """Read and parse the dependency file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Dependency config not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Failed to read dependency config {path}: {e}")
            raise ConfigError(f"Could not parse {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Dependency config {path} must be a mapping, got {type(data).__name__}"
            )

        logger.debug(f"Loaded {len(data)} dependency entries from {path}")
        return cls(data)

    @property
    def names(self) -> List[str]:
        return sorted(str(name) for name in self.entries)

    def resolve(self, repo: str) -> RepositoryConfig:
        """
        Build the RepositoryConfig for a repository.

        Raises ConfigMissing when there is no usable entry and ConfigEmpty
        when the entry is an empty object.
        """
        if repo not in self.entries:
            raise ConfigMissing(f"No dependency config for {repo}", repo=repo)

        entry = self.entries[repo]
        if entry == {}:
            raise ConfigEmpty("Dependency config is empty", repo=repo)
        if not isinstance(entry, dict):
            raise ConfigMissing(
                f"Dependency config for {repo} is not a mapping", repo=repo
            )

        path = entry.get("path")
        github_url = entry.get("github_url")
        if not isinstance(path, str) or not path.strip():
            raise ConfigMissing(f"Dependency config for {repo} has no path", repo=repo)
        if not isinstance(github_url, str) or not github_url.strip():
            raise ConfigMissing(
                f"Dependency config for {repo} has no github_url", repo=repo
            )

        owner = parse_owner(github_url)
        if not owner:
            raise ConfigMissing(
                f"Could not parse owner from github_url {github_url!r}", repo=repo
            )

        return RepositoryConfig(
            name=repo,
            storage_path=path.strip().rstrip("/"),
            owner=owner,
        )
