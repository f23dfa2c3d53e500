"""
Shared fixtures for depmirror tests.

S3 is replaced by a MagicMock client and GitHub by an httpx.MockTransport,
so nothing here touches the network.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List
from unittest.mock import MagicMock

import httpx
import pytest

from depmirror.sync.github import GitHubClient

ENV_VARS = [
    "DEPMIRROR_BUCKET",
    "DEPMIRROR_TOKEN",
    "DEPMIRROR_REPOS",
    "DEPMIRROR_CONFIG",
    "DEPMIRROR_API_URL",
    "DEPMIRROR_WORK_DIR",
    "DEPMIRROR_TIMEOUT",
    "INPUT_BUCKETNAME",
    "INPUT_TOKEN",
    "INPUT_REPO",
    "INPUT_DEPPATH",
    "GITHUB_TOKEN",
]

SAMPLE_CONFIG = {
    "libfoo": {"path": "Dependencies/libfoo", "github_url": "acme/libfoo"},
    "libbar": {"path": "Dependencies/libbar", "github_url": "https://github.com/widgets/libbar"},
    "empty": {},
    "nourl": {"path": "Dependencies/nourl"},
}


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the settings read."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Dependency config JSON with valid, empty and broken entries."""
    path = tmp_path / "dependencies.json"
    path.write_text(json.dumps(SAMPLE_CONFIG, indent=2), encoding="utf-8")
    return path


def _s3_object(key: str, day: int, size: int = 1024) -> Dict:
    return {
        "Key": key,
        "LastModified": datetime(2026, 1, day, tzinfo=timezone.utc),
        "Size": size,
    }


def _make_s3(pages: List[List[Dict]] = None) -> MagicMock:
    s3 = MagicMock()
    s3.get_paginator.return_value.paginate.return_value = [
        {"Contents": contents} if contents else {} for contents in (pages or [[]])
    ]
    return s3


def _make_github(
    handler: Callable[[httpx.Request], httpx.Response],
    token: str = None,
) -> GitHubClient:
    headers = {"User-Agent": "depmirror-tests"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    http = httpx.Client(
        transport=httpx.MockTransport(handler),
        headers=headers,
        follow_redirects=False,
    )
    return GitHubClient(http, "https://api.github.com")


@pytest.fixture
def s3_object():
    """Factory for one entry of a list_objects_v2 page (LastModified = 2026-01-<day>)."""
    return _s3_object


@pytest.fixture
def make_s3():
    """Factory for an S3 client whose list_objects_v2 paginator yields the given pages."""
    return _make_s3


@pytest.fixture
def s3():
    """S3 client with an empty bucket."""
    return _make_s3()


@pytest.fixture
def make_github():
    """Factory for a GitHubClient backed by an httpx.MockTransport handler."""
    return _make_github
