"""
Version Comparison — Decide whether an upstream release is newer.

Versions are compared segment by segment after splitting on ".". Segments
are compared as strings, so "9" sorts after "10" and 10.0.0 is older than
9.0.0. Versions with a different number of segments compare as equal,
which the orchestrator reads as "already up to date".
"""

from __future__ import annotations

import posixpath

ARCHIVE_SUFFIX = ".tar.gz"


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two dotted version strings.

    Returns 1 if v1 sorts after v2, -1 if before, 0 if equal or if the
    segment counts differ.
    """
    v1_split = v1.split(".")
    v2_split = v2.split(".")
    if len(v1_split) != len(v2_split):
        return 0

    for a, b in zip(v1_split, v2_split):
        if a > b:
            return 1
        if a < b:
            return -1
    return 0


def is_newer(upstream: str, mirrored: str) -> bool:
    return compare_versions(upstream, mirrored) > 0


def strip_tag(tag_name: str) -> str:
    """Version number of a release tag ("v1.4.2" -> "1.4.2")."""
    if tag_name.startswith("v"):
        return tag_name[1:]
    return tag_name


def archive_filename(repo: str, version: str) -> str:
    return f"{repo}-{version}{ARCHIVE_SUFFIX}"


def archive_key(repo: str, filename: str) -> str:
    return f"Dependencies/{repo}/{filename}"


def archive_version(key: str, repo: str) -> str:
    """
    Version embedded in a mirrored archive key.

    "Dependencies/libfoo/libfoo-1.2.0.tar.gz" -> "1.2.0"
    """
    name = posixpath.basename(key)
    if name.startswith(f"{repo}-"):
        start = len(repo) + 1
    else:
        start = name.find("-") + 1

    end = name.find(".tar", start)
    if end == -1:
        end = len(name)
    return name[start:end]
