"""
Sync Module — Compare upstream releases with mirrored archives and mirror.
"""

from .github import GitHubClient, build_client
from .inventory import MirrorInventory
from .orchestrator import DependencySyncer
from .transfer import ArchiveTransfer
from .versions import compare_versions, is_newer, strip_tag

__all__ = [
    "ArchiveTransfer",
    "DependencySyncer",
    "GitHubClient",
    "MirrorInventory",
    "build_client",
    "compare_versions",
    "is_newer",
    "strip_tag",
]
