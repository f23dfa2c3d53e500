"""
Configuration — Process settings and the per-repository dependency file.
"""

from .loader import DependencyConfig, parse_owner
from .settings import Settings, parse_repo_list

__all__ = ["DependencyConfig", "Settings", "parse_owner", "parse_repo_list"]
