"""
depmirror — Mirror the latest GitHub release tarballs of dependencies into S3.
"""

__version__ = "0.1.0"
