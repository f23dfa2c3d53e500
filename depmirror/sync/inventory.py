"""
Mirror Inventory — Archives already stored in the bucket.

Lists the objects under a repository's storage path and orders the
tarballs newest first, so index 0 is the version currently mirrored.
A listing failure is logged and reported as an empty inventory; the
caller then mirrors unconditionally.
"""

from __future__ import annotations

import logging
from typing import Any, List

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import InventoryReadFailed
from ..models.dependency import MirrorArchiveEntry

logger = logging.getLogger(__name__)

ARCHIVE_MARKER = ".gz"


class MirrorInventory:
    """Reads the mirrored archive listing from S3."""

    def __init__(self, s3_client: Any, bucket: str):
        self.s3 = s3_client
        self.bucket = bucket

    def fetch(self, storage_path: str) -> List[MirrorArchiveEntry]:
        """
        Archive entries under ``storage_path``, newest first.

        Raises InventoryReadFailed if the listing fails.
        """
        prefix = storage_path.rstrip("/") + "/"
        entries: List[MirrorArchiveEntry] = []

        try:
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    if ARCHIVE_MARKER not in obj["Key"]:
                        continue
                    entries.append(
                        MirrorArchiveEntry(
                            key=obj["Key"],
                            last_modified=obj["LastModified"],
                            size=obj.get("Size"),
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            raise InventoryReadFailed(
                f"Failed to list s3://{self.bucket}/{prefix}: {e}"
            ) from e

        entries.sort(key=lambda entry: entry.last_modified, reverse=True)
        logger.debug(
            f"[inventory] {len(entries)} archive(s) under s3://{self.bucket}/{prefix}"
        )
        return entries

    def list_mirrored(self, storage_path: str) -> List[MirrorArchiveEntry]:
        """Like fetch(), but a failed listing reads as an empty inventory."""
        try:
            return self.fetch(storage_path)
        except InventoryReadFailed as e:
            logger.error(f"[inventory] {e}")
            return []
