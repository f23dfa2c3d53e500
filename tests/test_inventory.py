"""
Tests for the mirror inventory listing.
"""

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from depmirror.errors import InventoryReadFailed
from depmirror.sync.inventory import MirrorInventory


class TestMirrorInventory:
    """Tests for MirrorInventory."""

    def test_newest_first_regardless_of_key_order(self, make_s3, s3_object):
        s3 = make_s3([[
            s3_object("Dependencies/repo/repo-1.0.0.tar.gz", day=1),
            s3_object("Dependencies/repo/repo-1.2.0.tar.gz", day=2),
        ]])
        inventory = MirrorInventory(s3, "artifacts")

        entries = inventory.list_mirrored("Dependencies/repo")

        assert [e.key for e in entries] == [
            "Dependencies/repo/repo-1.2.0.tar.gz",
            "Dependencies/repo/repo-1.0.0.tar.gz",
        ]
        s3.get_paginator.assert_called_once_with("list_objects_v2")
        s3.get_paginator.return_value.paginate.assert_called_once_with(
            Bucket="artifacts", Prefix="Dependencies/repo/"
        )

    def test_recency_beats_version_order(self, make_s3, s3_object):
        s3 = make_s3([[
            s3_object("Dependencies/repo/repo-2.0.0.tar.gz", day=3),
            s3_object("Dependencies/repo/repo-1.0.1.tar.gz", day=9),
        ]])
        entries = MirrorInventory(s3, "artifacts").list_mirrored("Dependencies/repo")
        assert entries[0].key.endswith("repo-1.0.1.tar.gz")

    def test_non_archive_keys_filtered(self, make_s3, s3_object):
        s3 = make_s3([[
            s3_object("Dependencies/repo/README.md", day=5),
            s3_object("Dependencies/repo/repo-1.0.0.tar.gz", day=1),
        ]])
        entries = MirrorInventory(s3, "artifacts").list_mirrored("Dependencies/repo")
        assert [e.key for e in entries] == ["Dependencies/repo/repo-1.0.0.tar.gz"]

    def test_multiple_pages(self, make_s3, s3_object):
        s3 = make_s3([
            [s3_object("Dependencies/repo/repo-1.0.0.tar.gz", day=1)],
            [s3_object("Dependencies/repo/repo-1.1.0.tar.gz", day=4)],
        ])
        entries = MirrorInventory(s3, "artifacts").list_mirrored("Dependencies/repo")
        assert len(entries) == 2
        assert entries[0].key.endswith("repo-1.1.0.tar.gz")

    def test_empty_prefix(self, s3):
        assert MirrorInventory(s3, "artifacts").list_mirrored("Dependencies/repo") == []

    def test_listing_error_reads_as_empty(self, s3):
        s3.get_paginator.return_value.paginate.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "ListObjectsV2"
        )
        assert MirrorInventory(s3, "artifacts").list_mirrored("Dependencies/repo") == []

    def test_fetch_raises_on_error(self, s3):
        s3.get_paginator.return_value.paginate.side_effect = EndpointConnectionError(
            endpoint_url="https://s3.amazonaws.com"
        )
        with pytest.raises(InventoryReadFailed):
            MirrorInventory(s3, "artifacts").fetch("Dependencies/repo")
