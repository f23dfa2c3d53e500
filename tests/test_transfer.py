"""
Tests for the archive download/upload transfer.
"""

from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from botocore.exceptions import ClientError

from depmirror.errors import TransferFailed
from depmirror.sync.transfer import ArchiveTransfer, redirect_target

TARBALL = b"\x1f\x8b" + b"tarball-bytes" * 100
TARBALL_URL = "https://api.github.com/repos/acme/libfoo/tarball/v1.0.0"


def _transfer(make_github, handler, s3, work_dir: Path, token=None) -> ArchiveTransfer:
    return ArchiveTransfer(make_github(handler, token=token), s3, "artifacts", work_dir)


class TestRedirectTarget:
    """Tests for redirect_target."""

    def _response(self, status, location=None):
        headers = {"Location": location} if location else {}
        return httpx.Response(
            status, headers=headers, request=httpx.Request("GET", TARBALL_URL)
        )

    def test_absolute_location(self):
        resp = self._response(302, "https://codeload.github.com/acme/libfoo/legacy.tar.gz/v1.0.0")
        assert redirect_target(resp) == "https://codeload.github.com/acme/libfoo/legacy.tar.gz/v1.0.0"

    def test_relative_location_resolves_against_request_host(self):
        resp = self._response(302, "/archives/libfoo.tar.gz")
        assert redirect_target(resp) == "https://api.github.com/archives/libfoo.tar.gz"

    def test_not_a_redirect(self):
        assert redirect_target(self._response(200)) is None

    def test_redirect_without_location(self):
        assert redirect_target(self._response(302)) is None


class TestArchiveTransfer:
    """Tests for ArchiveTransfer.mirror."""

    def test_direct_download(self, make_github, s3, tmp_path):
        transfer = _transfer(
            make_github, lambda request: httpx.Response(200, content=TARBALL), s3, tmp_path
        )

        key = transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

        assert key == "Dependencies/libfoo/libfoo-1.0.0.tar.gz"
        s3.put_object.assert_called_once_with(
            Bucket="artifacts",
            Key="Dependencies/libfoo/libfoo-1.0.0.tar.gz",
            Body=TARBALL,
            ContentType="application/gzip",
        )

    def test_relative_redirect_followed_once(self, make_github, s3, tmp_path):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            if request.url.path.endswith("/tarball/v1.0.0"):
                return httpx.Response(302, headers={"Location": "/archive/libfoo-v1.0.0.tar.gz"})
            return httpx.Response(200, content=TARBALL)

        transfer = _transfer(make_github, handler, s3, tmp_path)
        transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

        assert seen == [TARBALL_URL, "https://api.github.com/archive/libfoo-v1.0.0.tar.gz"]
        assert s3.put_object.call_args.kwargs["Body"] == TARBALL

    def test_absolute_redirect_drops_authorization(self, make_github, s3, tmp_path):
        auth_headers = {}

        def handler(request: httpx.Request) -> httpx.Response:
            auth_headers[request.url.host] = request.headers.get("Authorization")
            if request.url.host == "api.github.com":
                return httpx.Response(
                    302,
                    headers={"Location": "https://codeload.github.com/acme/libfoo/legacy.tar.gz/v1.0.0"},
                )
            return httpx.Response(200, content=TARBALL)

        transfer = _transfer(make_github, handler, s3, tmp_path, token="ghp_test")
        transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

        assert auth_headers["api.github.com"] == "Bearer ghp_test"
        assert auth_headers["codeload.github.com"] is None

    def test_second_redirect_not_followed(self, make_github, s3, tmp_path):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(302, headers={"Location": f"/hop{len(seen)}"})

        transfer = _transfer(make_github, handler, s3, tmp_path)

        with pytest.raises(TransferFailed, match="HTTP 302"):
            transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

        assert len(seen) == 2
        s3.put_object.assert_not_called()

    def test_download_error_status(self, make_github, s3, tmp_path):
        transfer = _transfer(make_github, lambda request: httpx.Response(404), s3, tmp_path)

        with pytest.raises(TransferFailed) as exc_info:
            transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

        assert exc_info.value.repo == "libfoo"
        s3.put_object.assert_not_called()

    def test_transport_error(self, make_github, s3, tmp_path):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        transfer = _transfer(make_github, handler, s3, tmp_path)
        with pytest.raises(TransferFailed):
            transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

    def test_upload_error(self, make_github, tmp_path):
        s3 = MagicMock()
        s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject"
        )
        transfer = _transfer(
            make_github, lambda request: httpx.Response(200, content=TARBALL), s3, tmp_path
        )

        with pytest.raises(TransferFailed, match="Upload"):
            transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")

    def test_temp_file_removed(self, make_github, s3, tmp_path):
        transfer = _transfer(
            make_github, lambda request: httpx.Response(200, content=TARBALL), s3, tmp_path
        )
        transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")
        assert not (tmp_path / "libfoo-1.0.0.tar.gz").exists()

    def test_work_dir_created(self, make_github, s3, tmp_path):
        work_dir = tmp_path / "nested" / "work"
        transfer = _transfer(
            make_github, lambda request: httpx.Response(200, content=TARBALL), s3, work_dir
        )
        transfer.mirror("libfoo-1.0.0.tar.gz", "v1.0.0", "libfoo", "acme")
        assert work_dir.is_dir()
