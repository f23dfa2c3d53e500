"""
Archive Transfer — Copy a release tarball from GitHub into the bucket.

The tarball endpoint normally answers with a redirect to the archive
host. Exactly one redirect hop is followed; a relative Location is
resolved against the request URL. The body is streamed to a local file
named after the archive, read back once the write has finished, and
uploaded with put_object.

Temp files are named <repo>-<version>.tar.gz inside the work directory,
so two concurrent runs for the same release would share a file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin, urlparse

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import TransferFailed
from .github import GitHubClient
from .versions import archive_key

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def redirect_target(response: httpx.Response) -> Optional[str]:
    """Absolute URL a 3xx response points to, or None if it is not a redirect."""
    location = response.headers.get("location")
    if not (300 < response.status_code < 400 and location):
        return None
    if urlparse(location).hostname:
        return location
    return urljoin(str(response.request.url), location)


class ArchiveTransfer:
    """Downloads release tarballs and uploads them to S3."""

    def __init__(
        self,
        github: GitHubClient,
        s3_client: Any,
        bucket: str,
        work_dir: Path,
    ):
        self.github = github
        self.s3 = s3_client
        self.bucket = bucket
        self.work_dir = Path(work_dir)

    def mirror(self, filename: str, tag_name: str, repo: str, owner: str) -> str:
        """
        Mirror one release archive.

        Returns the object key written. Raises TransferFailed if the
        download, the local write, or the upload fails.
        """
        url = self.github.tarball_url(repo, owner, tag_name)
        key = archive_key(repo, filename)
        local_path = self.work_dir / filename

        logger.info(f"[transfer] Downloading {url}", extra={"repo": repo})
        try:
            size = self.download(url, local_path)
            self.upload(local_path, key)
        except TransferFailed as e:
            logger.error(f"[transfer] {e}", extra={"repo": repo})
            e.repo = repo
            raise
        finally:
            local_path.unlink(missing_ok=True)

        logger.info(
            f"[transfer] Uploaded s3://{self.bucket}/{key} ({size / 1_048_576:.2f} MB)",
            extra={"repo": repo},
        )
        return key

    def download(self, url: str, dest: Path) -> int:
        """Fetch ``url`` into ``dest``, following at most one redirect."""
        http = self.github.http
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with http.stream("GET", url) as resp:
                target = redirect_target(resp)
                if target is None:
                    return self._write_body(resp, dest)

            logger.debug(f"[transfer] Redirected to {target}")
            request = http.build_request("GET", target)
            if urlparse(target).hostname != urlparse(url).hostname:
                request.headers.pop("Authorization", None)
            resp = http.send(request, stream=True)
            try:
                return self._write_body(resp, dest)
            finally:
                resp.close()
        except httpx.HTTPError as e:
            raise TransferFailed(f"Download of {url} failed: {e}") from e
        except OSError as e:
            raise TransferFailed(f"Could not write {dest}: {e}") from e

    @staticmethod
    def _write_body(resp: httpx.Response, dest: Path) -> int:
        if not resp.is_success:
            raise TransferFailed(
                f"Download of {resp.request.url} failed: HTTP {resp.status_code}"
            )
        written = 0
        with open(dest, "wb") as f:
            for chunk in resp.iter_bytes(CHUNK_SIZE):
                f.write(chunk)
                written += len(chunk)
        return written

    def upload(self, path: Path, key: str) -> None:
        """Upload a finished local file as the object body."""
        try:
            data = path.read_bytes()
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="application/gzip",
            )
        except OSError as e:
            raise TransferFailed(f"Could not read {path}: {e}") from e
        except (BotoCoreError, ClientError) as e:
            raise TransferFailed(f"Upload to s3://{self.bucket}/{key} failed: {e}") from e
