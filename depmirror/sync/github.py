"""
GitHub Releases — Look up the latest release of an upstream repository.

Uses the GitHub REST API:

    GET /repos/{owner}/{repo}/releases/latest
    GET /repos/{owner}/{repo}/tarball/{tag}   (usually a 302 to codeload)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from ..config.settings import DEFAULT_API_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..errors import UpstreamLookupFailed
from ..models.dependency import ReleaseInfo

logger = logging.getLogger(__name__)


def _get_headers(token: Optional[str], user_agent: str) -> Dict[str, str]:
    """Get GitHub API headers."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": user_agent,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def build_client(
    token: Optional[str] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.Client:
    """HTTP client carrying the GitHub headers, with redirects left to the caller."""
    return httpx.Client(
        headers=_get_headers(token, user_agent),
        timeout=timeout,
        follow_redirects=False,
    )


class GitHubClient:
    """Thin wrapper over the release endpoints of the GitHub REST API."""

    def __init__(self, http: httpx.Client, api_url: str = DEFAULT_API_URL):
        self.http = http
        self.api_url = api_url.rstrip("/")

    def tarball_url(self, repo: str, owner: str, tag_name: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/tarball/{tag_name}"

    def latest_release(self, repo: str, owner: str) -> ReleaseInfo:
        """
        Fetch the latest published release.

        Raises UpstreamLookupFailed on transport errors, non-200 responses
        (missing repo, no releases, rate limiting) and bodies without a tag.
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        try:
            resp = self.http.get(url)
        except httpx.HTTPError as e:
            logger.error(f"[github] Error fetching latest release of {owner}/{repo}: {e}")
            raise UpstreamLookupFailed(str(e), repo=repo) from e

        if resp.status_code != 200:
            message = self._describe_failure(resp, owner, repo)
            logger.error(f"[github] {message}")
            raise UpstreamLookupFailed(message, repo=repo, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"[github] Latest release of {owner}/{repo} is not JSON")
            raise UpstreamLookupFailed("Malformed release response", repo=repo) from e

        if not isinstance(data, dict) or not data.get("tag_name"):
            logger.error(f"[github] Latest release of {owner}/{repo} has no tag_name")
            raise UpstreamLookupFailed("Release has no tag_name", repo=repo)

        release = ReleaseInfo(
            tag_name=data["tag_name"],
            name=data.get("name"),
            published_at=data.get("published_at"),
            tarball_url=data.get("tarball_url"),
        )
        logger.debug(f"[github] Latest release of {owner}/{repo}: {release.tag_name}")
        return release

    @staticmethod
    def _describe_failure(resp: httpx.Response, owner: str, repo: str) -> str:
        if resp.status_code == 404:
            return f"No release found for {owner}/{repo} (HTTP 404)"
        if (
            resp.status_code in (403, 429)
            and resp.headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset = resp.headers.get("X-RateLimit-Reset", "unknown")
            return f"GitHub rate limit exceeded (reset at {reset})"
        return f"Failed to fetch latest release of {owner}/{repo}: HTTP {resp.status_code}"
