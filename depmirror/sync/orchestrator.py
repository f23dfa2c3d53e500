"""
Dependency Syncer — Orchestrates the per-repository sync pipeline.

For each repository:

    load config -> (list mirrored archives || latest release) -> decide -> mirror?

Every pipeline returns a SyncOutcome and never raises, so one repository's
failure cannot stop another. sync_all() starts one thread per repository
and waits for all of them; pass blocking=False to start them and return
immediately.

## Usage

    from depmirror.sync.orchestrator import DependencySyncer

    syncer = DependencySyncer.from_settings(settings)
    outcomes = syncer.sync_all(settings.repos)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple, Union

from ..config.loader import DependencyConfig
from ..config.settings import Settings
from ..errors import (
    ConfigEmpty,
    ConfigMissing,
    TransferFailed,
    UpstreamLookupFailed,
)
from ..models.dependency import MirrorArchiveEntry, ReleaseInfo
from ..models.outcome import SyncOutcome
from .github import GitHubClient, build_client
from .inventory import MirrorInventory
from .transfer import ArchiveTransfer
from .versions import (
    archive_filename,
    archive_key,
    archive_version,
    is_newer,
    strip_tag,
)

logger = logging.getLogger(__name__)


class DependencySyncer:
    """Runs the sync pipeline for a list of repositories."""

    def __init__(
        self,
        config: DependencyConfig,
        github: GitHubClient,
        inventory: MirrorInventory,
        transfer: ArchiveTransfer,
        dry_run: bool = False,
    ):
        self.config = config
        self.github = github
        self.inventory = inventory
        self.transfer = transfer
        self.dry_run = dry_run

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        s3_client: Optional[Any] = None,
        dry_run: bool = False,
    ) -> "DependencySyncer":
        """Build the syncer and its collaborators from resolved settings."""
        if s3_client is None:
            import boto3

            s3_client = boto3.client("s3")

        config = DependencyConfig.load(settings.config_path)
        http = build_client(settings.token, settings.user_agent, settings.timeout)
        github = GitHubClient(http, settings.api_url)
        return cls(
            config=config,
            github=github,
            inventory=MirrorInventory(s3_client, settings.bucket),
            transfer=ArchiveTransfer(github, s3_client, settings.bucket, settings.work_dir),
            dry_run=dry_run,
        )

    # ─── Fan-out ────────────────────────────────────────────

    def sync_all(
        self, repos: List[str], blocking: bool = True
    ) -> Union[Dict[str, SyncOutcome], List[threading.Thread]]:
        """
        Sync every repository on its own thread.

        Repeated names run once, since each pipeline owns the temp file
        named after its repository. With blocking=True (default) waits for
        all of them and returns {repo: SyncOutcome}. With blocking=False
        returns the started threads without waiting.
        """
        repos = list(dict.fromkeys(repos))
        outcomes: Dict[str, SyncOutcome] = {}
        lock = threading.Lock()

        def _run(repo: str) -> None:
            try:
                outcome = self.sync_repository(repo)
            except Exception as e:
                logger.exception(f"[sync] {repo}: unexpected error", extra={"repo": repo})
                outcome = SyncOutcome.failed(repo, "unexpected_error", str(e))
            with lock:
                outcomes[repo] = outcome

        threads = [
            threading.Thread(target=_run, args=(repo,), name=f"sync-{repo}", daemon=True)
            for repo in repos
        ]
        for thread in threads:
            thread.start()

        if not blocking:
            return threads

        for thread in threads:
            thread.join()

        mirrored = sum(1 for o in outcomes.values() if o.status == "mirrored")
        failed = sum(1 for o in outcomes.values() if o.status == "failed")
        logger.info(
            f"[sync] {len(outcomes)} repositories: {mirrored} mirrored, {failed} failed"
        )
        return {repo: outcomes[repo] for repo in repos if repo in outcomes}

    # ─── Per-repository pipeline ────────────────────────────

    def sync_repository(self, repo: str) -> SyncOutcome:
        """Run one repository's pipeline. Known failures become the outcome."""
        log_extra = {"repo": repo}

        try:
            repo_config = self.config.resolve(repo)
        except ConfigEmpty:
            logger.info(f"[sync] {repo}: dependency config is empty", extra=log_extra)
            return SyncOutcome.skipped(repo, "Dependency config is empty")
        except ConfigMissing as e:
            logger.info(f"[sync] {repo}: {e}", extra=log_extra)
            return SyncOutcome.skipped(repo, str(e))

        try:
            mirrored, release = self._lookup(repo, repo_config.storage_path, repo_config.owner)
        except UpstreamLookupFailed as e:
            logger.warning(
                f"[sync] {repo}: could not fetch latest release on GitHub",
                extra=log_extra,
            )
            return SyncOutcome.failed(repo, "upstream_lookup_failed", str(e))

        upstream_version = strip_tag(release.tag_name)
        filename = archive_filename(repo, upstream_version)

        if not mirrored:
            logger.info(
                f"[sync] {repo}: nothing mirrored yet, mirroring {upstream_version}",
                extra=log_extra,
            )
            return self._mirror(repo, repo_config.owner, release, filename, upstream_version)

        mirrored_version = archive_version(mirrored[0].key, repo)
        logger.info(
            f"[sync] {repo}: mirrored {mirrored_version}, upstream {upstream_version}",
            extra=log_extra,
        )

        if not is_newer(upstream_version, mirrored_version):
            logger.info(f"[sync] {repo}: already up to date", extra=log_extra)
            return SyncOutcome.up_to_date(repo, upstream_version, mirrored_version)

        logger.info(f"[sync] {repo}: updating dependency", extra=log_extra)
        return self._mirror(
            repo, repo_config.owner, release, filename, upstream_version, mirrored_version
        )

    def _lookup(
        self, repo: str, storage_path: str, owner: str
    ) -> Tuple[List[MirrorArchiveEntry], ReleaseInfo]:
        """List the inventory and fetch the latest release concurrently."""
        result: Dict[str, Any] = {}

        def _list_inventory() -> None:
            try:
                result["mirrored"] = self.inventory.list_mirrored(storage_path)
            except Exception:
                logger.exception(
                    f"[sync] {repo}: inventory listing failed, treating as empty",
                    extra={"repo": repo},
                )

        inventory_thread = threading.Thread(
            target=_list_inventory, name=f"inventory-{repo}", daemon=True
        )
        inventory_thread.start()
        try:
            release = self.github.latest_release(repo, owner)
        finally:
            inventory_thread.join()

        return result.get("mirrored", []), release

    def _mirror(
        self,
        repo: str,
        owner: str,
        release: ReleaseInfo,
        filename: str,
        upstream_version: str,
        mirrored_version: Optional[str] = None,
    ) -> SyncOutcome:
        key = archive_key(repo, filename)

        if self.dry_run:
            logger.info(f"[sync] {repo}: dry run, would write {key}", extra={"repo": repo})
            return SyncOutcome.mirrored(
                repo, upstream_version, key, mirrored_version, reason="dry run"
            )

        try:
            key = self.transfer.mirror(filename, release.tag_name, repo, owner)
        except TransferFailed as e:
            return SyncOutcome.failed(
                repo, "transfer_failed", str(e), upstream_version, mirrored_version
            )

        return SyncOutcome.mirrored(repo, upstream_version, key, mirrored_version)
