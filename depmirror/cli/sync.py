"""
CLI sync command — mirror newer upstream releases into the bucket.

Usage:
    python -m depmirror sync
    python -m depmirror sync --repos libfoo,libbar --config deps.json --bucket artifacts
    python -m depmirror sync --dry-run --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from ..config.settings import Settings, parse_repo_list
from ..errors import ConfigError

STATUS_ICONS = {
    "mirrored": "⬆️",
    "up_to_date": "✅",
    "skipped": "⏭️",
    "failed": "❌",
}


@click.command("sync")
@click.option("--repos", help="Comma-separated repository names (default: DEPMIRROR_REPOS)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Dependency config file (default: DEPMIRROR_CONFIG)",
)
@click.option("--bucket", help="Destination S3 bucket (default: DEPMIRROR_BUCKET)")
@click.option("--dry-run", is_flag=True, help="Decide what to mirror without transferring")
@click.option("--json", "as_json", is_flag=True, help="Output outcomes as JSON")
@click.option("--strict", is_flag=True, help="Exit non-zero if any repository failed")
@click.pass_context
def sync(
    ctx: click.Context,
    repos: Optional[str],
    config_path: Optional[Path],
    bucket: Optional[str],
    dry_run: bool,
    as_json: bool,
    strict: bool,
) -> None:
    """Mirror the latest release of each repository if the bucket is behind."""
    from ..sync.orchestrator import DependencySyncer

    settings: Settings = ctx.obj["settings"]
    if repos is not None:
        settings.repos = parse_repo_list(repos)
    if config_path is not None:
        settings.config_path = config_path
    if bucket is not None:
        settings.bucket = bucket

    missing = settings.missing()
    if missing:
        click.secho(f"Missing required settings: {', '.join(missing)}", fg="red", err=True)
        click.echo("Set DEPMIRROR_BUCKET, DEPMIRROR_REPOS and DEPMIRROR_CONFIG, or pass the options.", err=True)
        raise SystemExit(2)

    try:
        syncer = DependencySyncer.from_settings(
            settings,
            s3_client=ctx.obj.get("s3_client"),
            dry_run=dry_run,
        )
    except ConfigError as e:
        raise click.ClickException(str(e))

    outcomes = syncer.sync_all(settings.repos)

    if as_json:
        click.echo(
            json.dumps(
                [outcome.model_dump() for outcome in outcomes.values()],
                indent=2,
            )
        )
    else:
        click.echo()
        for outcome in outcomes.values():
            icon = STATUS_ICONS.get(outcome.status, "❓")
            line = f"  {icon} {outcome.repo}: {outcome.status}"
            if outcome.upstream_version:
                line += f" (upstream {outcome.upstream_version}"
                if outcome.mirrored_version:
                    line += f", mirrored {outcome.mirrored_version}"
                line += ")"
            if outcome.key:
                line += f" → {outcome.key}"
            if outcome.reason:
                line += f" — {outcome.reason}"
            click.echo(line)
        click.echo()

    if strict and any(o.status == "failed" for o in outcomes.values()):
        raise SystemExit(1)
