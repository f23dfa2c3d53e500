"""
CLI config commands — dependency file checking and version comparison.

Usage:
    python -m depmirror check-config [--config FILE] [--json]
    python -m depmirror compare-versions 1.10.0 1.9.0
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click


@click.command("check-config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Dependency config file (default: DEPMIRROR_CONFIG)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check_config(ctx: click.Context, config_path: Optional[Path], as_json: bool) -> None:
    """Check that every configured repository resolves."""
    from ..config.loader import DependencyConfig
    from ..errors import ConfigEmpty, ConfigError, ConfigMissing

    settings = ctx.obj["settings"]
    path = config_path or settings.config_path
    if not path:
        raise click.UsageError("No dependency config given (use --config or DEPMIRROR_CONFIG)")

    try:
        config = DependencyConfig.load(path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    # Requested repos that have no entry are reported too
    names = config.names + [r for r in settings.repos if r not in config.entries]

    results = []
    for name in names:
        entry = {"repo": name, "ok": False, "owner": None, "path": None, "error": None}
        try:
            repo_config = config.resolve(name)
            entry.update(ok=True, owner=repo_config.owner, path=repo_config.storage_path)
        except (ConfigMissing, ConfigEmpty) as e:
            entry["error"] = str(e)
        results.append(entry)

    if as_json:
        click.echo(json.dumps(results, indent=2))
    else:
        click.echo(f"\n📋 Dependency Config ({path})\n")
        for entry in results:
            if entry["ok"]:
                click.secho(f"  ✓ {entry['repo']}", fg="green", nl=False)
                click.echo(f" — {entry['owner']} → {entry['path']}/")
            else:
                click.secho(f"  ✗ {entry['repo']}", fg="red", nl=False)
                click.echo(f" — {entry['error']}")
        click.echo()
        ok_count = sum(1 for e in results if e["ok"])
        click.secho(
            f"Summary: {ok_count} valid, {len(results) - ok_count} invalid", bold=True
        )

    if not all(entry["ok"] for entry in results):
        raise SystemExit(1)


@click.command("compare-versions")
@click.argument("upstream")
@click.argument("mirrored")
def compare_versions_cmd(upstream: str, mirrored: str) -> None:
    """Show how UPSTREAM compares to MIRRORED and whether it would be mirrored."""
    from ..sync.versions import compare_versions, strip_tag

    upstream = strip_tag(upstream)
    mirrored = strip_tag(mirrored)
    result = compare_versions(upstream, mirrored)

    symbol = {1: ">", -1: "<", 0: "="}[result]
    click.echo(f"{upstream} {symbol} {mirrored}")
    if result > 0:
        click.secho("would mirror", fg="yellow")
    else:
        click.secho("up to date", fg="green")
