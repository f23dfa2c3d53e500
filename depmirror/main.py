"""
depmirror — CLI Entry Point

Usage:
    python -m depmirror sync [--repos a,b] [--config FILE] [--bucket NAME] [--dry-run]
    python -m depmirror check-config [--config FILE] [--json]
    python -m depmirror compare-versions V1 V2
"""

from __future__ import annotations

# Load .env file FIRST, before anything reads env vars
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from typing import Optional

import click

from . import __version__
from .cli.config import check_config, compare_versions_cmd
from .cli.sync import sync
from .config.settings import Settings
from .logging_config import setup_logging


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: LOG_LEVEL env var or INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Log format (default: LOG_FORMAT env var or text)",
)
@click.version_option(__version__, prog_name="depmirror")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_format: Optional[str]) -> None:
    """depmirror — Mirror GitHub release tarballs into S3."""
    setup_logging(log_level, log_format)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env()


cli.add_command(sync)
cli.add_command(check_config)
cli.add_command(compare_versions_cmd)


if __name__ == "__main__":
    cli()
