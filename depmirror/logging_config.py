"""
Logging Configuration — Log output for sync runs.

A run starts one thread per repository, so their log lines interleave.
Every pipeline log call passes ``extra={"repo": name}``. The JSON format
carries that as a field that CI log collectors can filter on. The text
format is meant for a terminal or an Actions log.

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: json, text (default: text)

The ``--log-level`` / ``--log-format`` options of the CLI group take
precedence over both.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# HTTP and AWS client loggers; their DEBUG output buries the sync lines
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "botocore", "boto3", "s3transfer")


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    {"ts": "...", "level": "...", "logger": "...", "message": "...", "repo": "libfoo"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        repo = getattr(record, "repo", None)
        if repo is not None:
            entry["repo"] = repo
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class HumanFormatter(logging.Formatter):
    """
    Short colored lines for a terminal.

    12:34:56 INFO    [orchestrator   ] [sync] libfoo: already up to date
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.now().strftime("%H:%M:%S")

        level = f"{record.levelname:7}"
        if sys.stderr.isatty():
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        # Last dotted component: "depmirror.sync.transfer" -> "transfer"
        module = record.name.rsplit(".", 1)[-1][:15]

        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        return f"{stamp} {level} [{module:15}] {msg}"


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Falls back to LOG_LEVEL, then INFO.
        format_type: "json" or "text". Falls back to LOG_FORMAT, then text.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    numeric_level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if log_format == "json" else HumanFormatter())
    handler.setLevel(numeric_level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )
