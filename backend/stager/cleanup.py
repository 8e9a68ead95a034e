"""
Run one retention sweep over the stage-output roots (for cron).

Usage:
  python -m stager.cleanup [--base-path DIR] [--retention-seconds N]
  Or set env: BASE_PATH, RETENTION_SECONDS

Exit codes:
  0 success
  1 at least one directory could not be removed
"""

import argparse
import logging
from pathlib import Path

from stager.core.config import settings
from stager.core.retention import RetentionSweeper

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Delete generated artifact directories older than the retention threshold."
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help=f"Directory holding the stage-output roots (default {settings.BASE_PATH})",
    )
    parser.add_argument(
        "--retention-seconds",
        type=int,
        default=None,
        help=f"Maximum age in seconds (default {settings.RETENTION_SECONDS})",
    )
    args = parser.parse_args(argv)

    overrides = {}
    if args.base_path is not None:
        overrides["BASE_PATH"] = args.base_path
    if args.retention_seconds is not None:
        overrides["RETENTION_SECONDS"] = args.retention_seconds
    cfg = settings.model_copy(update=overrides)

    report = RetentionSweeper.from_settings(cfg).sweep()
    print(
        f"Cleanup done: {len(report.deleted)} deleted, "
        f"{len(report.skipped)} in progress, {len(report.errors)} errors"
    )
    return 1 if report.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
