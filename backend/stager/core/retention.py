"""
Retention sweep for generated artifact directories.

Every immediate child directory of a stage-output root whose mtime is older
than the retention threshold is removed with everything below it. Directories
that still carry the in-progress marker are skipped until the marker itself
is stale. The sweep never raises; failures are logged and reported.
"""

import logging
import os
import shutil
import stat
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from stager.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class DeletedDirectory:
    path: str
    age_seconds: int


@dataclass
class SweepReport:
    deleted: list[DeletedDirectory] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def delete_dir(path: Path) -> None:
    """Remove *path* bottom-up. A path that is already gone is not an error."""
    if not path.exists():
        return
    shutil.rmtree(path)


class RetentionSweeper:
    def __init__(
        self,
        roots: Iterable[Path],
        *,
        max_age_seconds: float = 600,
        marker: str = ".inprogress",
        stale_marker_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.roots = list(roots)
        self.max_age_seconds = max_age_seconds
        self.marker = marker
        self.stale_marker_seconds = stale_marker_seconds
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetentionSweeper":
        return cls(
            settings.stage_roots,
            max_age_seconds=settings.RETENTION_SECONDS,
            marker=settings.IN_PROGRESS_MARKER,
            stale_marker_seconds=settings.RETENTION_STALE_LOCK_SECONDS,
        )

    def sweep(self) -> SweepReport:
        report = SweepReport()
        now = self.clock()
        for root in self.roots:
            self._sweep_root(root, now, report)
        logger.info(
            "Cleanup completed (%d deleted, %d in progress, %d errors)",
            len(report.deleted),
            len(report.skipped),
            len(report.errors),
        )
        return report

    def _sweep_root(self, root: Path, now: float, report: SweepReport) -> None:
        try:
            with os.scandir(root) as it:
                entries = list(it)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Cannot list %s: %s", root, e)
            report.errors.append(f"{root}: {e}")
            return

        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Cannot stat %s: %s", entry.path, e)
                report.errors.append(f"{entry.path}: {e}")
                continue
            if not stat.S_ISDIR(st.st_mode):
                continue

            age = now - st.st_mtime
            if age <= self.max_age_seconds:
                continue

            path = Path(entry.path)
            if (path / self.marker).exists() and age <= self.stale_marker_seconds:
                logger.info("Skipping in-progress directory: %s (age: %ds)", path, round(age))
                report.skipped.append(str(path))
                continue

            logger.info("Deleting old directory: %s (age: %ds)", path, round(age))
            try:
                delete_dir(path)
            except OSError as e:
                logger.warning("Failed to delete %s: %s", path, e)
                report.errors.append(f"{path}: {e}")
                continue
            report.deleted.append(DeletedDirectory(str(path), round(age)))
