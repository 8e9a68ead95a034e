"""
Health-check helpers for liveness and readiness probes.

Liveness:  is the process alive?  (no I/O)
Readiness: can it serve traffic?  (templates present, stage roots writable,
storage engine available)
"""

import logging
import os

from stager.core.config import Settings
from stager.engines.sql import get_storage_engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Individual dependency checks
# ---------------------------------------------------------------------------

def check_templates(settings: Settings) -> list[str]:
    """Return the names of missing SQL dump templates."""
    missing = []
    for name in (settings.STAGE2_TEMPLATE, settings.STAGE3_TEMPLATE):
        if not (settings.BASE_PATH / name).is_file():
            missing.append(name)
    return missing


def check_stage_roots(settings: Settings) -> bool:
    """True if every stage-output root exists (or can be created) and is writable."""
    try:
        for root in settings.stage_roots:
            root.mkdir(parents=True, exist_ok=True)
            if not os.access(root, os.W_OK | os.X_OK):
                return False
        return True
    except OSError:
        logger.warning("Stage root check failed, treating as unhealthy", exc_info=True)
        return False


def check_storage_engine(settings: Settings) -> bool:
    return get_storage_engine(settings).is_available()


# ---------------------------------------------------------------------------
# Composite probes
# ---------------------------------------------------------------------------

def liveness_check() -> tuple[bool, list[str]]:
    """
    Lightweight liveness probe; just confirms the Python process is responsive.
    No I/O.  Return format matches readiness_check for consistency.
    """
    return (True, [])


def readiness_check(settings: Settings) -> tuple[bool, list[str]]:
    """
    Run template + stage root + storage engine checks.
    Returns (ok, list of failure messages).
    """
    failures: list[str] = [f"template_missing:{name}" for name in check_templates(settings)]

    if not check_stage_roots(settings):
        failures.append("stage_roots")

    if not check_storage_engine(settings):
        failures.append("storage_engine")

    return (len(failures) == 0, failures)
