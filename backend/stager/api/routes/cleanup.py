import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stager.api.deps import SweeperDep
from stager.schemas import CleanupResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cleanup"])


@router.get("/cleanup", response_model=CleanupResponse)
def cleanup(sweeper: SweeperDep) -> Any:
    """
    Run one retention sweep over the stage-output roots.
    """
    try:
        report = sweeper.sweep()
    except Exception as e:
        logger.exception("Cleanup failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": f"Cleanup failed: {e}"},
        )
    return CleanupResponse.from_report(report)
