from fastapi import APIRouter
from fastapi.responses import JSONResponse

from stager.api.deps import SettingsDep
from stager.core.health import liveness_check, readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/liveness/", response_model=None)
async def liveness() -> bool | JSONResponse:
    """
    Liveness probe: is the process alive and responsive?
    """
    ok, failures = liveness_check()
    if not ok:
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Process unhealthy", "data": failures},
        )
    return True


@router.get("/health-check/", response_model=None)
def health_check(cfg: SettingsDep) -> bool | JSONResponse:
    """
    Readiness probe: can the service handle traffic?

    Checks: both SQL dump templates present, stage-output roots writable,
    storage engine available. Returns 200 with true if all pass; 503 otherwise.
    """
    ok, failures = readiness_check(cfg)
    if not ok:
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "message": "Service Unavailable",
                "data": failures,
            },
        )
    return True
