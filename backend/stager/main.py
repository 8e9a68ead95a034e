import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles

from stager.api.main import api_router
from stager.core.config import settings
from stager.core.db import init_db
from stager.core.errors import StagerError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
)
_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    for root in settings.stage_roots:
        root.mkdir(parents=True, exist_ok=True)
    init_db()
    _logger.info("Serving artifacts from %s", settings.BASE_PATH)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Global exception handlers: {success: false, error} envelope
# ---------------------------------------------------------------------------


@app.exception_handler(StagerError)
async def stager_exception_handler(request: Request, exc: StagerError) -> JSONResponse:
    """Pipeline errors -> {success: false, error} with the error's status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with a human-readable detail string instead of raw Pydantic errors."""
    errors = exc.errors()
    messages = []
    for err in errors:
        loc = " → ".join(str(l) for l in err.get("loc", []) if l != "body")
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return JSONResponse(
        status_code=422,
        content={"detail": "; ".join(messages)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions: log and return 500 with a safe message."""
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    error = "Internal server error"
    if settings.ENVIRONMENT == "local":
        error = f"Internal server error: {exc}"
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": error},
    )


app.include_router(api_router)

# Generated artifact trees and the descriptor tree, served as static files
for _prefix in (*settings.stage_dirs.values(), settings.DESCRIPTOR_DIR):
    app.mount(
        f"/{_prefix}",
        StaticFiles(directory=settings.BASE_PATH / _prefix, check_dir=False),
        name=_prefix,
    )
