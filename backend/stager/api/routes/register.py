"""
Local serial-number registration form (GET/POST /register).
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from stager.api.deps import SessionDep
from stager.core.db import register_serial
from stager.models import normalize_serial

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))

router = APIRouter(prefix="/register", tags=["register"])


@router.get("", response_class=HTMLResponse)
def register_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "register.html", {})


@router.post("", response_class=HTMLResponse)
def register_submit(
    request: Request,
    session: SessionDep,
    sn: Annotated[str, Form()] = "",
) -> HTMLResponse:
    serial = normalize_serial(sn)
    if not serial:
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error": "Serial number is required."},
            status_code=400,
        )
    created = register_serial(session, serial)
    if created:
        logger.info("Registered serial %s", serial)
    return templates.TemplateResponse(
        request,
        "register.html",
        {"serial": serial, "registered": created, "already_registered": not created},
    )
