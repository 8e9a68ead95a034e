"""
Artifact generation: GET /generate and the legacy GET /get, /get2 aliases.

The handlers are plain ``def`` so FastAPI runs the blocking pipeline on its
threadpool.
"""

from typing import Any

from fastapi import APIRouter

from stager.api.deps import BaseUrlDep, GeneratorDep
from stager.schemas import ErrorResponse, GenerateResponse, LegacyGenerateResponse

router = APIRouter(tags=["generate"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get(
    "/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
def generate(
    generator: GeneratorDep,
    base_url: BaseUrlDep,
    productId: str = "",
    guid: str = "",
    serial: str = "",
    debug: bool = False,
) -> Any:
    """
    Build the three stage artifacts for a device and return their links.
    """
    result = generator.generate(productId, guid, serial, base_url=base_url)
    return GenerateResponse.from_result(result, debug=debug)


@router.get(
    "/get",
    response_model=LegacyGenerateResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
def generate_legacy(
    generator: GeneratorDep,
    base_url: BaseUrlDep,
    prd: str = "",
    guid: str = "",
    sn: str = "",
) -> Any:
    """Legacy migration: GET /get?prd=&guid=&sn=, in the pre-migration response shape."""
    result = generator.generate(prd, guid, sn, base_url=base_url)
    return LegacyGenerateResponse.from_result(result)


@router.get(
    "/get2",
    response_model=LegacyGenerateResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
def generate_legacy_debug(
    generator: GeneratorDep,
    base_url: BaseUrlDep,
    prd: str = "",
    guid: str = "",
    sn: str = "",
) -> Any:
    """Legacy migration: GET /get2?prd=&guid=&sn=, descriptor diagnostics instead of paths."""
    result = generator.generate(prd, guid, sn, base_url=base_url)
    return LegacyGenerateResponse.from_result(result, debug=True)
