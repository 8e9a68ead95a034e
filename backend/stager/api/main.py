from fastapi import APIRouter

from stager.api.routes import cleanup, generate, register, utils

api_router = APIRouter()
api_router.include_router(generate.router)
api_router.include_router(cleanup.router)
api_router.include_router(register.router)
api_router.include_router(utils.router)
