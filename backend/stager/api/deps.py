from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from stager.core.config import Settings, settings
from stager.core.db import engine
from stager.core.generator import ArtifactGenerator
from stager.core.retention import RetentionSweeper


def get_settings() -> Settings:
    return settings


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionDep = Annotated[Session, Depends(get_db)]


def get_generator(cfg: SettingsDep) -> ArtifactGenerator:
    return ArtifactGenerator.from_settings(cfg)


def get_sweeper(cfg: SettingsDep) -> RetentionSweeper:
    return RetentionSweeper.from_settings(cfg)


GeneratorDep = Annotated[ArtifactGenerator, Depends(get_generator)]
SweeperDep = Annotated[RetentionSweeper, Depends(get_sweeper)]


def get_base_url(request: Request, cfg: SettingsDep) -> str:
    """
    Base URL for generated links: the inbound request's scheme and Host header
    when TRUST_REQUEST_HOST is on, otherwise PUBLIC_SCHEME://PUBLIC_HOST.
    """
    host = request.headers.get("host")
    if cfg.TRUST_REQUEST_HOST and host:
        return f"{request.url.scheme}://{host}"
    return cfg.public_base_url


BaseUrlDep = Annotated[str, Depends(get_base_url)]
