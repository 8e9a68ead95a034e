from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine

from stager.core.config import settings
from stager.models import RegisteredDevice

engine = create_engine(
    settings.registry_database_uri,
    connect_args={"check_same_thread": False},
)


def init_db(db_engine: Engine = engine) -> None:
    """Create the registry table if it is missing."""
    SQLModel.metadata.create_all(db_engine, tables=[RegisteredDevice.__table__])  # type: ignore[attr-defined]


def register_serial(session: Session, serial: str) -> bool:
    """Insert *serial* unless present. Returns True if a new row was added."""
    if session.get(RegisteredDevice, serial) is not None:
        return False
    session.add(RegisteredDevice(serial_number=serial))
    try:
        session.commit()
    except IntegrityError:
        # registered concurrently
        session.rollback()
        return False
    return True
