"""
Device registry table.
"""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Timezone-aware UTC now (replaces deprecated datetime.utcnow())."""
    return datetime.now(timezone.utc)


class RegisteredDevice(SQLModel, table=True):
    __tablename__ = "registered_devices"

    serial_number: str = Field(primary_key=True, max_length=64)
    registered_at: datetime = Field(default_factory=_utc_now)


def normalize_serial(serial: str) -> str:
    return serial.strip().upper()
