"""
Shared pieces for the pydantic models
"""
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def get_current_utc_time():
    """Get current UTC time for default values"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class CamelModel(BaseModel):
    """Base model whose wire and storage documents use camelCase keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_document(self) -> dict:
        """camelCase dict with native datetimes and plain enum values, as stored in MongoDB"""
        return _plain(self.model_dump(by_alias=True))
