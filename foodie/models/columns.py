"""Column types shared by the models."""

from sqlalchemy import Integer, String
from sqlalchemy.types import TypeEngine

from foodie.core.config import settings
from foodie.services.codec import CALENDAR_FORMAT_LENGTH, TimestampFormat


def timestamp_type(timestamp_format: str = settings.timestamp_format) -> TypeEngine:
    """Storage type for timestamp columns under the deployment's representation."""
    if TimestampFormat(timestamp_format.strip().lower()) is TimestampFormat.CALENDAR:
        return String(CALENDAR_FORMAT_LENGTH)
    return Integer()
