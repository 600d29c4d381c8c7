"""Custom SQLAlchemy types with cross-DB support."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, TypeDecorator


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamps on every backend.

    - On PostgreSQL: TIMESTAMP WITH TIME ZONE, values come back aware
    - On SQLite: stored as text without offset, values come back naive

    Values are normalized to UTC on the way in and made aware on the way out,
    so comparing ``created_at`` with ``updated_at`` works the same everywhere.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
