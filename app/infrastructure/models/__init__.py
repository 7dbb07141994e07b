"""ORM models used by the application infrastructure."""

from .stored_record import StoredRecordModel

__all__ = ["StoredRecordModel"]
