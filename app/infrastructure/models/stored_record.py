"""SQLAlchemy model for whole-collection key-value records."""

from sqlalchemy import Column, DateTime, String, Text

from app.infrastructure.database import Base
from app.utils import now_in_app_timezone


class StoredRecordModel(Base):
    """One serialized collection stored under a unique key."""

    __tablename__ = "stored_record"

    key = Column(String(120), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=now_in_app_timezone,
        onupdate=now_in_app_timezone,
    )


__all__ = ["StoredRecordModel"]
