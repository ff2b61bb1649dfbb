"""SQLAlchemy models for client-local session persistence."""
from datetime import datetime, UTC
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now():
    """Get current UTC timestamp."""
    return datetime.now(UTC)


class StorageSlot(Base):
    """Named key/value slot (credential, cached profile)."""
    __tablename__ = "storage_slots"

    name = Column(String(100), primary_key=True, index=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        # Never render the value, it may hold a bearer credential
        return f"<StorageSlot(name={self.name})>"
