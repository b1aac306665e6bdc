"""
Shared columns for ORM entities
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands datetimes back without tzinfo; treat those as UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class EntityMixin:
    """
    Identity and audit columns

    The id and created_at are assigned at construction so a staged entity
    can be looked up by key before it is flushed.
    """
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True))

    def __init__(self, **kwargs):
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("created_at", utcnow())
        super().__init__(**kwargs)

    def touch(self, when: Optional[datetime] = None) -> None:
        self.updated_at = when or utcnow()


class SoftDeletable:
    """
    Capability mixin: rows are flagged as deleted instead of removed

    Repositories decide once, from the model class, whether soft delete is
    available. Default queries skip flagged rows.
    """
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("is_deleted", False)
        super().__init__(**kwargs)

    def mark_deleted(self, when: Optional[datetime] = None) -> None:
        self.is_deleted = True
        self.updated_at = when or utcnow()
