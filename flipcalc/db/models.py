"""
SQLAlchemy ORM models for the project stores.
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class RecordBlob(AuditMixin, Base):
    """
    One serialized project store.

    Each calculator keeps all of its saved projects in a single JSON blob
    named after the store (e.g. "rehabProjects_v1"). Writes always replace
    the whole blob.
    """

    __tablename__ = "record_blobs"

    store_name = Column(String(100), primary_key=True)
    payload = Column(Text, nullable=False, default="")
