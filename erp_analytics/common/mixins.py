"""
Common mixins for ERP read models
"""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


class IdMixin:
    """String primary key, matching the ids the CRUD layer hands out"""

    id = Column(String(36), primary_key=True, default=generate_id, index=True)


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
