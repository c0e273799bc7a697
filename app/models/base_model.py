"""
Base model with common fields.

All assessment tables inherit from this to get:
- id (UUID primary key)
- created_at (when the record was created)
- updated_at (when the record was last modified)
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class TimestampedModel(Base):
    """
    Abstract base class for all assessment models.

    This is not a real table - it's a template that other models inherit from.
    """

    __abstract__ = True  # This means: don't create a table for this class

    # Primary key - UUID (universally unique identifier)
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Timestamps - set in Python so ordering by creation time has sub-second precision
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )
