"""
Team model.

Organisational teams a candidate can be recommended into.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TimestampedModel


class Team(TimestampedModel):
    """
    Teams table - soft-deleted rows (deleted_at set) are not offered to the model.
    """

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
