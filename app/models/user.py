"""
User model.

Represents a candidate profile. The external identity issued by the auth
provider (`auth_id`) is what callers pass around; `id` is the internal key
that attempts and results reference.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TimestampedModel


class User(TimestampedModel):
    """
    Users table - one row per candidate profile.
    """

    __tablename__ = "users"

    # External identity (auth provider subject)
    auth_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    # Legacy HR approval proxy, still read when a result has no review status
    band: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
