"""
AssessmentResult model.

Stores the AI-derived evaluation of a completed attempt.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import JSONType, TimestampedModel


class AssessmentResult(TimestampedModel):
    """
    AssessmentResult table - one row per completed attempt.

    The structured columns (strengths, weaknesses, ...) are the source of truth.
    `summary` is the legacy JSON blob that older rows used to carry the same
    data; readers merge both.
    """

    __tablename__ = "assessment_results"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    assessment_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Unique: at most one result per attempt
    assessment_attempt_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("assessment_attempts.id"),
        nullable=False,
        unique=True,
    )

    strengths: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    # Development areas (legacy column name)
    weaknesses: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    development_suggestions: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    recommended_roles: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    # [{"name": str, "score": float}]
    skill_scores: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    summary: Mapped[Optional[Any]] = mapped_column(
        JSONType,
        nullable=True,
    )

    ai_summary: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    analysis_model: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    analysis_completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    insight_locale: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
    )

    team_fit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id"),
        nullable=True,
    )

    # Set by the HR review workflow
    hr_review_status: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
