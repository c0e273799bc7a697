"""
AssessmentAttempt model.

One candidate's run through one assessment, from start to completion or
abandonment.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import JSONType, TimestampedModel


class AssessmentAttempt(TimestampedModel):
    """
    Assessment attempts table.

    `status` is the primary lifecycle (not_started -> in_progress -> awaiting_ai
    -> completed). `ai_status` is the side-channel for analysis bookkeeping
    (idle / processing / completed / failed).
    """

    __tablename__ = "assessment_attempts"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # The assessment id doubles as the role identifier (one assessment per role)
    assessment_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="not_started",
    )

    # Progress
    total_questions: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    answered_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    progress_percent: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Timing
    started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    last_activity_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    submitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    duration_seconds: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )

    average_seconds_per_question: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )

    # Per-question timings: {question_id: seconds}
    question_timings: Mapped[Optional[dict]] = mapped_column(
        JSONType,
        nullable=True,
    )

    # Anti-cheating signal
    cheating_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Ordered event log: [{type, question_id, occurred_at, metadata}]
    cheating_events: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )

    # AI bookkeeping
    ai_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="idle",
    )

    last_ai_error: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    ai_model: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_assessment_attempts_user_assessment", "user_id", "assessment_id"),
        Index("ix_assessment_attempts_user_created", "user_id", "created_at"),
    )
