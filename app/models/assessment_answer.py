"""
AssessmentAnswer model.

One answer per (attempt, question) pair.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TimestampedModel


class AssessmentAnswer(TimestampedModel):
    """
    Assessment answers table - free text or a selected option, never both.
    """

    __tablename__ = "assessment_answers"

    assessment_attempt_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("assessment_attempts.id"),
        nullable=False,
        index=True,
    )

    question_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    user_answer_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    selected_option_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    time_spent_seconds: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("assessment_attempt_id", "question_id", name="uq_assessment_answers_attempt_question"),
    )
