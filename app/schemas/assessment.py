"""Schemas for assessment attempts and answers."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.schemas.base import RecordRead


class AttemptStart(BaseModel):
    """Start (or resume) an attempt for a candidate."""

    candidate_id: str = Field(min_length=1)
    assessment_id: str = Field(min_length=1)
    role: Optional[str] = None
    total_questions: int = Field(default=0, ge=0)


class CheatingEvent(BaseModel):
    type: str
    question_id: Optional[str] = None
    occurred_at: datetime
    metadata: Optional[Dict[str, Any]] = None


class AttemptMeta(BaseModel):
    """Timing and violation data collected by the client."""

    cheating_count: Optional[int] = Field(default=None, ge=0)
    cheating_events: Optional[List[CheatingEvent]] = None
    question_timings: Optional[Dict[str, float]] = None
    duration_seconds: Optional[float] = Field(default=None, ge=0)
    average_seconds_per_question: Optional[float] = Field(default=None, ge=0)


class AnswerInput(BaseModel):
    """
    One answer for one question.

    Exactly one of `answer_text` / `selected_option_id` carries the value.
    `answer_id` is the id of a previously saved row for the same question.
    """

    question_id: str = Field(min_length=1)
    answer_text: Optional[str] = None
    selected_option_id: Optional[str] = None
    time_spent_seconds: Optional[int] = Field(default=None, ge=0)
    answer_id: Optional[UUID] = None

    @model_validator(mode="after")
    def _single_value(self) -> "AnswerInput":
        if self.answer_text is not None and self.selected_option_id is not None:
            raise ValueError("answer_text and selected_option_id are mutually exclusive")
        return self


class AnswerRead(RecordRead):
    assessment_attempt_id: UUID
    question_id: str
    user_answer_text: Optional[str] = None
    selected_option_id: Optional[str] = None
    time_spent_seconds: Optional[int] = None


class AssessmentAttemptRead(RecordRead):
    """Public attempt shape."""

    user_id: UUID
    assessment_id: str
    role: Optional[str] = None
    status: str
    answered_count: int = 0
    total_questions: int = 0
    progress_percent: int = 0
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None
    ai_status: Optional[str] = None
    last_ai_error: Optional[str] = None
    duration_seconds: Optional[float] = None
    average_seconds_per_question: Optional[float] = None
    cheating_count: int = 0
