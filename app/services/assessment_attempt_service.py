"""
Service for the candidate-facing attempt lifecycle: start, answers, metadata, submit.
"""

import logging
import math
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import AttemptNotFound, InvalidTransition, ProfileNotFound, RetakeNotAllowed
from app.models.assessment_attempt import AssessmentAttempt
from app.repositories.assessment_answer_repository import AssessmentAnswerRepository
from app.repositories.assessment_attempt_repository import AssessmentAttemptRepository
from app.repositories.assessment_result_repository import AssessmentResultRepository
from app.repositories.user_repository import UserRepository
from app.schemas.assessment import AnswerInput, AnswerRead, AssessmentAttemptRead, AttemptMeta, AttemptStart
from app.services.attempt_state import AiStatus, AttemptEvent, AttemptStatus, apply_transition
from app.utils.time import utc_now

logger = logging.getLogger(__name__)


def progress_percent(answered: int, total: int) -> int:
    if total <= 0:
        return 0
    return min(100, math.floor(answered / total * 100 + 0.5))


def meta_values(meta: Optional[AttemptMeta]) -> Dict[str, Any]:
    """Column values for the metadata fields that were supplied."""
    if meta is None:
        return {}

    values: Dict[str, Any] = {}
    if meta.cheating_count is not None:
        values["cheating_count"] = meta.cheating_count
    if meta.cheating_events is not None:
        values["cheating_events"] = [event.model_dump(mode="json") for event in meta.cheating_events]
    if meta.question_timings is not None:
        values["question_timings"] = dict(meta.question_timings)
    if meta.duration_seconds is not None:
        values["duration_seconds"] = meta.duration_seconds
    if meta.average_seconds_per_question is not None:
        values["average_seconds_per_question"] = meta.average_seconds_per_question
    return values


class AssessmentAttemptService:
    """Attempt lifecycle up to submission. Analysis lives in AssessmentAnalysisService."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.attempts = AssessmentAttemptRepository(db)
        self.answers = AssessmentAnswerRepository(db)
        self.results = AssessmentResultRepository(db)

    async def _get_attempt(self, attempt_id: UUID) -> AssessmentAttempt:
        attempt = await self.attempts.get_by_id(attempt_id)
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        return attempt

    async def start(self, payload: AttemptStart, allow_retake: bool = True) -> AssessmentAttemptRead:
        """
        Resume the open attempt for (candidate, assessment) or create a new one.

        A candidate has at most one non-completed attempt per assessment. With
        `allow_retake` off, a candidate that already has a result cannot start again.
        """
        user = await self.users.get_by_auth_id(payload.candidate_id)
        if user is None:
            raise ProfileNotFound(payload.candidate_id)

        now = utc_now()
        latest = await self.attempts.get_latest(user.id, payload.assessment_id)

        if latest is not None and latest.status != AttemptStatus.COMPLETED.value:
            apply_transition(latest, AttemptEvent.START)
            latest.total_questions = payload.total_questions
            latest.progress_percent = progress_percent(latest.answered_count, payload.total_questions)
            latest.last_activity_at = now
            if latest.started_at is None:
                latest.started_at = now
            if payload.role and not latest.role:
                latest.role = payload.role
            attempt = await self.attempts.save(latest)
            await self.db.commit()
            logger.info(
                "Resumed assessment attempt attempt_id=%s assessment_id=%s status=%s",
                attempt.id,
                attempt.assessment_id,
                attempt.status,
            )
            return AssessmentAttemptRead.model_validate(attempt)

        if not allow_retake:
            already_done = latest is not None or await self.results.exists_for_assessment(
                user.id, payload.assessment_id
            )
            if already_done:
                raise RetakeNotAllowed(payload.candidate_id, payload.assessment_id)

        attempt = AssessmentAttempt(
            user_id=user.id,
            assessment_id=payload.assessment_id,
            role=payload.role,
            status=AttemptStatus.NOT_STARTED.value,
            ai_status=AiStatus.IDLE.value,
            total_questions=payload.total_questions,
            answered_count=0,
            progress_percent=0,
            started_at=now,
            last_activity_at=now,
            cheating_count=0,
            cheating_events=[],
        )
        apply_transition(attempt, AttemptEvent.START)
        attempt = await self.attempts.add(attempt)
        await self.db.commit()
        logger.info(
            "Started assessment attempt attempt_id=%s assessment_id=%s total_questions=%s",
            attempt.id,
            attempt.assessment_id,
            attempt.total_questions,
        )
        return AssessmentAttemptRead.model_validate(attempt)

    async def update_meta(self, attempt_id: UUID, meta: AttemptMeta) -> AssessmentAttemptRead:
        """Record timing and violation data without moving the attempt."""
        attempt = await self._get_attempt(attempt_id)
        if attempt.status == AttemptStatus.COMPLETED.value:
            raise InvalidTransition(attempt.status, "update_meta")

        for column, value in meta_values(meta).items():
            setattr(attempt, column, value)
        attempt.last_activity_at = utc_now()
        attempt = await self.attempts.save(attempt)
        await self.db.commit()
        return AssessmentAttemptRead.model_validate(attempt)

    async def record_answer(self, attempt_id: UUID, answer: AnswerInput) -> AnswerRead:
        """Upsert one answer and refresh the attempt's progress counters."""
        attempt = await self._get_attempt(attempt_id)
        apply_transition(attempt, AttemptEvent.RECORD_ANSWER)

        row = await self.answers.upsert(
            attempt_id=attempt.id,
            question_id=answer.question_id,
            answer_text=answer.answer_text,
            selected_option_id=answer.selected_option_id,
            time_spent_seconds=answer.time_spent_seconds,
            answer_id=answer.answer_id,
        )

        answered = await self.answers.count_answered(attempt.id)
        attempt.answered_count = answered
        attempt.progress_percent = progress_percent(answered, attempt.total_questions)
        attempt.last_activity_at = utc_now()
        await self.attempts.save(attempt)
        await self.db.commit()
        return AnswerRead.model_validate(row)

    async def submit(self, attempt_id: UUID, meta: Optional[AttemptMeta] = None) -> AssessmentAttemptRead:
        """Hand the attempt over to analysis."""
        attempt = await self._get_attempt(attempt_id)
        apply_transition(attempt, AttemptEvent.SUBMIT)

        now = utc_now()
        attempt.submitted_at = now
        attempt.last_activity_at = now
        attempt.last_ai_error = None
        for column, value in meta_values(meta).items():
            setattr(attempt, column, value)

        attempt = await self.attempts.save(attempt)
        await self.db.commit()
        logger.info("Submitted assessment attempt attempt_id=%s answered=%s", attempt.id, attempt.answered_count)
        return AssessmentAttemptRead.model_validate(attempt)
