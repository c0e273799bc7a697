"""
Repository for AssessmentAnswer database operations.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select

from app.models.assessment_answer import AssessmentAnswer
from app.repositories.base import BaseRepository


class AssessmentAnswerRepository(BaseRepository):
    """Answer store: one row per (attempt, question)."""

    async def get_by_id(self, answer_id: UUID) -> Optional[AssessmentAnswer]:
        result = await self._execute(
            select(AssessmentAnswer).where(AssessmentAnswer.id == answer_id),
            "load answer",
        )
        return result.scalar_one_or_none()

    async def get_for_question(self, attempt_id: UUID, question_id: str) -> Optional[AssessmentAnswer]:
        result = await self._execute(
            select(AssessmentAnswer).where(
                AssessmentAnswer.assessment_attempt_id == attempt_id,
                AssessmentAnswer.question_id == question_id,
            ),
            "load answer",
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        attempt_id: UUID,
        question_id: str,
        answer_text: Optional[str],
        selected_option_id: Optional[str],
        time_spent_seconds: Optional[int],
        answer_id: Optional[UUID] = None,
    ) -> AssessmentAnswer:
        """
        Create or update the answer for a question.

        An explicit `answer_id` is honoured only when it belongs to the same
        attempt and question; otherwise the row is looked up by (attempt, question).
        """
        current = None
        if answer_id is not None:
            current = await self.get_by_id(answer_id)
            if current is not None and (
                current.assessment_attempt_id != attempt_id or current.question_id != question_id
            ):
                current = None
        if current is None:
            current = await self.get_for_question(attempt_id, question_id)

        if current is None:
            answer = AssessmentAnswer(
                assessment_attempt_id=attempt_id,
                question_id=question_id,
                user_answer_text=answer_text,
                selected_option_id=selected_option_id,
                time_spent_seconds=time_spent_seconds,
            )
            return await self._add(answer, "save answer")

        current.user_answer_text = answer_text
        current.selected_option_id = selected_option_id
        if time_spent_seconds is not None:
            current.time_spent_seconds = time_spent_seconds
        return await self._save(current, "save answer")

    async def count_answered(self, attempt_id: UUID) -> int:
        """Answers with a non-empty value."""
        result = await self._execute(
            select(func.count(AssessmentAnswer.id)).where(
                AssessmentAnswer.assessment_attempt_id == attempt_id,
                (
                    (AssessmentAnswer.selected_option_id.is_not(None))
                    | (func.length(func.trim(func.coalesce(AssessmentAnswer.user_answer_text, ""))) > 0)
                ),
            ),
            "count answers",
        )
        return int(result.scalar_one())
