"""
Repository for AssessmentResult database operations.
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Row

from app.models.assessment_attempt import AssessmentAttempt
from app.models.assessment_result import AssessmentResult
from app.models.team import Team
from app.models.user import User
from app.repositories.base import BaseRepository


class AssessmentResultRepository(BaseRepository):
    """Repository for assessment results."""

    async def create(self, **values: Any) -> AssessmentResult:
        result = AssessmentResult(**values)
        return await self._add(result, "save assessment result")

    async def exists_for_assessment(self, user_id: UUID, assessment_id: str) -> bool:
        result = await self._execute(
            select(AssessmentResult.id)
            .where(
                AssessmentResult.user_id == user_id,
                AssessmentResult.assessment_id == assessment_id,
            )
            .limit(1),
            "load assessment result",
        )
        return result.scalar_one_or_none() is not None

    async def get_latest_with_context(self, auth_id: str, assessment_id: Optional[str] = None) -> Optional[Row]:
        """
        Latest result for a candidate, joined with what is needed to render it.

        Row columns: AssessmentResult, band (profile), role and assessment_id
        (attempt), team_name (team-fit team, may be None).
        """
        query = (
            select(
                AssessmentResult,
                User.band.label("band"),
                AssessmentAttempt.role.label("role"),
                Team.name.label("team_name"),
            )
            .join(User, User.id == AssessmentResult.user_id)
            .join(AssessmentAttempt, AssessmentAttempt.id == AssessmentResult.assessment_attempt_id)
            .outerjoin(Team, Team.id == AssessmentResult.team_fit_id)
            .where(User.auth_id == auth_id)
        )
        if assessment_id is not None:
            query = query.where(AssessmentResult.assessment_id == assessment_id)

        result = await self._execute(
            query.order_by(AssessmentResult.created_at.desc()).limit(1),
            "load assessment result",
        )
        return result.first()
