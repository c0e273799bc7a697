"""
Repository for AssessmentAttempt database operations.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select, update

from app.models.assessment_attempt import AssessmentAttempt
from app.models.user import User
from app.repositories.base import BaseRepository


class AssessmentAttemptRepository(BaseRepository):
    """Repository for assessment attempts."""

    async def get_by_id(self, attempt_id: UUID) -> Optional[AssessmentAttempt]:
        result = await self._execute(
            select(AssessmentAttempt).where(AssessmentAttempt.id == attempt_id),
            "load assessment attempt",
        )
        return result.scalar_one_or_none()

    async def get_latest(self, user_id: UUID, assessment_id: str) -> Optional[AssessmentAttempt]:
        """Most recent attempt for a (candidate, assessment) pair."""
        result = await self._execute(
            select(AssessmentAttempt)
            .where(
                AssessmentAttempt.user_id == user_id,
                AssessmentAttempt.assessment_id == assessment_id,
            )
            .order_by(AssessmentAttempt.created_at.desc())
            .limit(1),
            "load assessment attempt",
        )
        return result.scalar_one_or_none()

    async def get_latest_open_for_auth_id(self, auth_id: str) -> Optional[AssessmentAttempt]:
        """Most recent attempt that is neither submitted nor completed."""
        result = await self._execute(
            select(AssessmentAttempt)
            .join(User, User.id == AssessmentAttempt.user_id)
            .where(
                User.auth_id == auth_id,
                AssessmentAttempt.submitted_at.is_(None),
                AssessmentAttempt.status != "completed",
            )
            .order_by(AssessmentAttempt.created_at.desc())
            .limit(1),
            "load assessment attempt",
        )
        return result.scalar_one_or_none()

    async def add(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        return await self._add(attempt, "create assessment attempt")

    async def save(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        """Flush pending changes on an attempt and reload it."""
        return await self._save(attempt, "update assessment attempt")

    async def update_if_status(self, attempt_id: UUID, expected_status: str, values: Dict[str, Any]) -> bool:
        """
        Compare-and-swap update.

        Applies `values` only while the stored status still equals
        `expected_status`. Returns False when another writer got there first.
        """
        result = await self._execute(
            update(AssessmentAttempt)
            .where(
                AssessmentAttempt.id == attempt_id,
                AssessmentAttempt.status == expected_status,
            )
            .values(**values)
            .execution_options(synchronize_session="fetch"),
            "update assessment attempt",
        )
        return result.rowcount == 1

    async def mark_ai_failed(self, attempt_id: UUID, message: str, at: datetime) -> None:
        """Record a failed analysis on any attempt that has not completed."""
        await self._execute(
            update(AssessmentAttempt)
            .where(
                AssessmentAttempt.id == attempt_id,
                AssessmentAttempt.status != "completed",
            )
            .values(ai_status="failed", last_ai_error=message, last_activity_at=at)
            .execution_options(synchronize_session="fetch"),
            "record analysis failure",
        )
