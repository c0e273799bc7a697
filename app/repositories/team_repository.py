"""
Team repository - database operations for Team.
"""

from typing import List

from sqlalchemy import select

from app.models.team import Team
from app.repositories.base import BaseRepository


class TeamRepository(BaseRepository):
    """Repository for teams."""

    async def list_available(self) -> List[Team]:
        """Teams that are not soft-deleted, oldest first."""
        result = await self._execute(
            select(Team).where(Team.deleted_at.is_(None)).order_by(Team.created_at.asc()),
            "load teams",
        )
        return list(result.scalars().all())
