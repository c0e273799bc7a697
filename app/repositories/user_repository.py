"""
User repository - database operations for User.
"""

from typing import Optional

from sqlalchemy import select

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for candidate profile lookups."""

    async def get_by_auth_id(self, auth_id: str) -> Optional[User]:
        """Resolve the external candidate identity to a profile."""
        result = await self._execute(
            select(User).where(User.auth_id == auth_id),
            "load candidate profile",
        )
        return result.scalar_one_or_none()

    async def create(self, auth_id: str, email: Optional[str] = None, full_name: Optional[str] = None,
                     band: Optional[str] = None) -> User:
        user = User(auth_id=auth_id, email=email, full_name=full_name, band=band)
        return await self._add(user, "create candidate profile")
