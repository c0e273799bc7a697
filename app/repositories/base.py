"""
Shared helpers for repositories.

Storage failures surface as PersistenceError with the driver error chained.
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import PersistenceError


class BaseRepository:
    """Holds the session and wraps statement execution."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _execute(self, statement, action: str):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not {action}", exc) from exc

    async def _add(self, instance: Any, action: str) -> Any:
        self.db.add(instance)
        try:
            await self.db.flush()
            await self.db.refresh(instance)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not {action}", exc) from exc
        return instance

    async def _save(self, instance: Any, action: str) -> Any:
        try:
            await self.db.flush()
            await self.db.refresh(instance)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not {action}", exc) from exc
        return instance
