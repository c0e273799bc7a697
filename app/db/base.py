"""
SQLAlchemy declarative base.

This is the foundation for all database models.
All models inherit from this Base class.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All tables (users, teams, attempts, answers, results) inherit from this
    class so that SQLAlchemy and Alembic track them together.
    """
    pass
