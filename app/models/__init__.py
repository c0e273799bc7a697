"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.user import User
from app.models.team import Team
from app.models.assessment_attempt import AssessmentAttempt
from app.models.assessment_answer import AssessmentAnswer
from app.models.assessment_result import AssessmentResult

# Export all models
__all__ = [
    "User",
    "Team",
    "AssessmentAttempt",
    "AssessmentAnswer",
    "AssessmentResult",
]
