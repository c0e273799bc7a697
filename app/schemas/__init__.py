"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.assessment import (
    AnswerInput,
    AnswerRead,
    AssessmentAttemptRead,
    AttemptMeta,
    AttemptStart,
    CheatingEvent,
)
from app.schemas.result import AssessmentResultRecord, LatestResultRecord, Role, SkillScore
from app.schemas.analysis import (
    AnalysisAnswer,
    AnalysisOutcome,
    AnalysisRequest,
    GeminiAnalysis,
)
from app.schemas.state import AssessmentResolution, NextRoute

__all__ = [
    "AnswerInput",
    "AnswerRead",
    "AssessmentAttemptRead",
    "AttemptMeta",
    "AttemptStart",
    "CheatingEvent",
    "AssessmentResultRecord",
    "LatestResultRecord",
    "Role",
    "SkillScore",
    "AnalysisAnswer",
    "AnalysisOutcome",
    "AnalysisRequest",
    "GeminiAnalysis",
    "AssessmentResolution",
    "NextRoute",
]
