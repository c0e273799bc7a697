"""Schemas for the language-model analysis of an attempt."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.assessment import AssessmentAttemptRead, AttemptMeta
from app.schemas.result import AssessmentResultRecord, SkillScore


Language = Literal["vi", "en"]


class AnalysisAnswer(BaseModel):
    question_id: Optional[str] = None
    answer_text: str = ""


class AnalysisRequest(BaseModel):
    """
    Input for analysing a submitted attempt.

    `assessment_id` and `role` default to the values stored on the attempt.
    """

    candidate_id: str = Field(min_length=1)
    assessment_id: Optional[str] = None
    role: Optional[str] = None
    candidate_name: Optional[str] = None
    language: Language = "en"
    answers: List[AnalysisAnswer] = Field(default_factory=list)
    meta: Optional[AttemptMeta] = None


class GeminiAnalysis(BaseModel):
    """Normalized analysis extracted from a model response."""

    model_config = ConfigDict(protected_namespaces=())

    model: str
    skill_scores: List[SkillScore] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    development_areas: List[str] = Field(default_factory=list)
    recommended_roles: List[str] = Field(default_factory=list)
    team_fit: List[str] = Field(default_factory=list)
    summary: str = ""
    raw: Any = None

    @classmethod
    def empty(cls, model: str) -> "GeminiAnalysis":
        return cls(model=model)


class AnalysisOutcome(BaseModel):
    attempt: AssessmentAttemptRead
    result: AssessmentResultRecord
    analysis: GeminiAnalysis
