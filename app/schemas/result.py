"""Schemas for assessment results as shown to candidates and reviewers."""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


HrApprovalStatus = Literal["pending", "approved", "rejected"]


class SkillScore(BaseModel):
    name: str
    score: float = Field(ge=0, le=100)


class Role(BaseModel):
    name: str
    title: str


class AssessmentResultRecord(BaseModel):
    """Denormalized result, merged from the structured columns and the legacy summary blob."""

    summary: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    development_areas: List[str] = Field(default_factory=list)
    skill_scores: List[SkillScore] = Field(default_factory=list)
    recommended_roles: List[str] = Field(default_factory=list)
    development_suggestions: List[str] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    hr_approval_status: HrApprovalStatus = "pending"
    team_fit: List[str] = Field(default_factory=list)


class LatestResultRecord(AssessmentResultRecord):
    model_config = ConfigDict(protected_namespaces=())

    id: UUID
    assessment_id: str
    assessment_attempt_id: UUID
    analysis_model: Optional[str] = None
    insight_locale: Optional[str] = None
    created_at: datetime
    role: Optional[Role] = None
