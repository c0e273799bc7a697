"""Schemas for resolving where a candidate is in the assessment flow."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.schemas.assessment import AssessmentAttemptRead
from app.schemas.result import AssessmentResultRecord, Role


class NextRoute(str, Enum):
    RESULT = "result"
    ASSESSMENT = "assessment"
    ROLE_SELECTION = "role-selection"


class AssessmentResolution(BaseModel):
    route: NextRoute
    role: Optional[Role] = None
    result: Optional[AssessmentResultRecord] = None
    attempt: Optional[AssessmentAttemptRead] = None
