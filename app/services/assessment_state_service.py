"""
Resolve where a candidate is in the assessment flow and render stored results.

Results written by older releases kept everything inside a JSON `summary`
blob; newer rows use the structured columns. Both are read and merged here.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.assessment_result import AssessmentResult
from app.repositories.assessment_attempt_repository import AssessmentAttemptRepository
from app.repositories.assessment_result_repository import AssessmentResultRepository
from app.schemas.assessment import AssessmentAttemptRead
from app.schemas.result import AssessmentResultRecord, LatestResultRecord, Role, SkillScore
from app.schemas.state import AssessmentResolution, NextRoute
from app.utils.normalize import (
    dedupe_strings,
    merge_skill_scores,
    normalise_hr_approval_status,
    normalise_skill_scores,
    normalise_string_array,
    parse_json_object,
)

logger = logging.getLogger(__name__)


def to_role(role_name: Optional[str]) -> Optional[Role]:
    if not role_name:
        return None
    return Role(name=role_name, title=role_name)


def _summary_text(result: AssessmentResult, blob: Optional[dict]) -> Optional[str]:
    """Blob summary, then ai_summary, then a plain-text summary column."""
    candidates = [
        blob.get("summary") if blob else None,
        result.ai_summary,
        result.summary if blob is None else None,
    ]
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None


def map_result(
    result: AssessmentResult,
    band: Optional[str] = None,
    team_name: Optional[str] = None,
) -> AssessmentResultRecord:
    """Merge structured columns with the legacy summary blob into one record."""
    blob = parse_json_object(result.summary)

    def from_blob(key: str) -> Any:
        return blob.get(key) if blob else None

    blob_development_areas = from_blob("development_areas")
    if blob_development_areas is None:
        blob_development_areas = from_blob("weaknesses")

    def merged(column_value: Any, blob_value: Any):
        return dedupe_strings(
            normalise_string_array(column_value, parse_strings=True),
            normalise_string_array(blob_value, parse_strings=True),
        )

    skill_scores = merge_skill_scores(
        normalise_skill_scores(result.skill_scores),
        normalise_skill_scores(from_blob("skill_scores")),
    )

    hr_status = (
        normalise_hr_approval_status(result.hr_review_status)
        or normalise_hr_approval_status(band)
        or "pending"
    )

    return AssessmentResultRecord(
        summary=_summary_text(result, blob),
        strengths=merged(result.strengths, from_blob("strengths")),
        development_areas=merged(result.weaknesses, blob_development_areas),
        skill_scores=[SkillScore(**entry) for entry in skill_scores],
        recommended_roles=merged(result.recommended_roles, from_blob("recommended_roles")),
        development_suggestions=merged(result.development_suggestions, from_blob("development_suggestions")),
        completed_at=result.analysis_completed_at,
        hr_approval_status=hr_status,
        team_fit=merged([team_name] if team_name else [], from_blob("team_fit")),
    )


class AssessmentStateService:
    """Read-side service: next route for a candidate and their latest result."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.attempts = AssessmentAttemptRepository(db)
        self.results = AssessmentResultRepository(db)

    async def resolve_state(self, candidate_id: Optional[str]) -> AssessmentResolution:
        """
        Decide the next screen for a candidate.

        A stored result always wins, even over a newer open attempt. Without a
        result, the newest attempt that is neither submitted nor completed sends
        the candidate back to the assessment. Otherwise they pick a role.
        """
        if not candidate_id or not candidate_id.strip():
            return AssessmentResolution(route=NextRoute.ROLE_SELECTION)

        row = await self.results.get_latest_with_context(candidate_id)
        if row is not None:
            result = row.AssessmentResult
            logger.info("Resolved assessment state candidate_id=%s route=result", candidate_id)
            return AssessmentResolution(
                route=NextRoute.RESULT,
                role=to_role(row.role or result.assessment_id),
                result=map_result(result, band=row.band, team_name=row.team_name),
            )

        attempt = await self.attempts.get_latest_open_for_auth_id(candidate_id)
        if attempt is not None:
            logger.info("Resolved assessment state candidate_id=%s route=assessment", candidate_id)
            return AssessmentResolution(
                route=NextRoute.ASSESSMENT,
                role=to_role(attempt.role),
                attempt=AssessmentAttemptRead.model_validate(attempt),
            )

        logger.info("Resolved assessment state candidate_id=%s route=role-selection", candidate_id)
        return AssessmentResolution(route=NextRoute.ROLE_SELECTION)

    async def get_latest_result(
        self,
        candidate_id: str,
        assessment_id: Optional[str] = None,
    ) -> Optional[LatestResultRecord]:
        if not candidate_id:
            return None

        row = await self.results.get_latest_with_context(candidate_id, assessment_id)
        if row is None:
            return None

        result = row.AssessmentResult
        record = map_result(result, band=row.band, team_name=row.team_name)
        return LatestResultRecord(
            **record.model_dump(),
            id=result.id,
            assessment_id=result.assessment_id,
            assessment_attempt_id=result.assessment_attempt_id,
            analysis_model=result.analysis_model,
            insight_locale=result.insight_locale,
            created_at=result.created_at,
            role=to_role(row.role or result.assessment_id),
        )
