"""
Analysis orchestration for submitted attempts.

Flow: filter answers -> load teams -> build prompt -> one Gemini call -> parse
-> store the result and complete the attempt in the same transaction.

Any failure after the attempt is loaded rolls the transaction back, records a
bounded error on the attempt (ai_status=failed) and re-raises. A run that
loses the completion compare-and-swap only rolls back: the attempt was
completed by the other run. Retrying a failed attempt moves it back to
ai_status=processing first.
"""

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import AttemptNotFound, InvalidTransition, ProfileNotFound
from app.models.assessment_attempt import AssessmentAttempt
from app.models.team import Team
from app.repositories.assessment_attempt_repository import AssessmentAttemptRepository
from app.repositories.assessment_result_repository import AssessmentResultRepository
from app.repositories.team_repository import TeamRepository
from app.repositories.user_repository import UserRepository
from app.schemas.analysis import AnalysisAnswer, AnalysisOutcome, AnalysisRequest, GeminiAnalysis
from app.schemas.assessment import AssessmentAttemptRead
from app.services.assessment_attempt_service import meta_values
from app.services.assessment_state_service import map_result
from app.services.attempt_state import AiStatus, AttemptEvent, AttemptStatus, can_apply, next_state
from app.services.gemini_client import GeminiClient
from app.services.prompt_builder import PromptRequest, prepare_prompt
from app.utils.normalize import truncate_text
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 500


def resolve_team_fit(recommended: Sequence[str], teams: Sequence[Team]) -> Optional[Team]:
    """First recommended name that matches an available team (trimmed, case-insensitive)."""
    by_name = {}
    for team in teams:
        by_name.setdefault(team.name.strip().casefold(), team)

    for name in recommended:
        team = by_name.get(name.strip().casefold())
        if team is not None:
            return team
    return None


def filter_answers(answers: Sequence[AnalysisAnswer]) -> List[AnalysisAnswer]:
    return [answer for answer in answers if answer.answer_text.strip()]


class AssessmentAnalysisService:
    """Runs the language-model analysis for one attempt and persists its outcome."""

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[GeminiClient] = None,
        max_prompt_chars: Optional[int] = None,
    ):
        self.db = db
        self.client = client or GeminiClient()
        self.max_prompt_chars = max_prompt_chars or settings.GEMINI_MAX_PROMPT_CHARS
        self.users = UserRepository(db)
        self.teams = TeamRepository(db)
        self.attempts = AssessmentAttemptRepository(db)
        self.results = AssessmentResultRepository(db)

    async def analyze(self, attempt_id: UUID, request: AnalysisRequest) -> AnalysisOutcome:
        attempt = await self.attempts.get_by_id(attempt_id)
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        if not can_apply(attempt.status, AttemptEvent.COMPLETE_ANALYSIS):
            raise InvalidTransition(attempt.status, AttemptEvent.COMPLETE_ANALYSIS.value)

        user = await self.users.get_by_auth_id(request.candidate_id)
        if user is None:
            raise ProfileNotFound(request.candidate_id)
        if user.id != attempt.user_id:
            raise AttemptNotFound(attempt_id)

        if attempt.ai_status == AiStatus.FAILED.value:
            logger.info("Retrying assessment analysis attempt_id=%s", attempt_id)
            await self.attempts.update_if_status(
                attempt_id, AttemptStatus.AWAITING_AI.value, {"ai_status": AiStatus.PROCESSING.value}
            )
            await self.db.commit()

        try:
            return await self._run(attempt, user.band, request)
        except InvalidTransition:
            # another run completed the attempt first
            await self.db.rollback()
            logger.warning("Assessment analysis superseded attempt_id=%s", attempt_id)
            raise
        except Exception as exc:
            await self._record_failure(attempt_id, exc)
            raise

    async def _analyse_answers(
        self,
        answers: List[AnalysisAnswer],
        role: str,
        request: AnalysisRequest,
    ) -> tuple[GeminiAnalysis, Optional[Team]]:
        if not answers:
            logger.info("No non-empty answers, skipping Gemini call role=%s", role)
            return GeminiAnalysis.empty(self.client.model), None

        self.client.validate_config()
        teams = await self.teams.list_available()
        prepared = prepare_prompt(
            PromptRequest(
                role=role,
                candidate_name=request.candidate_name,
                language=request.language,
                answers=answers,
                available_teams=[team.name for team in teams],
            ),
            self.max_prompt_chars,
        )

        logger.info(
            "Submitting analysis request answers=%s language=%s role=%s prompt_length=%s truncated=%s",
            len(answers),
            request.language,
            role,
            prepared.prompt_length,
            prepared.truncated,
        )
        if self.client.debug_logs:
            logger.debug("Gemini prompt text: %s", prepared.prompt)

        analysis = await self.client.analyze(prepared.prompt)
        return analysis, resolve_team_fit(analysis.team_fit, teams)

    async def _run(self, attempt: AssessmentAttempt, band: Optional[str], request: AnalysisRequest) -> AnalysisOutcome:
        attempt_id = attempt.id
        assessment_id = request.assessment_id or attempt.assessment_id
        role = request.role or attempt.role or assessment_id

        analysis, team = await self._analyse_answers(filter_answers(request.answers), role, request)

        completed_at = utc_now()
        result = await self.results.create(
            user_id=attempt.user_id,
            assessment_id=assessment_id,
            assessment_attempt_id=attempt_id,
            strengths=analysis.strengths,
            weaknesses=analysis.development_areas,
            development_suggestions=analysis.development_areas,
            recommended_roles=analysis.recommended_roles,
            skill_scores=[score.model_dump() for score in analysis.skill_scores],
            summary={
                "strengths": analysis.strengths,
                "development_areas": analysis.development_areas,
                "skill_scores": [score.model_dump() for score in analysis.skill_scores],
                "summary": analysis.summary,
                "team_fit": analysis.team_fit,
            },
            ai_summary=analysis.summary or None,
            analysis_model=analysis.model,
            analysis_completed_at=completed_at,
            insight_locale=request.language,
            team_fit_id=team.id if team is not None else None,
        )

        status, ai_status = next_state(attempt.status, attempt.ai_status, AttemptEvent.COMPLETE_ANALYSIS)
        values = {
            "status": status.value,
            "ai_status": ai_status.value,
            "completed_at": completed_at,
            "last_activity_at": completed_at,
            "last_ai_error": None,
            "ai_model": analysis.model,
            **meta_values(request.meta),
        }
        swapped = await self.attempts.update_if_status(attempt_id, AttemptStatus.AWAITING_AI.value, values)
        if not swapped:
            raise InvalidTransition(AttemptStatus.COMPLETED.value, AttemptEvent.COMPLETE_ANALYSIS.value)

        await self.db.commit()
        await self.db.refresh(attempt)
        await self.db.refresh(result)

        logger.info(
            "Assessment analysis completed attempt_id=%s result_id=%s skill_scores=%s",
            attempt_id,
            result.id,
            len(analysis.skill_scores),
        )
        # team-fit display names are the model's recommendations
        record = map_result(result, band=band)
        return AnalysisOutcome(
            attempt=AssessmentAttemptRead.model_validate(attempt),
            result=record,
            analysis=analysis,
        )

    async def _record_failure(self, attempt_id: UUID, exc: Exception) -> None:
        await self.db.rollback()
        message = truncate_text(str(exc) or exc.__class__.__name__, MAX_ERROR_MESSAGE_LENGTH)
        logger.exception("Assessment analysis failed attempt_id=%s error=%s", attempt_id, message)
        await self.attempts.mark_ai_failed(attempt_id, message, utc_now())
        await self.db.commit()
