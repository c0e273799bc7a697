"""
Assessment endpoints: attempt lifecycle, analysis and state resolution.

Authentication is handled upstream; the candidate identity (auth id) is an
explicit parameter.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_db, get_gemini_client
from app.errors import AppError
from app.schemas.analysis import AnalysisOutcome, AnalysisRequest
from app.schemas.assessment import AnswerInput, AnswerRead, AssessmentAttemptRead, AttemptMeta, AttemptStart
from app.schemas.result import LatestResultRecord
from app.schemas.state import AssessmentResolution
from app.services.assessment_analysis_service import AssessmentAnalysisService
from app.services.assessment_attempt_service import AssessmentAttemptService
from app.services.assessment_state_service import AssessmentStateService
from app.services.gemini_client import GeminiClient

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.post("/attempts", response_model=AssessmentAttemptRead)
async def start_attempt(
    payload: AttemptStart,
    db: AsyncSession = Depends(get_db),
):
    """Start a new attempt, or resume the open one for this candidate and assessment."""
    service = AssessmentAttemptService(db)
    return await service.start(payload, allow_retake=settings.ASSESSMENT_ALLOW_RETAKE)


@router.put("/attempts/{attempt_id}/meta", response_model=AssessmentAttemptRead)
async def update_attempt_meta(
    attempt_id: UUID,
    meta: AttemptMeta,
    db: AsyncSession = Depends(get_db),
):
    service = AssessmentAttemptService(db)
    return await service.update_meta(attempt_id, meta)


@router.post("/attempts/{attempt_id}/answers", response_model=AnswerRead)
async def record_answer(
    attempt_id: UUID,
    answer: AnswerInput,
    db: AsyncSession = Depends(get_db),
):
    """Save (or overwrite) the answer to one question."""
    service = AssessmentAttemptService(db)
    return await service.record_answer(attempt_id, answer)


@router.post("/attempts/{attempt_id}/submit", response_model=AssessmentAttemptRead)
async def submit_attempt(
    attempt_id: UUID,
    meta: Optional[AttemptMeta] = Body(default=None),
    db: AsyncSession = Depends(get_db),
):
    service = AssessmentAttemptService(db)
    return await service.submit(attempt_id, meta)


@router.post("/attempts/{attempt_id}/analyze", response_model=AnalysisOutcome)
async def analyze_attempt(
    attempt_id: UUID,
    request: AnalysisRequest,
    db: AsyncSession = Depends(get_db),
    client: GeminiClient = Depends(get_gemini_client),
):
    """Run the language-model analysis for a submitted attempt."""
    service = AssessmentAnalysisService(db, client=client)
    return await service.analyze(attempt_id, request)


@router.get("/state", response_model=AssessmentResolution)
async def resolve_state(
    candidate_id: str = Query(default=""),
    db: AsyncSession = Depends(get_db),
):
    """Where the candidate should land: result, assessment or role selection."""
    service = AssessmentStateService(db)
    return await service.resolve_state(candidate_id)


@router.get("/candidates/{candidate_id}/latest-result", response_model=LatestResultRecord)
async def latest_result(
    candidate_id: str,
    assessment_id: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    service = AssessmentStateService(db)
    record = await service.get_latest_result(candidate_id, assessment_id)
    if record is None:
        raise AppError(404, "RESULT_NOT_FOUND", "No assessment result for this candidate")
    return record
