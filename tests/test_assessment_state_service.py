import json
from datetime import timedelta

import pytest

from app.models import AssessmentAttempt, AssessmentResult, Team
from app.schemas.state import NextRoute
from app.services.assessment_state_service import AssessmentStateService, map_result
from app.utils.time import utc_now


async def _attempt(db, candidate, status="in_progress", submitted=False, created_at=None, role="Backend Engineer"):
    attempt = AssessmentAttempt(
        user_id=candidate.id,
        assessment_id="backend-engineer",
        role=role,
        status=status,
        ai_status="idle",
        total_questions=10,
        submitted_at=utc_now() if submitted else None,
    )
    if created_at is not None:
        attempt.created_at = created_at
    db.add(attempt)
    await db.commit()
    return attempt


async def _result(db, candidate, attempt, created_at=None, **values):
    result = AssessmentResult(
        user_id=candidate.id,
        assessment_id=attempt.assessment_id,
        assessment_attempt_id=attempt.id,
        **values,
    )
    if created_at is not None:
        result.created_at = created_at
    db.add(result)
    await db.commit()
    return result


class _FailingSession:
    """Any storage access fails the test."""

    def __getattr__(self, name):
        raise AssertionError(f"storage accessed: {name}")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_candidate_short_circuits_without_queries():
    service = AssessmentStateService(_FailingSession())

    for candidate_id in ("", "   ", None):
        resolution = await service.resolve_state(candidate_id)
        assert resolution.route is NextRoute.ROLE_SELECTION
        assert resolution.role is None
        assert resolution.result is None
        assert resolution.attempt is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_candidate_without_history_goes_to_role_selection(db, candidate):
    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)
    assert resolution.route is NextRoute.ROLE_SELECTION


@pytest.mark.unit
@pytest.mark.asyncio
async def test_open_attempt_routes_to_assessment(db, candidate):
    attempt = await _attempt(db, candidate)

    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)

    assert resolution.route is NextRoute.ASSESSMENT
    assert resolution.attempt.id == attempt.id
    assert resolution.role.name == "Backend Engineer"
    assert resolution.role.title == "Backend Engineer"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_submitted_attempt_is_not_resumed(db, candidate):
    await _attempt(db, candidate, status="awaiting_ai", submitted=True)

    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)

    assert resolution.route is NextRoute.ROLE_SELECTION


@pytest.mark.unit
@pytest.mark.asyncio
async def test_result_wins_over_newer_open_attempt(db, candidate):
    now = utc_now()
    done = await _attempt(db, candidate, status="completed", submitted=True, created_at=now - timedelta(days=2))
    await _result(db, candidate, done, strengths=["Teamwork"], created_at=now - timedelta(days=1))
    await _attempt(db, candidate, created_at=now)

    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)

    assert resolution.route is NextRoute.RESULT
    assert resolution.attempt is None
    assert resolution.result.strengths == ["Teamwork"]
    assert resolution.role.name == "Backend Engineer"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_latest_result_is_used(db, candidate):
    now = utc_now()
    first = await _attempt(db, candidate, status="completed", created_at=now - timedelta(days=3))
    second = await _attempt(db, candidate, status="completed", created_at=now - timedelta(days=2))
    await _result(db, candidate, first, ai_summary="Older", created_at=now - timedelta(days=2))
    await _result(db, candidate, second, ai_summary="Newer", created_at=now - timedelta(days=1))

    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)

    assert resolution.result.summary == "Newer"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_result_merges_columns_and_legacy_blob(db, candidate):
    team = Team(name="Platform Engineering")
    db.add(team)
    await db.commit()
    attempt = await _attempt(db, candidate, status="completed")
    await _result(
        db,
        candidate,
        attempt,
        strengths=["Teamwork", "Focus"],
        weaknesses=["Delegation"],
        skill_scores=[{"name": "Communication", "score": 80}],
        summary=json.dumps(
            {
                "strengths": ["teamwork", "Curiosity"],
                "weaknesses": ["Public speaking"],
                "skill_scores": [{"name": "communication", "score": 10}, {"name": "Ownership", "score": "75.5"}],
                "team_fit": ["Platform Engineering", "Data Science"],
                "summary": "From the blob",
            }
        ),
        ai_summary="From the column",
        team_fit_id=team.id,
        hr_review_status="accepted",
    )

    latest = await AssessmentStateService(db).get_latest_result(candidate.auth_id)

    assert latest.strengths == ["Teamwork", "Focus", "Curiosity"]
    assert latest.development_areas == ["Delegation", "Public speaking"]
    assert [(s.name, s.score) for s in latest.skill_scores] == [("Communication", 80.0), ("Ownership", 75.5)]
    assert latest.team_fit == ["Platform Engineering", "Data Science"]
    assert latest.summary == "From the blob"
    assert latest.hr_approval_status == "approved"
    assert latest.assessment_attempt_id == attempt.id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_hr_status_falls_back_to_profile_band(db, candidate):
    candidate.band = "rejected"
    await db.commit()
    attempt = await _attempt(db, candidate, status="completed")
    await _result(db, candidate, attempt)

    resolution = await AssessmentStateService(db).resolve_state(candidate.auth_id)

    assert resolution.result.hr_approval_status == "rejected"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_latest_result_filters_by_assessment(db, candidate):
    attempt = await _attempt(db, candidate, status="completed")
    await _result(db, candidate, attempt)
    service = AssessmentStateService(db)

    assert await service.get_latest_result(candidate.auth_id, "backend-engineer") is not None
    assert await service.get_latest_result(candidate.auth_id, "designer") is None
    assert await service.get_latest_result("someone-else") is None


@pytest.mark.unit
def test_summary_text_precedence():
    plain = AssessmentResult(summary="  Plain text summary ", ai_summary=None)
    assert map_result(plain).summary == "Plain text summary"

    with_ai = AssessmentResult(summary="Plain text summary", ai_summary="AI paragraph")
    assert map_result(with_ai).summary == "AI paragraph"

    blob_without_summary = AssessmentResult(summary={"strengths": ["x"]}, ai_summary=None)
    assert map_result(blob_without_summary).summary is None
    assert map_result(blob_without_summary).hr_approval_status == "pending"
