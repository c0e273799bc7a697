import json

import pytest

from app.schemas.analysis import AnalysisAnswer
from app.services.prompt_builder import (
    PREAMBLE,
    PromptRequest,
    build_prompt,
    prepare_prompt,
    truncate_answers,
)


def _request(answers, language="en", teams=None):
    return PromptRequest(
        role="Backend Engineer",
        candidate_name="Linh Tran",
        language=language,
        answers=answers,
        available_teams=teams or ["Platform Engineering", "Data Science"],
    )


def _context(prompt: str) -> dict:
    marker = "Assessment context:\n"
    return json.loads(prompt.split(marker, 1)[1])


@pytest.mark.unit
def test_prompt_contains_preamble_keys_and_context():
    answers = [
        AnalysisAnswer(question_id="q1", answer_text="I led the migration."),
        AnalysisAnswer(answer_text="I mentor juniors."),
    ]
    prompt = build_prompt(_request(answers), answers)

    assert prompt.startswith(PREAMBLE)
    for key in ("skill_scores", "strengths", "development_areas", "recommended_roles", "team_fit", "summary"):
        assert f'"{key}"' in prompt
    assert "Return only valid JSON." in prompt
    assert "You MUST respond in English language" in prompt

    context = _context(prompt)
    assert context["candidate"] == {"name": "Linh Tran", "target_role": "Backend Engineer"}
    assert context["available_teams"] == ["Platform Engineering", "Data Science"]
    assert context["answers"] == [
        {"order": 1, "answer_text": "I led the migration.", "question_id": "q1"},
        {"order": 2, "answer_text": "I mentor juniors."},
    ]


@pytest.mark.unit
def test_vietnamese_language_directive():
    answers = [AnalysisAnswer(answer_text="Tôi thích làm việc nhóm.")]
    prompt = build_prompt(_request(answers, language="vi"), answers)

    assert "You MUST respond in Vietnamese language" in prompt
    assert "tiếng Việt" in prompt
    # non-ASCII answer text stays readable in the context block
    assert "Tôi thích làm việc nhóm." in prompt


@pytest.mark.unit
def test_truncate_answers_adds_single_ellipsis_and_trims_before_it():
    answers = [AnalysisAnswer(answer_text="abcd    efghij"), AnalysisAnswer(answer_text="  short  ")]
    truncated = truncate_answers(answers, 9)

    assert truncated[0].answer_text == "abcd…"
    assert truncated[1].answer_text == "short"


@pytest.mark.unit
def test_short_prompt_is_not_truncated():
    answers = [AnalysisAnswer(question_id="q1", answer_text="  A concise answer.  ")]
    prepared = prepare_prompt(_request(answers), max_length=12000)

    assert prepared.truncated is False
    assert prepared.prompt_length == prepared.base_prompt_length == len(prepared.prompt)
    assert _context(prepared.prompt)["answers"][0]["answer_text"] == "A concise answer."


@pytest.mark.unit
def test_long_prompt_is_truncated_within_budget():
    answers = [AnalysisAnswer(question_id=f"q{i}", answer_text="word " * 2000) for i in range(10)]
    prepared = prepare_prompt(_request(answers), max_length=12000)

    assert prepared.truncated is True
    assert prepared.base_prompt_length > 12000
    assert prepared.prompt_length <= 12000
    assert prepared.prompt_length == len(prepared.prompt)
    for entry in _context(prepared.prompt)["answers"]:
        assert entry["answer_text"].endswith("…")
        assert len(entry["answer_text"]) <= 1200


@pytest.mark.unit
def test_truncation_uses_minimum_per_answer_budget_first():
    # 100 answers -> 12000 // 100 = 120, raised to the 400-char floor, then stepped down
    answers = [AnalysisAnswer(answer_text="x" * 1000) for _ in range(100)]
    prepared = prepare_prompt(_request(answers), max_length=12000)

    assert prepared.truncated is True
    lengths = {len(entry["answer_text"]) for entry in _context(prepared.prompt)["answers"]}
    assert len(lengths) == 1
    assert lengths.pop() < 400


@pytest.mark.unit
def test_truncation_stops_when_budget_reaches_zero():
    answers = [AnalysisAnswer(answer_text="y" * 5000) for _ in range(3)]
    # budget smaller than the fixed instructions: converges on empty answers
    prepared = prepare_prompt(_request(answers), max_length=200)

    assert prepared.truncated is True
    assert prepared.prompt_length > 200
    assert all(entry["answer_text"] == "…" for entry in _context(prepared.prompt)["answers"])
