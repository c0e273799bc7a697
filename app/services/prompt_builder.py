"""
Prompt assembly for the assessment analysis request.

Builds a single text prompt from the candidate, the role, the answers and the
available teams. When the prompt exceeds the configured character budget,
answers are shortened to a shared per-answer limit that shrinks until the
prompt fits.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.schemas.analysis import AnalysisAnswer
from app.utils.normalize import truncate_text

logger = logging.getLogger(__name__)


MIN_TRUNCATED_ANSWER_CHARS = 400
TRUNCATION_STEP_CHARS = 200

PREAMBLE = "You are an experienced HR assessor specialising in behavioural and culture-fit interviews."

LANGUAGE_INSTRUCTIONS = {
    "vi": (
        "IMPORTANT: You MUST respond in Vietnamese language. All text in the JSON response "
        "(summary, strengths, development_areas, skill names) must be written in Vietnamese. "
        "Phân tích câu trả lời và trả về kết quả bằng tiếng Việt."
    ),
    "en": (
        "IMPORTANT: You MUST respond in English language. "
        "All text in the JSON response must be written in English."
    ),
}

RESPONSE_KEYS = [
    '- "skill_scores": array of objects with "name" (string) and "score" (0-100).',
    '- "strengths": array of strings describing positive behaviours.',
    '- "development_areas": array of strings for improvements.',
    '- "recommended_roles": array of strings suggesting suitable roles for this candidate.',
    '- "team_fit": array of strings listing the most suitable teams from the provided '
    '"available_teams" list. Only select teams that are relevant.',
    '- "summary": a concise paragraph (string) tailored for the candidate.',
]


@dataclass
class PromptRequest:
    role: str
    candidate_name: Optional[str]
    language: str
    answers: List[AnalysisAnswer]
    available_teams: List[str]


@dataclass
class PreparedPrompt:
    prompt: str
    prompt_length: int
    base_prompt_length: int
    truncated: bool


def build_prompt(request: PromptRequest, answers: Sequence[AnalysisAnswer]) -> str:
    """Render the prompt for `answers` (which may differ from request.answers after truncation)."""
    serialised_answers = []
    for index, answer in enumerate(answers, start=1):
        entry = {"order": index, "answer_text": answer.answer_text}
        if answer.question_id:
            entry["question_id"] = answer.question_id
        serialised_answers.append(entry)

    context = {
        "candidate": {
            "name": request.candidate_name,
            "target_role": request.role,
        },
        "available_teams": list(request.available_teams),
        "answers": serialised_answers,
    }

    parts = [
        PREAMBLE,
        "Evaluate the candidate responses and provide a structured summary.",
        "",
        LANGUAGE_INSTRUCTIONS.get(request.language, LANGUAGE_INSTRUCTIONS["en"]),
        "",
        "Return a strict JSON object with the following keys:",
        *RESPONSE_KEYS,
        "",
        "Do not include any additional commentary or markdown. Return only valid JSON.",
        "",
        "Assessment context:",
        json.dumps(context, indent=2, ensure_ascii=False),
    ]
    return "\n".join(parts)


def truncate_answers(answers: Sequence[AnalysisAnswer], max_length: int) -> List[AnalysisAnswer]:
    """Trim every answer and cut those longer than `max_length`, ellipsis included."""
    return [
        answer.model_copy(update={"answer_text": truncate_text(answer.answer_text, max_length)})
        for answer in answers
    ]


def prepare_prompt(request: PromptRequest, max_length: int) -> PreparedPrompt:
    """
    Build the prompt and shrink answers until it fits `max_length`.

    The per-answer limit starts at max(400, max_length // answer_count) and
    drops by 200 characters per round. If the fixed part of the prompt alone
    exceeds the budget, the loop stops once the limit reaches zero.
    """
    sanitised = [
        answer.model_copy(update={"answer_text": answer.answer_text.strip()})
        for answer in request.answers
    ]

    prompt = build_prompt(request, sanitised)
    base_prompt_length = len(prompt)
    if base_prompt_length <= max_length:
        return PreparedPrompt(
            prompt=prompt,
            prompt_length=base_prompt_length,
            base_prompt_length=base_prompt_length,
            truncated=False,
        )

    limit = max(MIN_TRUNCATED_ANSWER_CHARS, max_length // max(1, len(sanitised)))
    prompt = build_prompt(request, truncate_answers(sanitised, limit))
    while len(prompt) > max_length and limit > 0:
        limit = max(0, limit - TRUNCATION_STEP_CHARS)
        prompt = build_prompt(request, truncate_answers(sanitised, limit))

    logger.warning(
        "Analysis prompt truncated answers=%s language=%s role=%s prompt_length=%s base_prompt_length=%s max_length=%s",
        len(sanitised),
        request.language,
        request.role,
        len(prompt),
        base_prompt_length,
        max_length,
    )
    return PreparedPrompt(
        prompt=prompt,
        prompt_length=len(prompt),
        base_prompt_length=base_prompt_length,
        truncated=True,
    )
