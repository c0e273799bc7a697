"""
Extraction of the analysis object from a Gemini generateContent response.

The response shape is provider-controlled. Only four conditions are fatal (no
candidates, no parts, unparseable text, non-object JSON); every individual
field is coerced on its own and dropped when it does not fit.
"""

import json
import logging
from typing import Any, List, Optional

from app.errors import InvalidJson, MissingObject, NoCandidates, NoContentParts
from app.schemas.analysis import GeminiAnalysis
from app.schemas.result import SkillScore
from app.utils.normalize import normalise_skill_scores, normalise_string_array

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 1000


def try_parse_json(raw: Any) -> Any:
    """
    Decode `raw` into JSON.

    Already-decoded objects pass through. Strings are tried whole, then as the
    slice from the first `{` to the last `}`. Returns None for values that are
    not text; raises InvalidJson when text cannot be decoded.
    """
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        return raw
    if not isinstance(raw, str):
        return None

    trimmed = raw.strip()
    attempts = [trimmed]
    first_brace = trimmed.find("{")
    last_brace = trimmed.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        attempts.append(trimmed[first_brace : last_brace + 1])

    for attempt in attempts:
        try:
            return json.loads(attempt)
        except ValueError:
            continue

    logger.error(
        "Gemini returned invalid JSON length=%s snippet=%s",
        len(raw),
        raw[:SNIPPET_LENGTH],
    )
    raise InvalidJson("Gemini returned an invalid JSON payload.", payload=raw)


def _describe_prompt_feedback(prompt_feedback: Any) -> str:
    if not isinstance(prompt_feedback, dict):
        return ""

    segments: List[str] = []
    block_reason = prompt_feedback.get("blockReason")
    if isinstance(block_reason, str):
        segments.append(f"block reason: {block_reason}")
    if prompt_feedback:
        segments.append(f"prompt feedback: {json.dumps(prompt_feedback, ensure_ascii=False)}")

    return f" ({'; '.join(segments)})" if segments else ""


def extract_candidate_payload(response: Any) -> Any:
    """Return the first decodable JSON value carried by the first candidate."""
    if not isinstance(response, dict):
        raise MissingObject("Gemini response does not include a JSON object.", payload=response)

    prompt_feedback = response.get("promptFeedback")
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        detail = _describe_prompt_feedback(prompt_feedback)
        raise NoCandidates(f"Gemini response did not include any candidates{detail}.", payload=response)

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    finish_reason = first.get("finishReason") if isinstance(first.get("finishReason"), str) else None
    safety_ratings = first.get("safetyRatings")

    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts:
        segments = []
        if finish_reason:
            segments.append(f"finish reason: {finish_reason}")
        if isinstance(prompt_feedback, dict) and isinstance(prompt_feedback.get("blockReason"), str):
            segments.append(f"block reason: {prompt_feedback['blockReason']}")
        detail = f" ({'; '.join(segments)})" if segments else ""
        raise NoContentParts(
            f"Gemini response did not include any content parts{detail}.",
            payload={
                "promptFeedback": prompt_feedback,
                "finishReason": finish_reason,
                "safetyRatings": safety_ratings,
            },
        )

    last_error: Optional[InvalidJson] = None
    for part in parts:
        if not isinstance(part, dict):
            continue

        text = part.get("text")
        if isinstance(text, str):
            try:
                parsed = try_parse_json(text)
            except InvalidJson as exc:
                last_error = exc
            else:
                if parsed is not None:
                    return parsed

        function_call = part.get("functionCall")
        if isinstance(function_call, dict):
            try:
                parsed = try_parse_json(function_call.get("args"))
            except InvalidJson as exc:
                last_error = exc
            else:
                if parsed is not None:
                    return parsed

    if last_error is not None:
        raise last_error
    raise MissingObject("Gemini response does not include a JSON object.", payload=response)


def parse_analysis_payload(payload: Any, model: str) -> GeminiAnalysis:
    """Coerce a decoded JSON object into the normalized analysis shape."""
    if not isinstance(payload, dict):
        raise MissingObject("Gemini response does not include a JSON object.", payload=payload)

    development_areas = payload.get("development_areas")
    if development_areas is None:
        development_areas = payload.get("opportunities")

    summary = payload.get("summary")
    return GeminiAnalysis(
        model=model,
        skill_scores=[SkillScore(**entry) for entry in normalise_skill_scores(payload.get("skill_scores"))],
        strengths=normalise_string_array(payload.get("strengths")),
        development_areas=normalise_string_array(development_areas),
        recommended_roles=normalise_string_array(payload.get("recommended_roles")),
        team_fit=normalise_string_array(payload.get("team_fit")),
        summary=summary.strip() if isinstance(summary, str) else "",
        raw=payload,
    )


def parse_model_response(response: Any, model: str) -> GeminiAnalysis:
    """Full path from raw provider response to a GeminiAnalysis."""
    return parse_analysis_payload(extract_candidate_payload(response), model)
