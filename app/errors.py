"""Structured error helpers for API responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        self.payload = build_error_payload(code, message, details)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    content = build_error_payload(exc.code, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=content)


# ---------------------------------------------------------------------------
# Configuration / language model
# ---------------------------------------------------------------------------


class ConfigurationError(AppError):
    """Model API key or endpoint is not configured."""

    def __init__(self, message: str):
        super().__init__(500, "CONFIGURATION_ERROR", message)


class ModelUnavailable(AppError):
    """The model provider answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        self.status = status
        self.body = body
        http_status = 429 if status == 429 else 502
        super().__init__(http_status, "MODEL_UNAVAILABLE", message, {"status": status, "body": body})


class ModelResponseError(AppError):
    """
    Base for every failure to extract an analysis from a 2xx model response.

    `payload` holds the diagnostic data (provider feedback or raw text).
    """

    code = "MODEL_RESPONSE_ERROR"

    def __init__(self, message: str, payload: Any = None):
        super().__init__(502, self.code, message, {"diagnostic": payload})
        self.payload = payload


class ModelBlocked(ModelResponseError):
    code = "MODEL_BLOCKED"


class NoCandidates(ModelBlocked):
    """Response carried no candidates (usually a prompt-level block)."""


class NoContentParts(ModelBlocked):
    """First candidate carried no usable parts (finish reason / block reason attached)."""


class ModelMalformed(ModelResponseError):
    code = "MODEL_MALFORMED"


class InvalidJson(ModelMalformed):
    """Text content could not be parsed as JSON."""


class MissingObject(ModelMalformed):
    """Parsed JSON was not an object."""


# ---------------------------------------------------------------------------
# Attempt lifecycle
# ---------------------------------------------------------------------------


class ProfileNotFound(AppError):
    def __init__(self, candidate_id: str):
        super().__init__(404, "PROFILE_NOT_FOUND", "Candidate profile not found", {"candidate_id": candidate_id})


class AttemptNotFound(AppError):
    def __init__(self, attempt_id: Any):
        super().__init__(404, "ATTEMPT_NOT_FOUND", "Assessment attempt not found", {"attempt_id": str(attempt_id)})


class InvalidTransition(AppError):
    def __init__(self, status: str, event: str):
        self.status = status
        self.event = event
        super().__init__(
            409,
            "INVALID_TRANSITION",
            f"Cannot apply {event} to an attempt in status {status}",
            {"status": status, "event": event},
        )


class RetakeNotAllowed(AppError):
    def __init__(self, candidate_id: str, assessment_id: str):
        super().__init__(
            409,
            "ASSESSMENT_ALREADY_COMPLETED",
            "This assessment has already been completed",
            {"candidate_id": candidate_id, "assessment_id": assessment_id},
        )


class PersistenceError(AppError):
    """Wraps storage failures with a user-facing message."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        details = {"cause": str(cause)} if cause is not None else None
        super().__init__(500, "PERSISTENCE_ERROR", message, details)

