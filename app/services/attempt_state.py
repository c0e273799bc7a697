"""
Attempt lifecycle state machine.

`status` is the primary lifecycle of an attempt. `ai_status` tracks analysis
bookkeeping alongside it: a failed analysis leaves the attempt where it was so
it can be retried.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from app.errors import InvalidTransition


class AttemptStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    AWAITING_AI = "awaiting_ai"
    COMPLETED = "completed"


class AiStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class AttemptEvent(str, Enum):
    START = "start"
    RECORD_ANSWER = "record_answer"
    SUBMIT = "submit"
    COMPLETE_ANALYSIS = "complete_analysis"
    FAIL_ANALYSIS = "fail_analysis"


# (status, event) -> (next status, next ai status or None to keep it)
TRANSITIONS: Dict[Tuple[AttemptStatus, AttemptEvent], Tuple[AttemptStatus, Optional[AiStatus]]] = {
    (AttemptStatus.NOT_STARTED, AttemptEvent.START): (AttemptStatus.IN_PROGRESS, None),
    (AttemptStatus.IN_PROGRESS, AttemptEvent.START): (AttemptStatus.IN_PROGRESS, None),
    (AttemptStatus.AWAITING_AI, AttemptEvent.START): (AttemptStatus.AWAITING_AI, None),
    (AttemptStatus.NOT_STARTED, AttemptEvent.RECORD_ANSWER): (AttemptStatus.IN_PROGRESS, None),
    (AttemptStatus.IN_PROGRESS, AttemptEvent.RECORD_ANSWER): (AttemptStatus.IN_PROGRESS, None),
    (AttemptStatus.IN_PROGRESS, AttemptEvent.SUBMIT): (AttemptStatus.AWAITING_AI, AiStatus.PROCESSING),
    (AttemptStatus.AWAITING_AI, AttemptEvent.SUBMIT): (AttemptStatus.AWAITING_AI, AiStatus.PROCESSING),
    (AttemptStatus.AWAITING_AI, AttemptEvent.COMPLETE_ANALYSIS): (AttemptStatus.COMPLETED, AiStatus.COMPLETED),
    (AttemptStatus.NOT_STARTED, AttemptEvent.FAIL_ANALYSIS): (AttemptStatus.NOT_STARTED, AiStatus.FAILED),
    (AttemptStatus.IN_PROGRESS, AttemptEvent.FAIL_ANALYSIS): (AttemptStatus.IN_PROGRESS, AiStatus.FAILED),
    (AttemptStatus.AWAITING_AI, AttemptEvent.FAIL_ANALYSIS): (AttemptStatus.AWAITING_AI, AiStatus.FAILED),
}


def next_state(status: str, ai_status: str, event: AttemptEvent) -> Tuple[AttemptStatus, AiStatus]:
    """Return the (status, ai_status) pair after `event`, or raise InvalidTransition."""
    try:
        current = AttemptStatus(status)
    except ValueError:
        raise InvalidTransition(str(status), event.value) from None

    target = TRANSITIONS.get((current, event))
    if target is None:
        raise InvalidTransition(current.value, event.value)

    next_status, next_ai = target
    return next_status, next_ai if next_ai is not None else AiStatus(ai_status)


def can_apply(status: str, event: AttemptEvent) -> bool:
    try:
        return (AttemptStatus(status), event) in TRANSITIONS
    except ValueError:
        return False


def apply_transition(attempt, event: AttemptEvent):
    """Move `attempt` (anything with `status` / `ai_status`) through `event` in place."""
    next_status, next_ai = next_state(attempt.status, attempt.ai_status, event)
    attempt.status = next_status.value
    attempt.ai_status = next_ai.value
    return attempt
