"""
Coercion helpers for untrusted analysis payloads.

Model output and legacy result rows both arrive loosely typed. Everything here
drops what it cannot coerce instead of raising.
"""

import json
import math
from typing import Any, Dict, Iterable, List, Optional


ELLIPSIS = "…"

_APPROVED_VALUES = {"approved", "accept", "accepted", "approved_by_hr", "ready", "green", "go", "tryout"}
_REJECTED_VALUES = {"rejected", "declined", "failed", "no", "not_approved"}


def truncate_text(value: str, max_length: int) -> str:
    """Cut `value` to at most `max_length` chars, ending in a single-char ellipsis when cut."""
    trimmed = value.strip()
    if len(trimmed) <= max_length:
        return trimmed
    return trimmed[: max(0, max_length - len(ELLIPSIS))].rstrip() + ELLIPSIS


def normalise_score(value: Any) -> Optional[float]:
    """Accept a number or numeric string, clamp to [0, 100], round to 2 decimals."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return math.floor(min(100.0, max(0.0, number)) * 100 + 0.5) / 100


def dedupe_strings(*groups: Iterable[str]) -> List[str]:
    """Merge string groups, keeping the first occurrence of each case-insensitive value."""
    seen = set()
    merged: List[str] = []
    for group in groups:
        for entry in group:
            key = entry.casefold()
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return merged


def normalise_string_array(value: Any, parse_strings: bool = False) -> List[str]:
    """
    Coerce `value` into a deduplicated list of trimmed, non-empty strings.

    With `parse_strings`, a bare string is treated as stored legacy data: a
    JSON-encoded list is decoded, anything else becomes a one-item list.
    """
    if isinstance(value, list):
        items = [entry.strip() for entry in value if isinstance(entry, str)]
        return dedupe_strings(item for item in items if item)

    if parse_strings and isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return []
        try:
            decoded = json.loads(trimmed)
        except ValueError:
            return [trimmed]
        if isinstance(decoded, list):
            return normalise_string_array(decoded)
        return [trimmed]

    return []


def normalise_skill_scores(value: Any) -> List[Dict[str, Any]]:
    """
    Coerce `value` into `[{"name": str, "score": float}]`.

    Entries take their name from `name` (or the older `skill` key). Entries with
    no usable name or score are dropped; duplicate names keep the first entry.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value.strip())
        except ValueError:
            return []

    if not isinstance(value, list):
        return []

    seen = set()
    scores: List[Dict[str, Any]] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue

        name = entry.get("name")
        if not isinstance(name, str):
            name = entry.get("skill")
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()

        score = normalise_score(entry.get("score"))
        if score is None:
            continue

        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)
        scores.append({"name": name, "score": score})

    return scores


def merge_skill_scores(*groups: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Concatenate already-normalised score lists, first name wins."""
    seen = set()
    merged: List[Dict[str, Any]] = []
    for group in groups:
        for entry in group:
            key = entry["name"].casefold()
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return merged


def parse_json_object(value: Any) -> Optional[Dict[str, Any]]:
    """Return `value` as a dict, decoding JSON strings; anything else is None."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            decoded = json.loads(trimmed)
        except ValueError:
            return None
        return decoded if isinstance(decoded, dict) else None
    return None


def normalise_hr_approval_status(value: Any) -> Optional[str]:
    """
    Map a free-form review value onto pending / approved / rejected.

    Returns None when the value carries no signal (None, empty string, other
    types) so callers can fall back to another source.
    """
    if isinstance(value, bool):
        return "approved" if value else "pending"
    if not isinstance(value, str):
        return None

    normalised = value.strip().lower()
    if not normalised:
        return None
    if normalised in _APPROVED_VALUES:
        return "approved"
    if normalised in _REJECTED_VALUES:
        return "rejected"
    return "pending"
