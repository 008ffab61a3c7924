"""Robust JSON object extraction from LLM responses using brace-balancing."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def extract_json_object(
    text: str | None,
    *,
    required_keys: Iterable[str] | None = None,
) -> dict | None:
    """Return the first top-level JSON object embedded in *text*.

    Strategy:
    1. Attempt ``json.loads`` on the full text (fast path).
    2. Scan the text for ``{`` at top level and extract the brace-balanced
       candidate, honouring string literals and escapes.  Candidates that do
       not parse, or that share no key with *required_keys*, are skipped and
       scanning resumes after them.  An unbalanced candidate (truncated
       output) is skipped one character at a time so a later object can
       still match.
    3. Return ``None`` if nothing works.
    """
    if not text or not text.strip():
        return None

    keys = frozenset(required_keys or ())
    stripped = text.strip()

    # Fast path: whole text is a JSON object
    try:
        parsed = json.loads(stripped)
    except (json.JSONDecodeError, ValueError, RecursionError):
        parsed = None
    if isinstance(parsed, dict) and _has_any_key(parsed, keys):
        return parsed

    i = 0
    while i < len(stripped):
        if stripped[i] != "{":
            i += 1
            continue

        end = _balanced_end(stripped, i)
        if end is None:
            logger.debug("Unbalanced JSON object at offset %d", i)
            i += 1
            continue

        candidate = stripped[i : end + 1]
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, ValueError, RecursionError):
            parsed = None

        if isinstance(parsed, dict) and _has_any_key(parsed, keys):
            return parsed

        i = end + 1

    return None


def _has_any_key(obj: dict, keys: frozenset[str]) -> bool:
    if not keys:
        return True
    return any(key in obj for key in keys)


def _balanced_end(text: str, start: int) -> int | None:
    """Return the index of the ``}`` closing the object opened at *start*."""
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i

    return None
