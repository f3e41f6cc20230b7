"""
Extract-and-parse for generator replies.
Strips code fences, bounds the text to the first opening brace/bracket and the last
matching closing one, then parses leniently with json5 (trailing commas, unquoted keys,
single quotes). Shared by the query translator and the result summarizer.
"""
import re
from typing import Any

import json5

from utils.errors import ExtractionError, ParseError

_FENCE_RE = re.compile(r"```[ \t]*(?:json5?|javascript|js)?", re.IGNORECASE)

_CLOSERS = {"{": "}", "[": "]"}


def strip_fences(text: str) -> str:
    """Remove ```json / ``` markers anywhere in the text."""
    return _FENCE_RE.sub("", text or "").strip()


def bound_payload(text: str) -> str:
    """
    Return the substring from the first '{' or '[' to the last matching closer.
    The first opener decides the dominant structure (object vs. array).
    Raises ExtractionError when either end is missing.
    """
    cleaned = strip_fences(text)
    openers = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not openers:
        raise ExtractionError("No JSON object or array found in generator output")
    start = min(openers)
    end = cleaned.rfind(_CLOSERS[cleaned[start]])
    if end < start:
        raise ExtractionError(f"Unterminated {cleaned[start]!r} in generator output")
    return cleaned[start:end + 1]


def extract_and_parse(text: str) -> Any:
    """Bound the payload in text and parse it leniently. Raises ExtractionError or ParseError."""
    bounded = bound_payload(text)
    try:
        return json5.loads(bounded)
    except ValueError as e:
        raise ParseError(f"Failed to parse generator output: {e}") from e
