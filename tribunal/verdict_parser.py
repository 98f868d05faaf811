# tribunal/verdict_parser.py
"""
Fail-closed decoding of the adversarial witness reply.

Only a reply that decodes to exactly {"adversarial_verdict": "PASS"} is a PASS.
Everything else, including prose, partial JSON and unknown verdict values,
comes back as FAIL.
"""
import json
import re
from typing import Any, List, Tuple

from tribunal.errors import ParseError
from tribunal.schema import (
    DEFAULT_WITNESS_REASON,
    INVALID_JSON_REASON,
    ParsedVerdict,
    WitnessVerdict,
)

VERDICT_FIELD = "adversarial_verdict"
REASON_FIELD = "failure_reason"

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    match = _FENCE_PATTERN.fullmatch(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> dict:
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise ParseError(f"Duplicate key in oracle payload: {key!r}")
        obj[key] = value
    return obj


def decode_payload(raw_text: str) -> Any:
    """Raises ParseError when the cleaned text is not a single JSON document."""
    cleaned = strip_code_fences(raw_text or "")
    try:
        return json.loads(cleaned, object_pairs_hook=_reject_duplicate_keys)
    except (ValueError, RecursionError) as e:
        raise ParseError(str(e)) from e


def parse(raw_text: str) -> ParsedVerdict:
    try:
        payload = decode_payload(raw_text)
    except ParseError:
        return ParsedVerdict(WitnessVerdict.FAIL, INVALID_JSON_REASON)

    if not isinstance(payload, dict):
        return ParsedVerdict(WitnessVerdict.FAIL, DEFAULT_WITNESS_REASON)

    verdict = payload.get(VERDICT_FIELD)

    if verdict == WitnessVerdict.PASS.value and set(payload) == {VERDICT_FIELD}:
        return ParsedVerdict(WitnessVerdict.PASS)

    if verdict == WitnessVerdict.FAIL.value:
        reason = payload.get(REASON_FIELD)
        if isinstance(reason, str) and reason.strip():
            return ParsedVerdict(WitnessVerdict.FAIL, reason.strip())

    return ParsedVerdict(WitnessVerdict.FAIL, DEFAULT_WITNESS_REASON)


def extract_content(completion: Any) -> str:
    """Pull choices[0].message.content out of a chat completion, or ''."""
    choices = getattr(completion, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""
