"""Recover a JSON value from a generation-service response.

The service is asked to return exactly one JSON object or array, but under
length pressure it may stop mid-value, and it sometimes wraps the value in
markdown fences or chatter. extract_json() slices the value out of the text,
salvages the fully received elements of a truncated array, and otherwise fails
with an ExtractionError. It never returns content that was not in the input.
"""

import json
import logging
from typing import Any

from domain.errors import ExtractionError, ExtractionErrorKind

logger = logging.getLogger(__name__)

ROOT_DELIMITERS = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}

# Upper bound on backward '}' candidates tried when salvaging a truncated array.
MAX_SALVAGE_ATTEMPTS = 32


def extract_json(text: str, root: str = "object") -> Any:
    """Return the JSON value of the expected root shape found in ``text``.

    Args:
        text: Raw response text.
        root: "object" or "array".

    Raises:
        ExtractionError: NO_ROOT_FOUND if the opening delimiter is absent,
            UNRECOVERABLE_TRUNCATION if the value was cut off and cannot be
            salvaged, SYNTAX_ERROR for any other parse failure.
    """
    if root not in ROOT_DELIMITERS:
        raise ValueError(f"Unknown root shape: {root!r}. Valid options: object, array")
    open_char, close_char = ROOT_DELIMITERS[root]

    raw = text or ""
    stripped = raw.strip()
    start = stripped.find(open_char)
    if start == -1:
        logger.error(f"No JSON {root} in response ({len(stripped)} chars)")
        logger.debug(f"Raw response: {raw!r}")
        raise ExtractionError(ExtractionErrorKind.NO_ROOT_FOUND, raw, root=root)

    end = stripped.rfind(close_char)
    if end > start:
        candidate = stripped[start:end + 1]
        return _parse(candidate, raw, root)

    # No closing delimiter after the opening one: the response was cut off.
    if root == "array":
        salvaged = _salvage_array(stripped, start)
        if salvaged is not None:
            return salvaged
    return _parse(stripped[start:], raw, root)


def _salvage_array(text: str, start: int) -> Any:
    """Close a truncated array after its last complete object element.

    Walks backward over '}' positions until the prefix, closed with ']', parses.
    A final element that ended exactly at a separator is dropped along with the
    unfinished tail; that loss is accepted.
    """
    brace = len(text)
    for _ in range(MAX_SALVAGE_ATTEMPTS):
        brace = text.rfind("}", start, brace)
        if brace == -1:
            break
        candidate = text[start:brace + 1].rstrip()
        if candidate.endswith(","):
            candidate = candidate[:-1]
        candidate += "]"
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        logger.warning(
            f"Response array was truncated; salvaged {len(value)} complete element(s), "
            f"discarded {len(text) - brace - 1} trailing chars"
        )
        return value
    return None


def _parse(candidate: str, raw: str, root: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        if _looks_truncated(e, candidate):
            kind = ExtractionErrorKind.UNRECOVERABLE_TRUNCATION
        else:
            kind = ExtractionErrorKind.SYNTAX_ERROR
        logger.error(f"Failed to parse JSON {root} ({kind.value}): {e}")
        logger.debug(f"Raw response: {raw!r} / processed: {candidate!r}")
        raise ExtractionError(kind, raw, salvaged_text=candidate, root=root, detail=str(e)) from e


def _looks_truncated(error: json.JSONDecodeError, doc: str) -> bool:
    """Parser stopped because the input ran out, not because of bad syntax."""
    if error.msg.startswith("Unterminated string"):
        return True
    return error.pos >= len(doc.rstrip())
