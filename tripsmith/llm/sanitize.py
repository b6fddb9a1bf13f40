"""Best-effort extraction of a JSON document from free-form model text.

This is a heuristic, not a parser: the result is not guaranteed to be valid
JSON, and callers must handle parse failure downstream.

Array extraction deliberately differs from a plain first-``[``-to-last-``]``
rule: it only applies when the ``[`` opens before the first ``{``. Without
that condition an unfenced object holding nested arrays (an itinerary and its
``days``) would be cut down to the span of its inner arrays.
"""

import re

_FENCED_BLOCK = re.compile(r"```(?:json)?[ \t]*\n?([\s\S]*?)\s*```", re.IGNORECASE)
_FENCE_MARKER = re.compile(r"```(?:json)?", re.IGNORECASE)


def _span(text: str, opener: str, closer: str) -> tuple[int, int] | None:
    """Return (first opener, last closer) indexes when they form a span."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start != -1 and end != -1 and end > start:
        return start, end
    return None


def sanitize(raw_text: str) -> str:
    """Extract a single JSON payload from a completion response.

    Priority order:
        1. Interior of the first fenced code block, trimmed.
        2. First ``[`` to last ``]``, for top-level array responses. Only used
           when the array opens before any ``{``; otherwise the array is
           nested inside an object and step 3 applies.
        3. First ``{`` to last ``}``.
        4. The text with stray fence markers removed, trimmed.

    Args:
        raw_text: Text returned by the completion service

    Returns:
        Candidate JSON text (possibly still invalid)
    """
    if not raw_text:
        return ""

    match = _FENCED_BLOCK.search(raw_text)
    if match:
        return match.group(1).strip()

    array_span = _span(raw_text, "[", "]")
    object_span = _span(raw_text, "{", "}")

    if array_span and (object_span is None or array_span[0] < object_span[0]):
        start, end = array_span
        return raw_text[start : end + 1]

    if object_span:
        start, end = object_span
        return raw_text[start : end + 1]

    return _FENCE_MARKER.sub("", raw_text).strip()
