"""Tests for JSON extraction from completion text."""

import json

import pytest

from tripsmith.llm.sanitize import sanitize


def test_fenced_block_with_prose_around_it() -> None:
    """Test that the interior of a ```json fence is returned trimmed."""
    raw = 'Here you go:\n```json\n{"a": 1}\n```\nHave fun!'
    assert sanitize(raw) == '{"a": 1}'


def test_bare_fence_without_language_tag() -> None:
    """Test that a fence without a language tag is also unwrapped."""
    raw = '```\n[{"id": "x"}]\n```'
    assert sanitize(raw) == '[{"id": "x"}]'


def test_uppercase_language_tag() -> None:
    raw = '```JSON\n{"a": 1}\n```'
    assert sanitize(raw) == '{"a": 1}'


def test_unfenced_object_with_nested_array_keeps_whole_object() -> None:
    """Test that an object containing arrays is not reduced to its inner array."""
    raw = 'Sure! {"destination": "Lisbon", "days": [{"date": "2026-05-10"}]} Done.'
    result = sanitize(raw)
    assert json.loads(result)["destination"] == "Lisbon"


def test_unfenced_top_level_array() -> None:
    """Test that a top-level array in prose is extracted."""
    raw = 'Updated schedule: [{"id": "a", "time": "09:00"}, {"id": "b"}] as requested'
    assert json.loads(sanitize(raw)) == [{"id": "a", "time": "09:00"}, {"id": "b"}]


def test_unfenced_object_in_prose() -> None:
    raw = 'The analysis is {"possible_name": "Miradouro"} - enjoy'
    assert sanitize(raw) == '{"possible_name": "Miradouro"}'


def test_plain_text_returned_trimmed() -> None:
    """Test that text without JSON comes back trimmed, not empty."""
    assert sanitize("  no json here  ") == "no json here"


def test_stray_fence_markers_removed() -> None:
    """Test that an unterminated fence marker is stripped."""
    assert sanitize("```json not really") == "not really"


def test_empty_input() -> None:
    assert sanitize("") == ""


def test_first_fence_wins() -> None:
    """Test that only the first fenced block is used."""
    raw = '```json\n{"first": true}\n```\n```json\n{"second": true}\n```'
    assert sanitize(raw) == '{"first": true}'


def test_braces_in_wrong_order_fall_through() -> None:
    """Test that a closer before the opener is not treated as a span."""
    assert sanitize("} nothing {") == "} nothing {"


@pytest.mark.parametrize(
    "clean",
    ['{"a": 1}', '{"days": [{"activities": []}]}', '[{"id": "a"}, {"id": "b"}]', "42"],
)
def test_idempotent_on_clean_json(clean: str) -> None:
    """Test that sanitizing already-clean JSON is a no-op."""
    assert sanitize(clean) == clean
    assert sanitize(sanitize(clean)) == sanitize(clean)


def test_exact_fence_example() -> None:
    assert sanitize('```json\n{"a":1}\n```') == '{"a":1}'
