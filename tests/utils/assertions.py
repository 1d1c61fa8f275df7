"""Custom assertion helpers."""

from typing import Any, Dict
import json

from src.models.property_schema import PROPERTY_FIELDS


def assert_valid_response(response: Dict[str, Any], expected_status: int = 200) -> None:
    """Assert that a Vercel function response is valid."""
    assert 'statusCode' in response
    assert response['statusCode'] == expected_status
    assert 'headers' in response
    assert 'body' in response

    if 'application/json' in response.get('headers', {}).get('Content-Type', ''):
        try:
            json.loads(response['body'])
        except json.JSONDecodeError:
            assert False, "Response body is not valid JSON"


def assert_complete_snapshot(snapshot: Dict[str, Any]) -> None:
    """Assert that a draft snapshot holds a value for every schema field."""
    for spec in PROPERTY_FIELDS:
        node = snapshot
        for part in spec.path.split("."):
            assert part in node, f"missing field {spec.path}"
            node = node[part]


def assert_no_markers(text: str) -> None:
    """Assert that user prose carries no embedded section markers."""
    for marker in ("**Property Details:**", "**Arrival Instructions:**", "**Meal Plans:**", "**License:**"):
        assert marker not in text, f"unexpected marker {marker}"
