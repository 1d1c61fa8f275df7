"""Test helper functions."""

import copy
import json
import uuid
from typing import Any, Dict, Optional

from src.utils.errors import PersistenceError


class InMemoryRecordStore:
    """Record store that keeps rows in a dict, mirroring the properties table."""

    def __init__(self, rows: Optional[Dict[str, dict]] = None):
        self.rows: Dict[str, dict] = copy.deepcopy(rows or {})
        self.fail_with: Optional[Exception] = None
        self.calls: list = []

    async def create(self, record: dict) -> dict:
        self.calls.append(("create", None))
        self._maybe_fail()
        record_id = f"prop_{uuid.uuid4().hex[:8]}"
        row = {"id": record_id, **copy.deepcopy(record)}
        self.rows[record_id] = row
        return copy.deepcopy(row)

    async def update(self, record_id: str, record: dict) -> dict:
        self.calls.append(("update", record_id))
        self._maybe_fail()
        if record_id not in self.rows:
            raise PersistenceError(f"Failed to update property: {record_id}")
        self.rows[record_id].update(copy.deepcopy(record))
        return copy.deepcopy(self.rows[record_id])

    async def fetch_by_id(self, record_id: str) -> Optional[dict]:
        self.calls.append(("fetch", record_id))
        row = self.rows.get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


def create_vercel_request(
    method: str = "POST",
    path: str = "/api/wizard/validate",
    body: Any = None,
    headers: Dict[str, str] = None
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if body is None:
        body = {"draft": {}}

    if headers is None:
        headers = {
            "content-type": "application/json"
        }

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def parse_response_body(response: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON body of a Vercel function response."""
    return json.loads(response["body"])
