"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from src.codec.description_codec import DescriptionCodec
from src.wizard.controller import WizardController
from src.wizard.field_store import FieldStore
from tests.fixtures.drafts import complete_draft_values
from tests.utils.helpers import InMemoryRecordStore


@pytest.fixture
def codec():
    """Description codec instance."""
    return DescriptionCodec()


@pytest.fixture
def empty_store():
    """Draft store holding only defaults."""
    return FieldStore()


@pytest.fixture
def complete_store():
    """Draft store that passes every step validator."""
    return FieldStore(values=complete_draft_values())


@pytest.fixture
def mock_record_store():
    """Record store double with async create/update/fetch."""
    store = MagicMock()
    store.create = AsyncMock(return_value={"id": "prop_001", "status": "pending"})
    store.update = AsyncMock(return_value={"id": "prop_001"})
    store.fetch_by_id = AsyncMock(return_value=None)
    return store


@pytest.fixture
def memory_record_store():
    """In-memory record store that behaves like the properties table."""
    return InMemoryRecordStore()


@pytest.fixture
def controller(mock_record_store):
    """Fresh wizard session for a new listing."""
    return WizardController(mock_record_store, owner_id="owner_123")


@pytest.fixture
def complete_controller(mock_record_store):
    """Wizard session whose draft passes every step."""
    return WizardController(
        mock_record_store,
        store=FieldStore(values=complete_draft_values()),
        owner_id="owner_123",
    )


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time
