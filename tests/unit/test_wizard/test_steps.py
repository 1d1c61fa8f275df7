"""Tests for wizard step validators."""

import pytest

from src.wizard.field_store import FieldStore
from src.wizard.steps import (
    TOTAL_STEPS,
    WIZARD_STEPS,
    get_step,
    validate_basics,
    validate_capacity,
    validate_pricing,
    validate_step,
)
from tests.fixtures.drafts import complete_draft_values


def snapshot_with(**overrides):
    values = complete_draft_values()
    values.update(overrides)
    return FieldStore(values=values).get_all()


@pytest.mark.unit
def test_complete_draft_passes_every_step():
    """Test that the complete fixture passes all nine validators."""
    snapshot = snapshot_with()
    for step in WIZARD_STEPS:
        assert step.validate(snapshot).ok, step.key


@pytest.mark.unit
def test_step_table():
    """Test step numbering and keys."""
    assert TOTAL_STEPS == 9
    assert [s.key for s in WIZARD_STEPS] == [
        "basics", "location", "capacity", "amenities", "policies",
        "pricing", "activities", "legal", "review",
    ]
    assert get_step(6).to_dict()["title"] == "Pricing & Services"
    with pytest.raises(ValueError):
        get_step(0)
    with pytest.raises(ValueError):
        get_step(10)


@pytest.mark.unit
@pytest.mark.parametrize("overrides,reason", [
    ({"title": "   "}, "Property name is required"),
    ({"description": "Too short"}, "Description must be at least 50 characters"),
    ({"property_type": ""}, "Property type is required"),
])
def test_basics_failures(overrides, reason):
    """Test each basics requirement."""
    result = validate_basics(snapshot_with(**overrides))
    assert not result.ok
    assert result.step == 1
    assert result.reason == reason


@pytest.mark.unit
def test_description_length_counts_raw_text():
    """Test that the length check uses the text as typed."""
    assert validate_basics(snapshot_with(description="x" * 49)).reason is not None
    assert validate_basics(snapshot_with(description="x" * 50)).ok


@pytest.mark.unit
@pytest.mark.parametrize("field,reason", [
    ("state", "State is required"),
    ("city", "City is required"),
    ("postal_code", "Postal code is required"),
    ("contact_phone", "Contact phone number is required"),
])
def test_location_requires_fields(field, reason):
    """Test each required location field."""
    result = validate_step(2, snapshot_with(**{field: ""}))
    assert not result.ok
    assert result.reason == reason


@pytest.mark.unit
def test_capacity_accepts_zero_bathrooms():
    """Test that zero is a valid bedroom or bathroom count."""
    assert validate_capacity(snapshot_with(bathrooms=0, bedrooms=0)).ok


@pytest.mark.unit
@pytest.mark.parametrize("overrides", [
    {"max_guests": 0},
    {"max_guests": ""},
    {"bedrooms": ""},
    {"bathrooms": -1},
])
def test_capacity_failures(overrides):
    """Test capacity requirements."""
    result = validate_capacity(snapshot_with(**overrides))
    assert not result.ok
    assert result.step == 3


@pytest.mark.unit
def test_amenities_required():
    """Test that at least one amenity is needed."""
    result = validate_step(4, snapshot_with(amenities=[]))
    assert result.reason == "Select at least one amenity"


@pytest.mark.unit
def test_policies_required():
    """Test cancellation policy and payment method requirements."""
    assert validate_step(5, snapshot_with(cancellation_policy="")).reason == "Cancellation policy is required"
    assert validate_step(5, snapshot_with(payment_methods=[])).reason == "Select at least one payment method"


@pytest.mark.unit
@pytest.mark.parametrize("rate,ok", [
    ("400", False),
    ("499.99", False),
    ("500", True),
    (4500, True),
])
def test_pricing_minimum_rate(rate, ok):
    """Test the daily rate floor with form string input."""
    result = validate_pricing(snapshot_with(pricing={"daily_rate": rate}))
    assert result.ok is ok
    if not ok:
        assert result.reason == "Daily rate must be at least 500"


@pytest.mark.unit
def test_pricing_blank_rate():
    """Test that a missing daily rate is reported."""
    result = validate_pricing(snapshot_with(pricing={"daily_rate": ""}))
    assert result.reason == "Daily rate is required"


@pytest.mark.unit
def test_activities_need_one_entry():
    """Test that either list of activities satisfies the step."""
    empty = {"on_site": [], "nearby": []}
    assert not validate_step(7, snapshot_with(activities=empty)).ok
    assert validate_step(7, snapshot_with(activities={"on_site": [], "nearby": ["Fort Aguada"]})).ok


@pytest.mark.unit
def test_legal_requires_arrival_instructions():
    """Test that blank arrival instructions fail; license stays optional."""
    assert not validate_step(8, snapshot_with(arrival_instructions="  \n ")).ok
    assert validate_step(8, snapshot_with(license_number="")).ok


@pytest.mark.unit
def test_review_always_passes():
    """Test that the review step has no requirements of its own."""
    assert validate_step(9, FieldStore().get_all()).ok


@pytest.mark.unit
def test_validate_step_never_raises():
    """Test that malformed snapshots turn into failures."""
    result = validate_step(6, {"pricing": "not a dict"})
    assert not result.ok
    assert result.step == 6


@pytest.mark.unit
def test_validators_are_pure():
    """Test that validation does not modify the snapshot."""
    snapshot = snapshot_with()
    before = FieldStore.from_snapshot(snapshot).get_all()
    for step in WIZARD_STEPS:
        step.validate(snapshot)
    assert snapshot == before
