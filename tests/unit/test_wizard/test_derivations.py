"""Tests for derived draft fields."""

import pytest

from src.utils.errors import DerivationConfigError, UnknownFieldError
from src.wizard.derivations import (
    NO_CHANGE,
    DerivationEngine,
    DerivationRule,
    compose_address,
    compute_max_guests,
)
from src.wizard.field_store import FieldStore


@pytest.fixture
def bound_store():
    store = FieldStore()
    DerivationEngine().bind(store)
    return store


@pytest.mark.unit
def test_max_guests_from_rooms(bound_store):
    """Test that three rooms of four guests gives twelve."""
    bound_store.set("rooms_count", 3)
    bound_store.set("capacity_per_room", 4)
    assert bound_store.get("max_guests") == 12


@pytest.mark.unit
def test_max_guests_from_string_input(bound_store):
    """Test that form strings are coerced before deriving."""
    bound_store.set("rooms_count", "5")
    assert bound_store.get("max_guests") == 10


@pytest.mark.unit
def test_blank_room_count_leaves_max_guests(bound_store):
    """Test that a blank multiplier keeps the previous capacity."""
    bound_store.set("rooms_count", 4)
    bound_store.set("rooms_count", "")
    assert bound_store.get("max_guests") == 8
    assert compute_max_guests(bound_store) is NO_CHANGE


@pytest.mark.unit
def test_day_picnic_uses_flat_capacity(bound_store):
    """Test that day picnic listings take capacity from the picnic field only."""
    bound_store.set("rooms_count", 3)
    bound_store.set("day_picnic_capacity", 40)
    assert bound_store.get("max_guests") == 6

    bound_store.set("property_type", "Day Picnic")
    assert bound_store.get("max_guests") == 40

    bound_store.set("rooms_count", 10)
    assert bound_store.get("max_guests") == 40


@pytest.mark.unit
def test_leaving_day_picnic_restores_room_capacity(bound_store):
    """Test that switching type back recomputes from rooms."""
    bound_store.set("property_type", "day_picnic")
    bound_store.set("day_picnic_capacity", 25)
    bound_store.set("property_type", "villa")
    assert bound_store.get("max_guests") == 2


@pytest.mark.unit
def test_manual_override_kept_until_trigger_changes(bound_store):
    """Test that a user-entered capacity survives unrelated edits."""
    bound_store.set("max_guests", 7)
    bound_store.set("title", "Hill View")
    assert bound_store.get("max_guests") == 7

    bound_store.set("capacity_per_room", 3)
    assert bound_store.get("max_guests") == 3


@pytest.mark.unit
def test_address_composed_from_location(bound_store):
    """Test address composition skipping empty parts."""
    bound_store.set("city", "Panaji")
    assert bound_store.get("address") == "Panaji, India"

    bound_store.set("area", " Candolim ")
    bound_store.set("state", "Goa")
    assert bound_store.get("address") == "Candolim, Panaji, Goa, India"

    bound_store.set("country", "")
    assert bound_store.get("address") == "Candolim, Panaji, Goa"


@pytest.mark.unit
def test_compose_address_all_empty():
    """Test that an empty location composes to an empty address."""
    store = FieldStore(values={"country": ""})
    assert compose_address(store) == ""


@pytest.mark.unit
def test_recompute_all_is_idempotent():
    """Test that running every rule twice equals running it once."""
    store = FieldStore(values={"rooms_count": 3, "capacity_per_room": 4, "city": "Panaji"})
    engine = DerivationEngine().bind(store)
    engine.recompute_all()
    first = store.get_all()
    engine.recompute_all()
    assert store.get_all() == first
    assert first["max_guests"] == 12
    assert first["address"] == "Panaji, India"


@pytest.mark.unit
def test_derived_writes_do_not_chain():
    """Test that a derived write does not trigger further rules."""
    calls = []

    def record(store):
        calls.append(store.get("title"))
        return NO_CHANGE

    rules = (
        DerivationRule("upper", triggers=("title",), target="description", compute=lambda s: s.get("title").upper()),
        DerivationRule("watch", triggers=("property_type",), target="area", compute=record),
    )
    store = FieldStore()
    DerivationEngine(rules).bind(store)
    store.set("title", "villa")
    assert store.get("description") == "VILLA"
    assert calls == []


@pytest.mark.unit
def test_rule_target_cannot_be_trigger():
    """Test that configuring a chain of derivations is refused."""
    rules = (
        DerivationRule("a", triggers=("rooms_count",), target="max_guests", compute=lambda s: 1),
        DerivationRule("b", triggers=("max_guests",), target="bedrooms", compute=lambda s: 1),
    )
    with pytest.raises(DerivationConfigError):
        DerivationEngine(rules)


@pytest.mark.unit
def test_engine_binds_once():
    """Test that an engine cannot be attached to two stores."""
    engine = DerivationEngine().bind(FieldStore())
    with pytest.raises(DerivationConfigError):
        engine.bind(FieldStore())


@pytest.mark.unit
def test_bind_checks_paths_exist():
    """Test that rules referencing unknown fields fail at bind time."""
    rules = (DerivationRule("x", triggers=("floors",), target="bedrooms", compute=lambda s: 1),)
    with pytest.raises(UnknownFieldError):
        DerivationEngine(rules).bind(FieldStore())


@pytest.mark.unit
def test_rule_apply_reports_change():
    """Test that apply returns whether the target changed."""
    store = FieldStore(values={"rooms_count": 2, "capacity_per_room": 2, "max_guests": 4})
    rule = DerivationRule("max_guests", ("rooms_count",), "max_guests", compute_max_guests)
    assert rule.apply(store) is False
    store.write_derived("rooms_count", 3)
    assert rule.apply(store) is True
    assert store.get("max_guests") == 6
