"""Wizard steps and their completeness validators.

Each validator is a pure function of a draft snapshot (``FieldStore.get_all()``)
and returns a ``StepResult``. Validators never raise.
"""

from typing import Any, Callable

from src.models.property import StepResult
from src.utils.wizard_config import MIN_DAILY_RATE, MIN_DESCRIPTION_LENGTH

Snapshot = dict[str, Any]
Validator = Callable[[Snapshot], StepResult]

TOTAL_STEPS = 9


def _text(snapshot: Snapshot, key: str) -> str:
    value = snapshot.get(key, "")
    return value.strip() if isinstance(value, str) else ""


def _number(value: Any):
    """Numeric value of a field, or None when blank/unparseable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _list(snapshot: Snapshot, key: str) -> list:
    value = snapshot.get(key)
    return value if isinstance(value, list) else []


def validate_basics(snapshot: Snapshot) -> StepResult:
    if not _text(snapshot, "title"):
        return StepResult.failed(1, "Property name is required")
    if len(snapshot.get("description") or "") < MIN_DESCRIPTION_LENGTH:
        return StepResult.failed(1, f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters")
    if not _text(snapshot, "property_type"):
        return StepResult.failed(1, "Property type is required")
    return StepResult.passed(1)


def validate_location(snapshot: Snapshot) -> StepResult:
    labels = {
        "state": "State",
        "city": "City",
        "postal_code": "Postal code",
        "contact_phone": "Contact phone number",
    }
    for key, label in labels.items():
        if not _text(snapshot, key):
            return StepResult.failed(2, f"{label} is required")
    return StepResult.passed(2)


def validate_capacity(snapshot: Snapshot) -> StepResult:
    max_guests = _number(snapshot.get("max_guests"))
    if max_guests is None or max_guests <= 0:
        return StepResult.failed(3, "Maximum guests must be greater than zero")
    # Zero bedrooms/bathrooms is a valid answer; blank is not
    for key, label in (("bedrooms", "Bedrooms"), ("bathrooms", "Bathrooms")):
        value = _number(snapshot.get(key))
        if value is None or value < 0:
            return StepResult.failed(3, f"{label} is required")
    return StepResult.passed(3)


def validate_amenities(snapshot: Snapshot) -> StepResult:
    if not _list(snapshot, "amenities"):
        return StepResult.failed(4, "Select at least one amenity")
    return StepResult.passed(4)


def validate_policies(snapshot: Snapshot) -> StepResult:
    if not _text(snapshot, "cancellation_policy"):
        return StepResult.failed(5, "Cancellation policy is required")
    if not _list(snapshot, "payment_methods"):
        return StepResult.failed(5, "Select at least one payment method")
    return StepResult.passed(5)


def validate_pricing(snapshot: Snapshot) -> StepResult:
    pricing = snapshot.get("pricing") or {}
    rate = _number(pricing.get("daily_rate"))
    if rate is None:
        return StepResult.failed(6, "Daily rate is required")
    if rate < MIN_DAILY_RATE:
        return StepResult.failed(6, f"Daily rate must be at least {MIN_DAILY_RATE}")
    return StepResult.passed(6)


def validate_activities(snapshot: Snapshot) -> StepResult:
    activities = snapshot.get("activities") or {}
    on_site = activities.get("on_site") or []
    nearby = activities.get("nearby") or []
    if not on_site and not nearby:
        return StepResult.failed(7, "Select at least one on-site or nearby activity")
    return StepResult.passed(7)


def validate_legal(snapshot: Snapshot) -> StepResult:
    if not _text(snapshot, "arrival_instructions"):
        return StepResult.failed(8, "Arrival instructions are required")
    return StepResult.passed(8)


def validate_review(snapshot: Snapshot) -> StepResult:
    return StepResult.passed(9)


class Step:
    """A statically defined wizard step."""

    __slots__ = ("number", "key", "title", "description", "validator")

    def __init__(self, number: int, key: str, title: str, description: str, validator: Validator):
        self.number = number
        self.key = key
        self.title = title
        self.description = description
        self.validator = validator

    def validate(self, snapshot: Snapshot) -> StepResult:
        return self.validator(snapshot)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "key": self.key,
            "title": self.title,
            "description": self.description,
        }

    def __repr__(self) -> str:
        return f"Step({self.number}, {self.key!r})"


WIZARD_STEPS: tuple[Step, ...] = (
    Step(1, "basics", "Property Basics", "Name, type and description", validate_basics),
    Step(2, "location", "Location & Address", "Where is your property?", validate_location),
    Step(3, "capacity", "Rooms & Capacity", "Beds, bathrooms and guests", validate_capacity),
    Step(4, "amenities", "Amenities & Features", "What does your property offer?", validate_amenities),
    Step(5, "policies", "Policies & Rules", "Booking terms and payment methods", validate_policies),
    Step(6, "pricing", "Pricing & Services", "Rates and meal plans", validate_pricing),
    Step(7, "activities", "Activities", "On-site and nearby activities", validate_activities),
    Step(8, "legal", "Arrival & Legal", "Arrival instructions and license", validate_legal),
    Step(9, "review", "Review & Submit", "Final review and submission", validate_review),
)


def get_step(number: int) -> Step:
    """Look up a step by its 1-based number."""
    if not 1 <= number <= TOTAL_STEPS:
        raise ValueError(f"Step must be between 1 and {TOTAL_STEPS}, got {number}")
    return WIZARD_STEPS[number - 1]


def validate_step(number: int, snapshot: Snapshot) -> StepResult:
    """Run one step validator, turning unexpected errors into a failed result."""
    step = get_step(number)
    try:
        return step.validate(snapshot)
    except Exception as e:
        return StepResult.failed(number, f"Could not validate step: {e}")
