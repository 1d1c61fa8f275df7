"""Field schema for the property draft edited by the listing wizard.

Each field path maps to one variant of ``FieldKind``. Dotted paths
(``pricing.daily_rate``) belong to a nested group; the group prefix itself
(``pricing``) is addressable as a nested object but is not a field.
"""

from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field

from src.models.catalog import CancellationPolicy, PaymentMethod
from src.utils.wizard_config import WizardConfig


class FieldKind(str, Enum):
    """Value variants a draft field can hold."""
    TEXT = "text"
    NUMBER = "number"
    LIST = "list"
    TOGGLE_LIST = "toggle_list"


class FieldSpec(BaseModel):
    """Declaration of a single draft field."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Dotted field path")
    kind: FieldKind = Field(..., description="Value variant")
    default: Any = Field(..., description="Explicit empty/default value")
    section: str = Field(..., description="Logical section: identity, location, capacity, ...")

    @property
    def is_list(self) -> bool:
        return self.kind in (FieldKind.LIST, FieldKind.TOGGLE_LIST)


def _field(path: str, kind: FieldKind, default: Any, section: str) -> FieldSpec:
    return FieldSpec(path=path, kind=kind, default=default, section=section)


PROPERTY_FIELDS: tuple[FieldSpec, ...] = (
    # Identity
    _field("title", FieldKind.TEXT, "", "identity"),
    _field("description", FieldKind.TEXT, "", "identity"),
    _field("property_type", FieldKind.TEXT, "", "identity"),
    _field("property_subtype", FieldKind.TEXT, "", "identity"),
    # Location
    _field("address", FieldKind.TEXT, "", "location"),
    _field("area", FieldKind.TEXT, "", "location"),
    _field("city", FieldKind.TEXT, "", "location"),
    _field("state", FieldKind.TEXT, "", "location"),
    _field("postal_code", FieldKind.TEXT, "", "location"),
    _field("country", FieldKind.TEXT, WizardConfig.DEFAULT_COUNTRY, "location"),
    _field("contact_phone", FieldKind.TEXT, "", "location"),
    # Capacity
    _field("rooms_count", FieldKind.NUMBER, 1, "capacity"),
    _field("capacity_per_room", FieldKind.NUMBER, 2, "capacity"),
    _field("day_picnic_capacity", FieldKind.NUMBER, "", "capacity"),
    _field("max_guests", FieldKind.NUMBER, 2, "capacity"),
    _field("bedrooms", FieldKind.NUMBER, "", "capacity"),
    _field("bathrooms", FieldKind.NUMBER, "", "capacity"),
    # Amenities
    _field("amenities", FieldKind.TOGGLE_LIST, [], "amenities"),
    # Policies
    _field("check_in_time", FieldKind.TEXT, "15:00", "policies"),
    _field("check_out_time", FieldKind.TEXT, "11:00", "policies"),
    _field("minimum_stay", FieldKind.NUMBER, 1, "policies"),
    _field("cancellation_policy", FieldKind.TEXT, CancellationPolicy.MODERATE.value, "policies"),
    _field(
        "payment_methods",
        FieldKind.TOGGLE_LIST,
        [PaymentMethod.CARD.value, PaymentMethod.CASH.value],
        "policies",
    ),
    _field("meal_plans", FieldKind.TOGGLE_LIST, [], "policies"),
    # Pricing
    _field("pricing.daily_rate", FieldKind.NUMBER, "", "pricing"),
    _field("pricing.currency", FieldKind.TEXT, WizardConfig.DEFAULT_CURRENCY, "pricing"),
    # Activities
    _field("activities.on_site", FieldKind.TOGGLE_LIST, [], "activities"),
    _field("activities.nearby", FieldKind.TOGGLE_LIST, [], "activities"),
    # Legal
    _field("arrival_instructions", FieldKind.TEXT, "", "legal"),
    _field("license_number", FieldKind.TEXT, "", "legal"),
    # Media
    _field("images", FieldKind.LIST, [], "media"),
)
