"""Convert between wizard drafts and rows of the properties table."""

import math
from typing import Any, Optional

from src.codec.description_codec import DescriptionCodec
from src.models.property import PersistedRecord, Pricing
from src.utils.logging import get_structured_logger, timed
from src.utils.wizard_config import WizardConfig

logger = get_structured_logger(__name__)

_TEXT_COLUMNS = {
    # draft field: row columns in lookup order (legacy names last)
    "title": ("title", "name"),
    "property_type": ("property_type", "type"),
    "property_subtype": ("property_subtype", "subtype"),
    "area": ("area",),
    "postal_code": ("postal_code", "zip_code"),
    "country": ("country",),
}

_NUMBER_COLUMNS = {
    "max_guests": ("max_guests", "capacity"),
    "bedrooms": ("bedrooms",),
    "bathrooms": ("bathrooms",),
    "rooms_count": ("rooms_count",),
    "capacity_per_room": ("capacity_per_room",),
    "day_picnic_capacity": ("day_picnic_capacity",),
}


def _first(row: dict, keys: tuple) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _as_number(field: str, value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    try:
        number = float(str(value).strip())
    except ValueError:
        logger.warning("Ignoring non-numeric column value", field=field)
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _as_text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


@timed("record_to_values")
def record_to_values(row: dict, codec: DescriptionCodec) -> dict[str, Any]:
    """Build draft values from a raw row; fields the row lacks keep their defaults."""
    decoded = codec.decode(row.get("description"))
    values: dict[str, Any] = {"description": decoded.clean_description}

    for field, keys in _TEXT_COLUMNS.items():
        value = _first(row, keys)
        if value is not None and str(value).strip():
            values[field] = str(value)

    location = row.get("location")
    location = location if isinstance(location, dict) else {}
    for field in ("city", "state"):
        value = row.get(field) or location.get(field)
        if value:
            values[field] = str(value)
    address = row.get("address") or location.get("address")
    if not address and isinstance(row.get("location"), str):
        address = row["location"]
    if address:
        values["address"] = str(address)

    for field, keys in _NUMBER_COLUMNS.items():
        number = _as_number(field, _first(row, keys))
        if number is not None:
            values[field] = number

    values["amenities"] = _as_text_list(row.get("amenities"))
    values["images"] = _as_text_list(row.get("images"))

    activities = row.get("activities")
    if isinstance(activities, dict):
        values["activities"] = {
            "on_site": _as_text_list(activities.get("on_site")),
            "nearby": _as_text_list(activities.get("nearby")),
        }

    pricing = row.get("pricing")
    pricing = pricing if isinstance(pricing, dict) else {}
    raw_rate = pricing.get("daily_rate")
    if raw_rate is None:
        raw_rate = row.get("price")
    rate = _as_number("pricing.daily_rate", raw_rate)
    values["pricing"] = {}
    if rate is not None:
        values["pricing"]["daily_rate"] = rate
    if pricing.get("currency"):
        values["pricing"]["currency"] = str(pricing["currency"])

    for field, value in codec.reconcile(decoded, row).items():
        if field in ("meal_plans", "payment_methods"):
            value = _as_text_list(value)
        elif field == "minimum_stay":
            value = _as_number(field, value)
            if value is None:
                continue
        else:
            value = str(value)
        values[field] = value

    if decoded.warnings:
        logger.warning(
            "Description decoded with unparsed sections",
            property_id=row.get("id"),
            warning_count=len(decoded.warnings),
        )
    return values


def _int_or_none(value: Any) -> Optional[int]:
    if value == "" or value is None:
        return None
    return int(round(value))


def _text_or_none(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def values_to_record(
    snapshot: dict[str, Any],
    codec: DescriptionCodec,
    owner_id: Optional[str] = None,
    creating: bool = True,
) -> PersistedRecord:
    """Assemble the row to persist from a draft snapshot."""
    pricing = snapshot.get("pricing") or {}
    rate = pricing.get("daily_rate")
    return PersistedRecord(
        title=snapshot["title"].strip(),
        description=codec.encode(snapshot),
        property_type=snapshot["property_type"].strip(),
        property_subtype=_text_or_none(snapshot["property_subtype"]),
        address=_text_or_none(snapshot["address"]),
        city=_text_or_none(snapshot["city"]),
        state=_text_or_none(snapshot["state"]),
        postal_code=_text_or_none(snapshot["postal_code"]),
        country=_text_or_none(snapshot["country"]),
        max_guests=_int_or_none(snapshot["max_guests"]),
        bedrooms=_int_or_none(snapshot["bedrooms"]),
        bathrooms=_int_or_none(snapshot["bathrooms"]),
        rooms_count=_int_or_none(snapshot["rooms_count"]),
        capacity_per_room=_int_or_none(snapshot["capacity_per_room"]),
        day_picnic_capacity=_int_or_none(snapshot["day_picnic_capacity"]),
        amenities=list(snapshot["amenities"]),
        images=list(snapshot["images"]),
        pricing=Pricing(
            daily_rate=None if rate in ("", None) else float(rate),
            currency=pricing.get("currency") or WizardConfig.DEFAULT_CURRENCY,
        ),
        activities={
            "on_site": list(snapshot["activities"]["on_site"]),
            "nearby": list(snapshot["activities"]["nearby"]),
        },
        contact_phone=_text_or_none(snapshot["contact_phone"]),
        license_number=_text_or_none(snapshot["license_number"]),
        owner_id=owner_id if creating else None,
        status=WizardConfig.NEW_PROPERTY_STATUS if creating else None,
    )
