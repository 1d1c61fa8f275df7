"""Fixed option lists offered by the listing wizard."""

from enum import Enum


class PropertyType(str, Enum):
    """Property categories."""
    HOTEL = "hotel"
    APARTMENT = "apartment"
    VILLA = "villa"
    VACATION_HOME = "vacation_home"
    HOUSE = "house"
    RESORT = "resort"
    HOMESTAY = "homestay"
    GUEST_HOUSE = "guest_house"
    DAY_PICNIC = "day_picnic"


class CancellationPolicy(str, Enum):
    """Cancellation policies."""
    FLEXIBLE = "flexible"
    MODERATE = "moderate"
    STRICT = "strict"
    SUPER_STRICT = "super_strict"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""
    CARD = "card"
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    DIGITAL_WALLET = "digital_wallet"
    CRYPTO = "crypto"


class MealPlan(str, Enum):
    """Meal plans a property can offer."""
    BREAKFAST = "breakfast"
    HALF_BOARD = "half_board"
    FULL_BOARD = "full_board"
    ALL_INCLUSIVE = "all_inclusive"


def is_day_picnic(property_type: str) -> bool:
    """Match the day picnic category in either its key or label spelling ("Day Picnic")."""
    if not property_type:
        return False
    normalized = property_type.strip().lower().replace(" ", "_").replace("-", "_")
    return normalized == PropertyType.DAY_PICNIC.value
