"""Property listing models."""

from typing import Optional, Any, Union
from pydantic import BaseModel, ConfigDict, Field

from src.utils.errors import CodecParseWarning
from src.utils.wizard_config import WizardConfig


class Pricing(BaseModel):
    """Nightly pricing stored in the pricing JSON column."""
    daily_rate: Optional[float] = Field(None, description="Daily rate")
    currency: str = Field(default=WizardConfig.DEFAULT_CURRENCY, description="ISO currency code")


class PersistedRecord(BaseModel):
    """Property row as written to the properties table."""
    title: str = Field(..., description="Property name")
    description: str = Field(..., description="Description with embedded metadata sections")
    property_type: str = Field(..., description="Property category")
    property_subtype: Optional[str] = Field(None, description="Property subcategory")
    address: Optional[str] = Field(None, description="Composed address string")
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    max_guests: Optional[int] = Field(None, ge=0, description="Total guest capacity")
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    rooms_count: Optional[int] = None
    capacity_per_room: Optional[int] = None
    day_picnic_capacity: Optional[int] = None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    pricing: Pricing = Field(default_factory=Pricing)
    activities: dict[str, list[str]] = Field(
        default_factory=lambda: {"on_site": [], "nearby": []},
        description="On-site and nearby activities",
    )
    contact_phone: Optional[str] = Field(None, description="Dedicated contact phone column")
    license_number: Optional[str] = Field(None, description="Dedicated license column")
    owner_id: Optional[str] = Field(None, description="Owner user ID (set on create)")
    status: Optional[str] = Field(None, description="Approval status (set on create)")

    def to_row(self) -> dict:
        """Serialize for the record store.

        Cleared fields are sent as nulls so an update overwrites them; the
        create-only columns are left out when unset.
        """
        exclude = {name for name in ("owner_id", "status") if getattr(self, name) is None}
        return self.model_dump(exclude=exclude)


class EmbeddedMetadata(BaseModel):
    """Structured fields folded into the description text."""
    contact_phone: str = ""
    arrival_instructions: str = ""
    meal_plans: list[str] = Field(default_factory=list)
    license_number: str = ""


class BookingDetails(BaseModel):
    """Booking terms carried by the Property Details section.

    ``None`` means the value was not present in the text.
    """
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    minimum_stay: Optional[Union[int, float]] = None
    cancellation_policy: Optional[str] = None
    payment_methods: Optional[list[str]] = None


class DecodedDescription(BaseModel):
    """Result of decoding a stored description."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    clean_description: str = ""
    metadata: EmbeddedMetadata = Field(default_factory=EmbeddedMetadata)
    booking: BookingDetails = Field(default_factory=BookingDetails)
    warnings: list[CodecParseWarning] = Field(default_factory=list)


class StepResult(BaseModel):
    """Outcome of a step validator. A failure carries the step and reason."""
    ok: bool
    step: int = Field(..., ge=1, le=9)
    reason: Optional[str] = None

    @classmethod
    def passed(cls, step: int) -> "StepResult":
        return cls(ok=True, step=step)

    @classmethod
    def failed(cls, step: int, reason: str) -> "StepResult":
        return cls(ok=False, step=step, reason=reason)


class SubmissionResult(BaseModel):
    """Outcome of a wizard submit."""
    ok: bool
    created: bool = Field(False, description="True for a new listing, False for an update")
    record: Optional[dict[str, Any]] = Field(None, description="Row returned by the record store")
    failure: Optional[StepResult] = Field(None, description="First failing step, when not submitted")
