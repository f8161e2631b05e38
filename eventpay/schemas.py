from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StringConstraints,
    model_validator,
)

# Stripe rejects metadata values longer than this.
MAX_TEXT_LENGTH = 500
EVENT_TIMES_SEPARATOR = " - "

FreeText = Annotated[
    str,
    StringConstraints(strict=True, strip_whitespace=True, max_length=MAX_TEXT_LENGTH),
]
Cents = Annotated[int, Field(strict=True, ge=0)]


class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: StrictInt
    name: FreeText | None = None
    email: FreeText | None = None
    phone: FreeText | None = None
    event_title: FreeText | None = Field(default=None, alias="eventTitle")
    venue_name: FreeText | None = Field(default=None, alias="venueName")
    event_date: FreeText | None = Field(default=None, alias="eventDate")
    start_time: FreeText | None = Field(default=None, alias="startTime")
    end_time: FreeText | None = Field(default=None, alias="endTime")
    location: FreeText | None = None
    notes: FreeText | None = None
    total_package_price: Cents | None = Field(default=None, alias="totalPackagePrice")
    remaining_balance: Cents | None = Field(default=None, alias="remainingBalance")

    @property
    def event_times(self) -> str | None:
        """Start and end time as one value, or None unless both are given."""
        if not (self.start_time and self.end_time):
            return None
        return f"{self.start_time}{EVENT_TIMES_SEPARATOR}{self.end_time}"

    @model_validator(mode="after")
    def event_times_must_fit(self) -> "PaymentRequest":
        times = self.event_times
        if times is not None and len(times) > MAX_TEXT_LENGTH:
            raise ValueError(
                f"startTime and endTime together must be at most "
                f"{MAX_TEXT_LENGTH - len(EVENT_TIMES_SEPARATOR)} characters"
            )
        return self
