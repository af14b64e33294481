from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.application.dto.validation import format_pydantic_error, missing_fields
from app.application.exceptions import PayloadValidationError
from app.domain.entities.booking import AddOnSelection, Booking
from app.domain.entities.studio import LocationConfig, StudioConfig

REQUIRED_BOOKING_FIELDS = (
    "service_name",
    "client_name",
    "client_email",
    "appointment_date",
    "appointment_time",
    "confirmation_number",
)


class BookingEmailType(str, Enum):
    confirmation = "confirmation"
    reminder_24h = "reminder-24h"
    reminder_1h = "reminder-1h"
    reminder_custom = "reminder-custom"
    admin_notification = "admin-notification"


class AddOnPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    price: float = 0.0


class BookingPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    service_name: str
    service_price: float = 0.0
    appointment_date: date
    appointment_time: str
    client_name: str
    client_email: str
    client_phone: str = ""
    confirmation_number: str
    notes: str | None = None
    status: str | None = None
    selected_add_ons: list[AddOnPayload] = Field(default_factory=list)
    add_ons_total: float | None = None

    @staticmethod
    def from_booking(booking: Booking) -> "BookingPayload":
        return BookingPayload(
            id=booking.id,
            service_name=booking.service_name,
            service_price=booking.service_price,
            appointment_date=booking.appointment_date,
            appointment_time=booking.appointment_time,
            client_name=booking.client_name,
            client_email=booking.client_email,
            client_phone=booking.client_phone,
            confirmation_number=booking.confirmation_number,
            notes=booking.notes,
            status=booking.status,
            selected_add_ons=[AddOnPayload(name=a.name, price=a.price) for a in booking.selected_add_ons],
            add_ons_total=booking.add_ons_total,
        )

    def to_booking(self) -> Booking:
        return Booking(
            id=self.id or "",
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            status=self.status or "confirmed",
            service_name=self.service_name,
            service_price=self.service_price,
            client_name=self.client_name,
            client_email=self.client_email,
            client_phone=self.client_phone,
            confirmation_number=self.confirmation_number,
            notes=self.notes,
            selected_add_ons=tuple(AddOnSelection(name=a.name, price=a.price) for a in self.selected_add_ons),
            add_ons_total=self.add_ons_total or 0.0,
        )


class StudioConfigPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    studio_name: str | None = Field(None, alias="studioName")
    studio_phone: str | None = Field(None, alias="studioPhone")
    studio_email: str | None = Field(None, alias="studioEmail")
    website_url: str | None = Field(None, alias="websiteUrl")

    @staticmethod
    def from_entity(config: StudioConfig) -> "StudioConfigPayload":
        return StudioConfigPayload(
            studio_name=config.studio_name,
            studio_phone=config.studio_phone,
            studio_email=config.studio_email,
            website_url=config.website_url,
        )

    def is_empty(self) -> bool:
        return not any((self.studio_name, self.studio_phone, self.studio_email, self.website_url))

    def to_entity(self) -> StudioConfig:
        defaults = StudioConfig()
        return StudioConfig(
            studio_name=self.studio_name or defaults.studio_name,
            studio_phone=self.studio_phone or defaults.studio_phone,
            studio_email=self.studio_email or defaults.studio_email,
            website_url=self.website_url or defaults.website_url,
        )


class LocationConfigPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    include_in_confirmation: bool = Field(True, alias="includeInConfirmation")
    delivery_method: str = Field("inline", alias="deliveryMethod")
    full_address: str = Field("", alias="fullAddress")
    display_address: str = Field("", alias="displayAddress")
    google_maps_link: str = Field("", alias="googleMapsLink")
    parking_instructions: str = Field("", alias="parkingInstructions")
    access_instructions: str = Field("", alias="accessInstructions")

    @staticmethod
    def from_entity(config: LocationConfig) -> "LocationConfigPayload":
        return LocationConfigPayload(
            include_in_confirmation=config.include_in_confirmation,
            delivery_method=config.delivery_method,
            full_address=config.full_address,
            display_address=config.display_address,
            google_maps_link=config.google_maps_link,
            parking_instructions=config.parking_instructions,
            access_instructions=config.access_instructions,
        )

    def to_entity(self) -> LocationConfig:
        return LocationConfig(
            include_in_confirmation=self.include_in_confirmation,
            delivery_method=self.delivery_method,
            full_address=self.full_address,
            display_address=self.display_address,
            google_maps_link=self.google_maps_link,
            parking_instructions=self.parking_instructions,
            access_instructions=self.access_instructions,
        )


class BookingEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: BookingEmailType
    booking: BookingPayload
    hours_until_appointment: float | None = Field(None, alias="hoursUntilAppointment")
    admin_email: str | None = Field(None, alias="adminEmail")
    location_config: LocationConfigPayload | None = Field(None, alias="locationConfig")
    studio_config: StudioConfigPayload | None = Field(None, alias="studioConfig")

    @classmethod
    def parse(cls, payload: Any) -> "BookingEmailRequest":
        if not isinstance(payload, dict):
            raise PayloadValidationError("Request body must be a JSON object", error="Invalid request payload")

        booking = payload.get("booking")
        if not booking or not payload.get("type"):
            raise PayloadValidationError("Both booking data and email type are required")
        if not isinstance(booking, dict):
            raise PayloadValidationError("Booking must be a JSON object", error="Invalid request payload")

        missing = missing_fields(booking, REQUIRED_BOOKING_FIELDS)
        if missing:
            raise PayloadValidationError(
                f"Missing: {', '.join(missing)}", error="Missing required booking fields"
            )

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise PayloadValidationError(format_pydantic_error(e), error="Invalid request payload") from e

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
