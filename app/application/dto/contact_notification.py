from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.application.dto.booking_email import StudioConfigPayload
from app.application.dto.validation import format_pydantic_error, missing_fields
from app.application.exceptions import PayloadValidationError
from app.domain.entities.contact import ContactMessage

REQUIRED_MESSAGE_FIELDS = ("first_name", "last_name", "email", "subject", "message", "inquiry_type")


class ContactMessagePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    inquiry_type: str
    subject: str
    message: str
    created_at: str | None = None

    def to_entity(self) -> ContactMessage:
        return ContactMessage(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone or None,
            inquiry_type=self.inquiry_type,
            subject=self.subject,
            message=self.message,
            created_at=self.created_at,
        )


class ContactNotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: ContactMessagePayload
    admin_email: str | list[str] = Field(alias="adminEmail")
    studio_config: StudioConfigPayload | None = Field(None, alias="studioConfig")

    @property
    def recipients(self) -> list[str]:
        if isinstance(self.admin_email, str):
            return [self.admin_email]
        return [email for email in self.admin_email if email]

    @classmethod
    def parse(cls, payload: Any) -> "ContactNotificationRequest":
        if not isinstance(payload, dict):
            raise PayloadValidationError("Request body must be a JSON object", error="Invalid request payload")

        message = payload.get("message")
        if not message or not payload.get("adminEmail"):
            raise PayloadValidationError("Both message data and admin email are required")
        if not isinstance(message, dict):
            raise PayloadValidationError("Message must be a JSON object", error="Invalid request payload")

        missing = missing_fields(message, REQUIRED_MESSAGE_FIELDS)
        if missing:
            raise PayloadValidationError(
                f"Missing: {', '.join(missing)}", error="Missing required message fields"
            )

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise PayloadValidationError(format_pydantic_error(e), error="Invalid request payload") from e
