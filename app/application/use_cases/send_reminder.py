from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from app.application.dto.booking_email import (
    BookingEmailRequest,
    BookingEmailType,
    BookingPayload,
    LocationConfigPayload,
    StudioConfigPayload,
)
from app.application.exceptions import BookingNotFoundError, PayloadValidationError
from app.application.ports.booking_notifier import BookingNotifierPort
from app.application.ports.data_store import DataStorePort
from app.application.use_cases.booking_reminders import BOOKINGS_TABLE
from app.application.use_cases.reminder_eligibility import ReminderEligibilityEngine
from app.application.use_cases.studio_settings import StudioSettingsService
from app.domain.entities.booking import Booking
from app.domain.entities.reminder import ReminderLabel, ReminderWindow


@dataclass(frozen=True)
class ReminderStatus:
    booking_id: str
    status: str
    window: ReminderWindow
    label: ReminderLabel
    time_remaining: str


@dataclass(frozen=True)
class ReminderSent:
    booking_id: str
    reminder_type: str
    hours_until_appointment: float
    description: str


class SendReminderUseCase:
    """Admin-triggered reminder for a single booking. Delivery errors propagate to the caller."""

    def __init__(
        self,
        store: DataStorePort,
        notifier: BookingNotifierPort,
        engine: ReminderEligibilityEngine,
        studio_settings: StudioSettingsService,
        clock: Callable[[], datetime],
        admin_email: str | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._engine = engine
        self._studio_settings = studio_settings
        self._clock = clock
        self._admin_email = admin_email
        self._logger = logging.getLogger(__name__)

    def status(self, booking_id: str, now: datetime | None = None) -> ReminderStatus:
        booking = self._load(booking_id)
        now = now or self._clock()
        return ReminderStatus(
            booking_id=booking.id,
            status=booking.status,
            window=self._engine.classify(booking.appointment_date, booking.appointment_time, now),
            label=self._engine.label_for(booking.appointment_date, booking.appointment_time, now),
            time_remaining=self._engine.time_remaining_text(booking.appointment_date, booking.appointment_time, now),
        )

    def execute(self, booking_id: str, now: datetime | None = None) -> ReminderSent:
        booking = self._load(booking_id)
        if not booking.is_confirmed:
            raise PayloadValidationError(
                "Reminders can only be sent for confirmed appointments.", error="Cannot send reminder"
            )

        now = now or self._clock()
        window = self._engine.classify(booking.appointment_date, booking.appointment_time, now)
        if window.is_past:
            raise PayloadValidationError("Appointment has already passed.", error="Cannot send reminder")

        if window.is_within_1_hour:
            email_type = BookingEmailType.reminder_1h
            description = "1-hour"
        elif window.is_within_24_hours:
            email_type = BookingEmailType.reminder_24h
            description = "24-hour"
        else:
            email_type = BookingEmailType.reminder_custom
            description = f"{int(window.total_hours)}-hour"

        studio = self._studio_settings.get_studio_config()
        request = BookingEmailRequest(
            type=email_type,
            booking=BookingPayload.from_booking(booking),
            hours_until_appointment=window.total_hours,
            admin_email=self._admin_email,
            location_config=LocationConfigPayload.from_entity(self._studio_settings.get_location_config()),
            studio_config=StudioConfigPayload.from_entity(studio) if studio else None,
        )

        self._logger.info(
            "Sending reminder", extra={"booking_id": booking.id, "reminder_type": email_type.value}
        )
        self._notifier.send_booking_email(request)

        return ReminderSent(
            booking_id=booking.id,
            reminder_type=email_type.value,
            hours_until_appointment=window.total_hours,
            description=description,
        )

    def _load(self, booking_id: str) -> Booking:
        rows = self._store.select(BOOKINGS_TABLE, filters={"id": booking_id}, limit=1)
        if not rows:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return Booking.from_row(rows[0])
