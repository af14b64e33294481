from __future__ import annotations

import logging
import time
from datetime import date, datetime, timedelta
from typing import Callable

from app.application.dto.booking_email import (
    BookingEmailRequest,
    BookingEmailType,
    BookingPayload,
    LocationConfigPayload,
    StudioConfigPayload,
)
from app.application.exceptions import StoreFetchError
from app.application.ports.booking_notifier import BookingNotifierPort
from app.application.ports.data_store import DataStorePort
from app.application.use_cases.reminder_eligibility import ReminderEligibilityEngine
from app.application.use_cases.studio_settings import StudioSettingsService
from app.domain.entities.booking import CONFIRMED, Booking
from app.domain.entities.reminder import ReminderBatchResult

BOOKINGS_TABLE = "bookings"


class SendBookingRemindersUseCase:
    """
    Scheduled reminder job.

    Loads tomorrow's and today's confirmed bookings, asks the eligibility
    engine which are due, and sends each reminder through the notifier one
    at a time with a fixed pause between sends. Per-booking failures are
    collected into the result; run() itself never raises.
    """

    def __init__(
        self,
        store: DataStorePort,
        notifier: BookingNotifierPort,
        engine: ReminderEligibilityEngine,
        studio_settings: StudioSettingsService,
        clock: Callable[[], datetime],
        admin_email: str | None = None,
        send_delay_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._engine = engine
        self._studio_settings = studio_settings
        self._clock = clock
        self._admin_email = admin_email
        self._send_delay_seconds = send_delay_seconds
        self._sleep = sleep
        self._sends_attempted = 0
        self._logger = logging.getLogger(__name__)

    def run(self, now: datetime | None = None) -> ReminderBatchResult:
        now = now or self._clock()
        tomorrow = (now + timedelta(hours=24)).date()
        today = now.date()
        result = ReminderBatchResult()
        self._sends_attempted = 0

        candidates = self._fetch_confirmed(tomorrow, "24h") + self._fetch_confirmed(today, "1h")
        due = self._engine.select_due_bookings(candidates, now)
        result.errors.extend(due.errors)

        location = LocationConfigPayload.from_entity(self._studio_settings.get_location_config())
        studio_entity = self._studio_settings.get_studio_config()
        studio = StudioConfigPayload.from_entity(studio_entity) if studio_entity else None

        for booking in due.due_24h:
            if self._send(booking, BookingEmailType.reminder_24h, location, studio, result):
                result.sent_24h += 1

        for booking in due.due_1h:
            if self._send(booking, BookingEmailType.reminder_1h, location, studio, result):
                result.sent_1h += 1

        self._logger.info(
            "Reminder check completed",
            extra={"sent_24h": result.sent_24h, "sent_1h": result.sent_1h, "error_count": len(result.errors)},
        )
        return result

    def _fetch_confirmed(self, appointment_date: date, label: str) -> list[Booking]:
        try:
            rows = self._store.select(
                BOOKINGS_TABLE,
                filters={"appointment_date": appointment_date.isoformat(), "status": CONFIRMED},
            )
        except StoreFetchError as e:
            self._logger.error(
                f"Error fetching {label} reminder bookings", extra={"table": BOOKINGS_TABLE, "error": str(e)}
            )
            return []

        bookings: list[Booking] = []
        for row in rows:
            try:
                bookings.append(Booking.from_row(row))
            except (TypeError, ValueError) as e:
                self._logger.error("Skipping unreadable booking row", extra={"booking_id": row.get("id"), "error": str(e)})
        return bookings

    def _send(
        self,
        booking: Booking,
        email_type: BookingEmailType,
        location: LocationConfigPayload,
        studio: StudioConfigPayload | None,
        result: ReminderBatchResult,
    ) -> bool:
        label = "24h" if email_type == BookingEmailType.reminder_24h else "1h"

        if self._sends_attempted > 0:
            self._sleep(self._send_delay_seconds)
        self._sends_attempted += 1

        try:
            request = BookingEmailRequest(
                type=email_type,
                booking=BookingPayload.from_booking(booking),
                admin_email=self._admin_email,
                location_config=location,
                studio_config=studio,
            )
            self._notifier.send_booking_email(request)
        except Exception as e:
            self._logger.error(
                f"Failed to send {label} reminder",
                extra={"booking_id": booking.id, "reminder_type": email_type.value, "error": str(e)},
            )
            result.errors.append(f"{label} reminder failed for {booking.id}: {e}")
            return False

        self._logger.info(f"{label} reminder sent", extra={"booking_id": booking.id, "reminder_type": email_type.value})
        return True
