from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable

from app.application.utils.time_format import (
    appointment_datetime,
    describe_time_remaining,
    hours_between,
)
from app.domain.entities.booking import Booking
from app.domain.entities.reminder import (
    DueBookings,
    ReminderLabel,
    ReminderWindow,
    ReminderWindows,
)


class ReminderEligibilityEngine:
    """Timing rules for appointment reminders.

    `classify` is the interactive check (strict <= 24h / <= 1h, no lower
    bound). `select_due_bookings` is the scheduled-job policy: tomorrow's
    calendar date for 24-hour reminders and a tolerance band around one
    hour for 1-hour reminders. The two policies are intentionally separate.
    """

    def __init__(self, windows: ReminderWindows | None = None) -> None:
        self._windows = windows or ReminderWindows()
        self._logger = logging.getLogger(__name__)

    def classify(self, appointment_date: date, appointment_time: str, now: datetime) -> ReminderWindow:
        total_hours = hours_between(now, appointment_datetime(appointment_date, appointment_time))
        return ReminderWindow(
            total_hours=total_hours,
            is_within_24_hours=total_hours <= 24,
            is_within_1_hour=total_hours <= 1,
        )

    def label_for(self, appointment_date: date, appointment_time: str, now: datetime) -> ReminderLabel:
        window = self.classify(appointment_date, appointment_time, now)
        if window.is_past:
            return ReminderLabel(text="Appointment Passed", disabled=True, variant="secondary")
        if window.is_within_1_hour:
            return ReminderLabel(text="Send 1-Hour Reminder", disabled=False, variant="destructive")
        if window.is_within_24_hours:
            return ReminderLabel(text="Send 24-Hour Reminder", disabled=False, variant="default")
        return ReminderLabel(
            text=f"Send Reminder ({math.ceil(window.total_hours)}h)",
            disabled=False,
            variant="outline",
        )

    def time_remaining_text(self, appointment_date: date, appointment_time: str, now: datetime) -> str:
        window = self.classify(appointment_date, appointment_time, now)
        return describe_time_remaining(window.total_hours)

    def select_due_bookings(
        self,
        bookings: Iterable[Booking],
        now: datetime,
        windows: ReminderWindows | None = None,
    ) -> DueBookings:
        windows = windows or self._windows
        tomorrow = (now + timedelta(hours=24)).date()
        today = now.date()

        due = DueBookings()
        for booking in bookings:
            if not booking.is_confirmed:
                continue

            if booking.appointment_date == tomorrow:
                due.due_24h.append(booking)
                continue

            if booking.appointment_date != today:
                continue

            try:
                window = self.classify(booking.appointment_date, booking.appointment_time, now)
            except ValueError as e:
                self._logger.error(
                    "Cannot evaluate 1h reminder", extra={"booking_id": booking.id, "error": str(e)}
                )
                due.errors.append(f"1h reminder failed for {booking.id}: {e}")
                continue

            if windows.one_hour_min <= window.total_hours <= windows.one_hour_max:
                due.due_1h.append(booking)

        return due
