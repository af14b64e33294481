"""
Tests for the scheduled reminder job.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.dto.booking_email import BookingEmailRequest, BookingEmailType
from app.application.exceptions import StoreFetchError, UpstreamDeliveryError
from app.application.ports.booking_notifier import BookingNotifierPort
from app.application.use_cases.booking_reminders import BOOKINGS_TABLE, SendBookingRemindersUseCase
from app.application.use_cases.reminder_eligibility import ReminderEligibilityEngine
from app.application.use_cases.studio_settings import StudioSettingsService
from app.infrastructure.store.memory_data_store import MemoryDataStore

NOW = datetime(2024, 6, 10, 13, 0)


class RecordingNotifier(BookingNotifierPort):
    def __init__(self, failing_ids: set[str] | None = None) -> None:
        self.requests: list[BookingEmailRequest] = []
        self._failing_ids = failing_ids or set()

    def send_booking_email(self, request: BookingEmailRequest) -> dict[str, Any]:
        self.requests.append(request)
        if request.booking.id in self._failing_ids:
            raise UpstreamDeliveryError("Brevo API error: 500 - boom")
        return {"success": True}


class FailingDateStore(MemoryDataStore):
    """Memory store that fails selects for one appointment date."""

    def __init__(self, failing_date: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._failing_date = failing_date

    def select(self, table, columns="*", filters=None, order=(), limit=None):
        if table == BOOKINGS_TABLE and (filters or {}).get("appointment_date") == self._failing_date:
            raise StoreFetchError("connection reset")
        return super().select(table, columns=columns, filters=filters, order=order, limit=limit)


def _row(booking_id: str, appointment_date: str, appointment_time: str, status: str = "confirmed") -> dict[str, Any]:
    return {
        "id": booking_id,
        "service_name": "Gel Manicure",
        "service_price": 45,
        "appointment_date": appointment_date,
        "appointment_time": appointment_time,
        "client_name": "Ana Ruiz",
        "client_email": f"{booking_id}@example.com",
        "client_phone": "555-0100",
        "confirmation_number": f"FL-{booking_id}",
        "status": status,
    }


def _use_case(store, notifier, sleeps: list[float]) -> SendBookingRemindersUseCase:
    return SendBookingRemindersUseCase(
        store=store,
        notifier=notifier,
        engine=ReminderEligibilityEngine(),
        studio_settings=StudioSettingsService(store=store),
        clock=lambda: NOW,
        admin_email="owner@example.com",
        send_delay_seconds=5.0,
        sleep=sleeps.append,
    )


def test_partial_failure_is_collected():
    """Three due bookings with the second failing: two sent, one error, three attempts."""
    store = MemoryDataStore(
        tables={
            BOOKINGS_TABLE: [
                _row("b1", "2024-06-11", "10:00 AM"),
                _row("b2", "2024-06-11", "11:00 AM"),
                _row("b3", "2024-06-11", "3:00 PM"),
            ]
        }
    )
    notifier = RecordingNotifier(failing_ids={"b2"})
    sleeps: list[float] = []

    result = _use_case(store, notifier, sleeps).run()

    assert result.sent_24h == 2
    assert result.sent_1h == 0
    assert result.errors == ["24h reminder failed for b2: Brevo API error: 500 - boom"]
    assert [r.booking.id for r in notifier.requests] == ["b1", "b2", "b3"]
    assert sleeps == [5.0, 5.0]


def test_payload_carries_type_and_admin_email():
    store = MemoryDataStore(
        tables={BOOKINGS_TABLE: [_row("b1", "2024-06-11", "10:00 AM"), _row("b2", "2024-06-10", "2:00 PM")]}
    )
    notifier = RecordingNotifier()

    result = _use_case(store, notifier, []).run()

    assert (result.sent_24h, result.sent_1h) == (1, 1)
    first, second = notifier.requests
    assert first.type == BookingEmailType.reminder_24h
    assert second.type == BookingEmailType.reminder_1h
    assert first.admin_email == "owner@example.com"
    payload = first.to_payload()
    assert payload["type"] == "reminder-24h"
    assert payload["booking"]["confirmation_number"] == "FL-b1"
    assert payload["locationConfig"]["displayAddress"] == "Private Studio, Nashville TN"


def test_cancelled_bookings_are_never_reminded():
    """Cancelled bookings dated tomorrow are excluded by the store filter and the engine."""
    store = MemoryDataStore(
        tables={BOOKINGS_TABLE: [_row("gone", "2024-06-11", "10:00 AM", status="cancelled")]}
    )
    notifier = RecordingNotifier()

    result = _use_case(store, notifier, []).run()

    assert result.sent_24h == 0
    assert notifier.requests == []


def test_fetch_failure_skips_only_that_half():
    """If tomorrow's query fails, today's 1-hour reminders still go out."""
    store = FailingDateStore(
        failing_date="2024-06-11",
        tables={BOOKINGS_TABLE: [_row("b1", "2024-06-11", "10:00 AM"), _row("b2", "2024-06-10", "2:00 PM")]},
    )
    notifier = RecordingNotifier()

    result = _use_case(store, notifier, []).run()

    assert result.sent_24h == 0
    assert result.sent_1h == 1
    assert [r.booking.id for r in notifier.requests] == ["b2"]


def test_no_due_bookings_sends_nothing():
    sleeps: list[float] = []
    result = _use_case(MemoryDataStore(), RecordingNotifier(), sleeps).run()

    assert result.as_payload() == {"sent24h": 0, "sent1h": 0, "errors": []}
    assert sleeps == []
