"""
HTTP tests for the function endpoints and the v1 admin API.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.application.exceptions import UpstreamDeliveryError
from app.application.ports.booking_notifier import BookingNotifierPort
from app.application.use_cases.booking_email import SendBookingEmailUseCase
from app.application.use_cases.booking_reminders import BOOKINGS_TABLE, SendBookingRemindersUseCase
from app.application.use_cases.contact_notification import SendContactNotificationUseCase
from app.application.use_cases.reminder_eligibility import ReminderEligibilityEngine
from app.application.use_cases.send_reminder import SendReminderUseCase
from app.application.use_cases.studio_settings import StudioSettingsService
from app.application.use_cases.translations import TRANSLATIONS_TABLE, TranslationAdmin, TranslationResolver
from app.infrastructure.email.mock_sender import MockEmailSender
from app.infrastructure.store.memory_data_store import MemoryDataStore
from app.infrastructure.store.memory_settings_store import MemorySettingsStore
from app.main import ContextFormatter, app
from app.wiring import dependencies

NOW = datetime(2024, 6, 10, 13, 0)

BOOKING = {
    "id": "b1",
    "service_name": "Gel Manicure",
    "service_price": 45,
    "appointment_date": "2024-06-11",
    "appointment_time": "10:00 AM",
    "client_name": "Ana Ruiz",
    "client_email": "ana@example.com",
    "confirmation_number": "FL-1001",
    "status": "confirmed",
}


class RecordingNotifier(BookingNotifierPort):
    def __init__(self, error: Exception | None = None) -> None:
        self.requests = []
        self._error = error

    def send_booking_email(self, request) -> dict[str, Any]:
        self.requests.append(request)
        if self._error:
            raise self._error
        return {"success": True}


@pytest.fixture
def env():
    store = MemoryDataStore(
        tables={
            BOOKINGS_TABLE: [
                dict(BOOKING),
                dict(BOOKING, id="b2", status="cancelled"),
                dict(BOOKING, id="b3", appointment_date="2024-06-10", appointment_time="9:00 AM"),
            ],
            TRANSLATIONS_TABLE: [
                {"id": "t1", "key": "nav.home", "category": "nav", "english_text": "Home", "spanish_text": "Inicio", "is_active": True},
            ],
        }
    )
    sender = MockEmailSender()
    notifier = RecordingNotifier()
    resolver = TranslationResolver(store=store, settings_store=MemorySettingsStore())
    resolver.refresh()
    studio_settings = StudioSettingsService(store=store)
    engine = ReminderEligibilityEngine()

    def booking_email_use_case():
        return SendBookingEmailUseCase(sender=sender, studio_settings=studio_settings, sleep=lambda _: None)

    def contact_use_case():
        return SendContactNotificationUseCase(sender=sender, sleep=lambda _: None)

    def reminders_use_case():
        return SendBookingRemindersUseCase(
            store=store, notifier=notifier, engine=engine, studio_settings=studio_settings,
            clock=lambda: NOW, sleep=lambda _: None,
        )

    def send_reminder_use_case():
        return SendReminderUseCase(
            store=store, notifier=notifier, engine=engine, studio_settings=studio_settings, clock=lambda: NOW
        )

    app.dependency_overrides[dependencies.get_send_booking_email_use_case] = booking_email_use_case
    app.dependency_overrides[dependencies.get_send_contact_notification_use_case] = contact_use_case
    app.dependency_overrides[dependencies.get_booking_reminders_use_case] = reminders_use_case
    app.dependency_overrides[dependencies.get_send_reminder_use_case] = send_reminder_use_case
    app.dependency_overrides[dependencies.get_translation_resolver] = lambda: resolver
    app.dependency_overrides[dependencies.get_translation_admin] = lambda: TranslationAdmin(store=store, resolver=resolver)

    yield {"client": TestClient(app), "sender": sender, "notifier": notifier, "resolver": resolver}

    app.dependency_overrides.clear()


def test_health(env):
    assert env["client"].get("/health").json() == {"status": "ok"}


def test_send_booking_email_invalid_json(env):
    resp = env["client"].post(
        "/functions/v1/send-booking-email", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid JSON format in request body"


def test_send_booking_email_missing_fields(env):
    resp = env["client"].post("/functions/v1/send-booking-email", json={"booking": BOOKING})
    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Missing required fields",
        "details": "Both booking data and email type are required",
    }


def test_send_booking_email_success(env):
    resp = env["client"].post("/functions/v1/send-booking-email", json={"type": "confirmation", "booking": BOOKING})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["results"][0]["recipient"] == "client"
    assert env["sender"].sent[0].to == "ana@example.com"


def test_send_contact_notification(env):
    payload = {
        "message": {
            "first_name": "Ana",
            "last_name": "Ruiz",
            "email": "ana@example.com",
            "inquiry_type": "General",
            "subject": "Hours",
            "message": "Are you open Sunday?",
        },
        "adminEmail": "owner@example.com",
    }
    resp = env["client"].post("/functions/v1/send-contact-notification", json=payload)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Contact notification sent successfully"

    resp = env["client"].post("/functions/v1/send-contact-notification", json={"message": payload["message"]})
    assert resp.status_code == 400


def test_booking_reminders_accepts_any_method(env):
    for method in ("GET", "POST"):
        resp = env["client"].request(method, "/functions/v1/booking-reminders")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Reminder check completed"
        assert body["results"] == {"sent24h": 1, "sent1h": 0, "errors": []}


def test_translation_resolution_and_language(env):
    client = env["client"]
    assert client.get("/api/v1/translations/resolve", params={"key": "nav.home"}).json() == {"language": "en", "text": "Home"}

    resp = client.put("/api/v1/language", json={"language": "es"})
    assert resp.status_code == 200
    assert client.get("/api/v1/language").json() == {"language": "es"}
    assert client.get("/api/v1/translations/resolve", params={"key": "nav.home"}).json()["text"] == "Inicio"
    assert client.get("/api/v1/translations/text", params={"text": " HOME "}).json()["text"] == "Inicio"
    assert client.get("/api/v1/translations/resolve", params={"key": "nope", "fallback": "Fallback"}).json()["text"] == "Fallback"

    assert client.put("/api/v1/language", json={"language": "fr"}).status_code == 422


def test_translation_admin_crud(env):
    client = env["client"]
    resp = client.post("/api/v1/translations", json={"key": "cta.book", "category": "cta", "english_text": "Book", "spanish_text": "Reservar"})
    assert resp.status_code == 201
    created = resp.json()

    assert [t["key"] for t in client.get("/api/v1/translations", params={"category": "cta"}).json()] == ["cta.book"]

    resp = client.patch(f"/api/v1/translations/{created['id']}", json={"english_text": "Book Now"})
    assert resp.status_code == 200
    assert resp.json()["english_text"] == "Book Now"
    assert client.patch("/api/v1/translations/missing", json={"english_text": "x"}).status_code == 404

    assert client.delete(f"/api/v1/translations/{created['id']}").status_code == 204
    assert client.post("/api/v1/translations/refresh").json() == {"count": 1}


def test_reminder_status(env):
    resp = env["client"].get("/api/v1/bookings/b1/reminder")
    assert resp.status_code == 200
    body = resp.json()
    assert body["window"]["total_hours"] == 21.0
    assert body["label"]["text"] == "Send 24-Hour Reminder"
    assert body["time_remaining"] == "in 21 hours"


def test_send_reminder(env):
    resp = env["client"].post("/api/v1/bookings/b1/reminder")
    assert resp.status_code == 200
    assert resp.json()["reminder_type"] == "reminder-24h"
    assert env["notifier"].requests[0].booking.id == "b1"


def test_send_reminder_errors(env):
    client = env["client"]
    assert client.post("/api/v1/bookings/missing/reminder").status_code == 404

    resp = client.post("/api/v1/bookings/b2/reminder")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Reminders can only be sent for confirmed appointments."

    assert client.post("/api/v1/bookings/b3/reminder").status_code == 400


def test_send_reminder_upstream_failure(env):
    app.dependency_overrides[dependencies.get_send_reminder_use_case] = lambda: SendReminderUseCase(
        store=MemoryDataStore(tables={BOOKINGS_TABLE: [dict(BOOKING)]}),
        notifier=RecordingNotifier(error=UpstreamDeliveryError("Brevo API error: 500 - down")),
        engine=ReminderEligibilityEngine(),
        studio_settings=StudioSettingsService(store=MemoryDataStore()),
        clock=lambda: NOW,
    )
    resp = env["client"].post("/api/v1/bookings/b1/reminder")
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Brevo API error: 500 - down"


def test_admin_notification_fan_out(env):
    resp = env["client"].post("/api/v1/bookings/admin-notifications", json={"booking": BOOKING, "adminEmail": "owner@example.com"})
    assert resp.status_code == 200
    assert resp.json()["results"][0]["email"] == "owner@example.com"
    assert resp.json()["results"][0]["status"] == "success"


@pytest.mark.parametrize(
    "path",
    [
        "/functions/v1/booking-reminders",
        "/functions/v1/send-booking-email",
        "/functions/v1/send-contact-notification",
    ],
)
def test_function_endpoints_answer_bare_options(env, path):
    """OPTIONS without preflight headers still gets 200 and the CORS headers."""
    resp = env["client"].options(path)
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert env["notifier"].requests == []
    assert env["sender"].sent == []


def test_context_formatter_includes_job_fields():
    """Counts and upstream status passed via extra= show up in the log line."""
    formatter = ContextFormatter("%(levelname)s:%(name)s:%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "Reminder check completed", None, None)
    record.sent_24h = 3
    record.sent_1h = 1
    record.error_count = 2
    record.status = 502

    line = formatter.format(record)

    assert line.startswith("INFO:x:Reminder check completed | ")
    for part in ("sent_24h=3", "sent_1h=1", "error_count=2", "status=502"):
        assert part in line
