from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable

from app.application.dto.booking_email import BookingEmailRequest, BookingEmailType
from app.application.exceptions import UpstreamDeliveryError
from app.application.ports.email_sender import EmailSenderPort
from app.application.use_cases.studio_settings import StudioSettingsService
from app.domain.entities.booking import Booking
from app.domain.entities.studio import StudioConfig
from app.infrastructure.email import templates

CLIENT_TAGS = ("booking", "transactional")


def build_subject(email_type: BookingEmailType, booking: Booking, hours_until_appointment: float | None) -> str:
    short_date = templates.format_short_date(booking.appointment_date)

    if email_type == BookingEmailType.confirmation:
        return f"Booking Confirmed - {booking.service_name} on {short_date}"
    if email_type == BookingEmailType.reminder_24h:
        return f"Reminder: Your appointment is tomorrow at {booking.appointment_time}"
    if email_type == BookingEmailType.reminder_1h:
        return "Starting Soon: Your appointment begins in 1 hour"
    if email_type == BookingEmailType.reminder_custom:
        hours = math.floor(hours_until_appointment or 0)
        days = hours // 24
        if days > 0:
            plural = "s" if days > 1 else ""
            return f"Reminder: Your appointment is in {days} day{plural} at {booking.appointment_time}"
        if hours > 0:
            plural = "s" if hours > 1 else ""
            return f"Reminder: Your appointment is in {hours} hour{plural} at {booking.appointment_time}"
        return f"Reminder: Your appointment is today at {booking.appointment_time}"
    return f"Appointment Reminder - {booking.service_name} on {short_date}"


class SendBookingEmailUseCase:
    def __init__(
        self,
        sender: EmailSenderPort,
        studio_settings: StudioSettingsService,
        sender_email: str | None = None,
        admin_email: str | None = None,
        send_delay_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sender = sender
        self._studio_settings = studio_settings
        self._sender_email = sender_email
        self._admin_email = admin_email
        self._send_delay_seconds = send_delay_seconds
        self._sleep = sleep
        self._logger = logging.getLogger(__name__)

    def execute(self, request: BookingEmailRequest) -> dict[str, Any]:
        """Send the client email (or the admin notification) for one booking email request."""
        studio = self._resolve_studio_config(request)
        booking = request.booking.to_booking()
        results: list[dict[str, Any]] = []

        if request.type != BookingEmailType.admin_notification:
            subject = build_subject(request.type, booking, request.hours_until_appointment)
            html = self._render(request, booking, studio)
            self._logger.info(
                "Sending booking email",
                extra={"booking_id": booking.id, "reminder_type": request.type.value, "recipient": booking.client_email},
            )
            try:
                result = self._sender.send(
                    to=booking.client_email,
                    subject=subject,
                    html=html,
                    sender_email=self._sender_email or studio.studio_email,
                    sender_name=studio.studio_name,
                    tags=CLIENT_TAGS,
                )
            except UpstreamDeliveryError as e:
                self._logger.error(
                    "Failed to send client email", extra={"booking_id": booking.id, "error": str(e)}
                )
                raise
            results.append({"recipient": "client", "result": result})
        else:
            address = request.admin_email or self._admin_email or ""
            try:
                result = self._send_admin_notification(booking, address, studio)
                results.append({"recipient": f"admin-{address}", "result": result})
            except UpstreamDeliveryError as e:
                self._logger.error(
                    "Failed to send admin email", extra={"recipient": address, "error": str(e)}
                )
                results.append({"recipient": f"admin-{address}", "error": str(e)})

        return {"success": True, "message": "Emails sent successfully", "results": results}

    def notify_admins(self, request: BookingEmailRequest) -> list[dict[str, Any]]:
        """Send the admin notification to every active admin address, one at a time."""
        studio = self._resolve_studio_config(request)
        booking = request.booking.to_booking()

        recipients = [config.email for config in self._studio_settings.get_active_admin_emails()]
        if not recipients:
            recipients = [request.admin_email or self._admin_email or ""]

        outcomes: list[dict[str, Any]] = []
        for index, address in enumerate(recipients):
            if index > 0:
                self._logger.info(
                    "Waiting before next admin notification",
                    extra={"recipient": address, "delay_seconds": self._send_delay_seconds},
                )
                self._sleep(self._send_delay_seconds)
            try:
                result = self._send_admin_notification(booking, address, studio)
                outcomes.append({"email": address, "status": "success", "result": result})
            except UpstreamDeliveryError as e:
                self._logger.error("Failed to send admin notification", extra={"recipient": address, "error": str(e)})
                outcomes.append({"email": address, "status": "failed", "error": str(e)})
        return outcomes

    def _send_admin_notification(self, booking: Booking, address: str, studio: StudioConfig) -> dict[str, Any]:
        if not address:
            raise UpstreamDeliveryError("No admin email address configured")
        return self._sender.send(
            to=address,
            subject=f"New Booking: {booking.client_name} - {booking.service_name}",
            html=templates.render_admin_notification(booking, studio),
            sender_email=self._sender_email or studio.studio_email,
            sender_name=studio.studio_name,
            tags=CLIENT_TAGS,
        )

    def _resolve_studio_config(self, request: BookingEmailRequest) -> StudioConfig:
        stored = self._studio_settings.get_studio_config()
        if stored is not None:
            return stored
        if request.studio_config is not None and not request.studio_config.is_empty():
            return request.studio_config.to_entity()
        return StudioConfig()

    def _render(self, request: BookingEmailRequest, booking: Booking, studio: StudioConfig) -> str:
        location = request.location_config.to_entity() if request.location_config else None
        if request.type == BookingEmailType.confirmation:
            return templates.render_confirmation(booking, studio, location)
        if request.type == BookingEmailType.reminder_24h:
            return templates.render_reminder_24h(booking, studio, location)
        if request.type == BookingEmailType.reminder_1h:
            return templates.render_reminder_1h(booking, studio, location)
        return templates.render_reminder_custom(booking, studio, location, request.hours_until_appointment or 0)
