from __future__ import annotations

import logging
import time
from typing import Any, Callable

from app.application.dto.contact_notification import ContactNotificationRequest
from app.application.exceptions import UpstreamDeliveryError
from app.application.ports.email_sender import EmailSenderPort
from app.domain.entities.studio import StudioConfig
from app.infrastructure.email import templates

CONTACT_TAGS = ("contact-form", "admin-notification")


class SendContactNotificationUseCase:
    def __init__(
        self,
        sender: EmailSenderPort,
        sender_email: str | None = None,
        send_delay_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sender = sender
        self._sender_email = sender_email
        self._send_delay_seconds = send_delay_seconds
        self._sleep = sleep
        self._logger = logging.getLogger(__name__)

    def execute(self, request: ContactNotificationRequest) -> dict[str, Any]:
        studio = (
            request.studio_config.to_entity()
            if request.studio_config is not None and not request.studio_config.is_empty()
            else StudioConfig()
        )
        message = request.message.to_entity()
        subject = f"New Contact: {message.inquiry_type} from {message.full_name}"
        html = templates.render_contact_notification(message, studio)
        sender_email = self._sender_email or studio.studio_email

        results: list[dict[str, Any]] = []
        for index, address in enumerate(request.recipients):
            if index > 0:
                self._sleep(self._send_delay_seconds)
            self._logger.info("Sending contact notification", extra={"recipient": address})
            try:
                result = self._sender.send(
                    to=address,
                    subject=subject,
                    html=html,
                    sender_email=sender_email,
                    sender_name=studio.studio_name,
                    tags=CONTACT_TAGS,
                    to_name=f"{studio.studio_name} Admin",
                )
            except UpstreamDeliveryError as e:
                self._logger.error(
                    "Failed to send contact notification", extra={"recipient": address, "error": str(e)}
                )
                raise
            results.append(result)

        return {
            "success": True,
            "message": "Contact notification sent successfully",
            "result": results[0] if len(results) == 1 else results,
        }
