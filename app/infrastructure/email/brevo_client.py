from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from app.application.exceptions import UpstreamDeliveryError
from app.application.ports.email_sender import EmailSenderPort

DEFAULT_BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


class BrevoEmailSender(EmailSenderPort):
    def __init__(self, api_key: str | None, api_url: str = DEFAULT_BREVO_API_URL, client: httpx.Client | None = None) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send(
        self,
        to: str,
        subject: str,
        html: str,
        sender_email: str,
        sender_name: str,
        tags: Sequence[str] = (),
        to_name: str | None = None,
    ) -> dict[str, Any]:
        if not self._api_key:
            raise UpstreamDeliveryError("BREVO_API_KEY environment variable is not set")

        recipient: dict[str, str] = {"email": to}
        if to_name:
            recipient["name"] = to_name
        payload = {
            "sender": {"name": sender_name, "email": sender_email},
            "to": [recipient],
            "subject": subject,
            "htmlContent": html,
            "tags": list(tags),
        }
        headers = {
            "accept": "application/json",
            "api-key": self._api_key,
            "content-type": "application/json",
        }

        try:
            resp = self._client.post(self._api_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            self._logger.error("Brevo request failed", extra={"recipient": to, "error": str(e)})
            raise UpstreamDeliveryError(f"Brevo API error: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Brevo send failed",
                extra={"status": resp.status_code, "recipient": to, "error": resp.text},
            )
            raise UpstreamDeliveryError(f"Brevo API error: {resp.status_code} - {resp.text}")

        try:
            return resp.json()
        except ValueError:
            return {}
