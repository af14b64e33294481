from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.application.exceptions import UpstreamDeliveryError
from app.application.ports.booking_notifier import BookingNotifierPort

if TYPE_CHECKING:
    from app.application.dto.booking_email import BookingEmailRequest


class BookingEmailFunctionClient(BookingNotifierPort):
    """Posts booking email requests to a deployed send-booking-email function."""

    def __init__(self, function_url: str, anon_key: str | None = None, client: httpx.Client | None = None) -> None:
        self._function_url = function_url
        self._anon_key = anon_key
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_booking_email(self, request: "BookingEmailRequest") -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self._anon_key:
            headers["Authorization"] = f"Bearer {self._anon_key}"

        booking_id = request.booking.id
        try:
            resp = self._client.post(self._function_url, headers=headers, json=request.to_payload())
        except httpx.HTTPError as e:
            self._logger.error("Booking email function unreachable", extra={"booking_id": booking_id, "error": str(e)})
            raise UpstreamDeliveryError(f"Failed to send {request.type.value} email for booking {booking_id}: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Booking email function failed",
                extra={"booking_id": booking_id, "status": resp.status_code, "error": resp.text},
            )
            raise UpstreamDeliveryError(
                f"Failed to send {request.type.value} email for booking {booking_id}: {resp.text}"
            )

        try:
            return resp.json()
        except ValueError:
            return {}
