from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.application.ports.booking_notifier import BookingNotifierPort

if TYPE_CHECKING:
    from app.application.dto.booking_email import BookingEmailRequest
    from app.application.use_cases.booking_email import SendBookingEmailUseCase


class InProcessBookingNotifier(BookingNotifierPort):
    """Hands booking email requests straight to the send-booking-email use case in this process."""

    def __init__(self, use_case: "SendBookingEmailUseCase") -> None:
        self._use_case = use_case

    def send_booking_email(self, request: "BookingEmailRequest") -> dict[str, Any]:
        return self._use_case.execute(request)
