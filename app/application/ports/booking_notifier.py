from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.application.dto.booking_email import BookingEmailRequest


class BookingNotifierPort(ABC):
    @abstractmethod
    def send_booking_email(self, request: "BookingEmailRequest") -> dict[str, Any]:
        """Deliver a booking email request. Raises UpstreamDeliveryError on failure."""
        raise NotImplementedError
