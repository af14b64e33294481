from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence


class EmailSenderPort(ABC):
    @abstractmethod
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
        """Send one HTML email. Raises UpstreamDeliveryError on failure."""
        raise NotImplementedError
