from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Sequence

from app.application.ports.email_sender import EmailSenderPort


@dataclass
class SentEmail:
    to: str
    subject: str
    html: str
    sender_email: str
    sender_name: str
    tags: tuple[str, ...] = ()
    to_name: str | None = None


@dataclass
class MockEmailSender(EmailSenderPort):
    """Records outgoing mail instead of delivering it. Used when no Brevo key is configured in dev."""

    sent: list[SentEmail] = field(default_factory=list)

    def __post_init__(self) -> None:
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
        self.sent.append(
            SentEmail(
                to=to,
                subject=subject,
                html=html,
                sender_email=sender_email,
                sender_name=sender_name,
                tags=tuple(tags),
                to_name=to_name,
            )
        )
        self._logger.info("Mock email send", extra={"recipient": to, "subject": subject})
        return {"messageId": f"<mock-{uuid.uuid4()}>"}
