from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.booking import Booking


@dataclass(frozen=True)
class ReminderWindow:
    total_hours: float
    is_within_24_hours: bool
    is_within_1_hour: bool

    @property
    def is_past(self) -> bool:
        return self.total_hours < 0


@dataclass(frozen=True)
class ReminderLabel:
    text: str
    disabled: bool
    variant: str  # "secondary", "destructive", "default", "outline"


@dataclass(frozen=True)
class ReminderWindows:
    """Tolerance band (in hours) used by the batch job for 1-hour reminders."""

    one_hour_min: float = 0.75
    one_hour_max: float = 1.25


@dataclass(frozen=True)
class DueBookings:
    due_24h: list[Booking] = field(default_factory=list)
    due_1h: list[Booking] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class ReminderBatchResult:
    sent_24h: int = 0
    sent_1h: int = 0
    errors: list[str] = field(default_factory=list)

    def as_payload(self) -> dict[str, object]:
        return {"sent24h": self.sent_24h, "sent1h": self.sent_1h, "errors": list(self.errors)}
