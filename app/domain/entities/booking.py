from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

CONFIRMED = "confirmed"
COMPLETED = "completed"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class AddOnSelection:
    name: str
    price: float = 0.0


@dataclass(frozen=True)
class Booking:
    id: str
    appointment_date: date
    appointment_time: str  # 12-hour clock, e.g. "2:00 PM"
    status: str = CONFIRMED  # "confirmed", "completed", "cancelled"
    service_name: str = ""
    service_price: float = 0.0
    client_name: str = ""
    client_email: str = ""
    client_phone: str = ""
    confirmation_number: str = ""
    notes: str | None = None
    selected_add_ons: tuple[AddOnSelection, ...] = field(default_factory=tuple)
    add_ons_total: float = 0.0

    @property
    def is_confirmed(self) -> bool:
        return self.status == CONFIRMED

    @property
    def total_cost(self) -> float:
        return float(self.service_price or 0) + float(self.add_ons_total or 0)

    @staticmethod
    def from_row(row: dict[str, Any]) -> "Booking":
        raw_date = row.get("appointment_date")
        if isinstance(raw_date, date):
            appointment_date = raw_date
        else:
            appointment_date = date.fromisoformat(str(raw_date)[:10])

        add_ons = tuple(
            AddOnSelection(name=str(item.get("name") or ""), price=float(item.get("price") or 0))
            for item in (row.get("selected_add_ons") or [])
            if isinstance(item, dict)
        )
        return Booking(
            id=str(row.get("id") or ""),
            appointment_date=appointment_date,
            appointment_time=str(row.get("appointment_time") or ""),
            status=str(row.get("status") or CONFIRMED),
            service_name=row.get("service_name") or "",
            service_price=float(row.get("service_price") or 0),
            client_name=row.get("client_name") or "",
            client_email=row.get("client_email") or "",
            client_phone=row.get("client_phone") or "",
            confirmation_number=row.get("confirmation_number") or "",
            notes=row.get("notes") or None,
            selected_add_ons=add_ons,
            add_ons_total=float(row.get("add_ons_total") or 0),
        )
