from __future__ import annotations

from dataclasses import dataclass
from typing import Any

ENGLISH = "en"
SPANISH = "es"
SUPPORTED_LANGUAGES = (ENGLISH, SPANISH)


@dataclass(frozen=True)
class Translation:
    key: str
    english_text: str
    category: str = "general"
    spanish_text: str | None = None  # None or "" means not yet translated
    is_active: bool = True
    context: str | None = None
    id: str | None = None

    @staticmethod
    def from_row(row: dict[str, Any]) -> "Translation":
        return Translation(
            id=str(row["id"]) if row.get("id") is not None else None,
            key=str(row.get("key") or ""),
            category=str(row.get("category") or "general"),
            english_text=str(row.get("english_text") or ""),
            spanish_text=row.get("spanish_text") or None,
            context=row.get("context") or None,
            is_active=bool(row.get("is_active", True)),
        )
