from __future__ import annotations

from typing import Any, Mapping, Sequence


def missing_fields(payload: Mapping[str, Any], required: Sequence[str]) -> list[str]:
    """Return required keys that are absent or empty, in declaration order."""
    return [name for name in required if not payload.get(name)]


def format_pydantic_error(error: Exception) -> str:
    errors = getattr(error, "errors", None)
    if not callable(errors):
        return str(error)
    parts = []
    for item in errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts) or str(error)
