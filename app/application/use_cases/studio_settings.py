from __future__ import annotations

import logging
from typing import Any

from app.application.exceptions import StoreFetchError
from app.application.ports.data_store import DataStorePort
from app.domain.entities.studio import AdminEmailConfig, LocationConfig, StudioConfig

STUDIO_SETTINGS_TABLE = "studio_settings"


class StudioSettingsService:
    def __init__(self, store: DataStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def get_studio_config(self) -> StudioConfig | None:
        """Studio contact details from the settings row, or None when unavailable."""
        row = self._load_row()
        if not row:
            return None
        defaults = StudioConfig()
        return StudioConfig(
            studio_name=row.get("studio_name") or defaults.studio_name,
            studio_phone=row.get("studio_phone") or defaults.studio_phone,
            studio_email=row.get("studio_email") or defaults.studio_email,
            website_url=row.get("website_url") or defaults.website_url,
        )

    def get_location_config(self) -> LocationConfig:
        row = self._load_row() or {}
        raw = row.get("location_config")
        if not isinstance(raw, dict):
            self._logger.warning("No location config found, using defaults")
            return LocationConfig()

        defaults = LocationConfig()
        return LocationConfig(
            include_in_confirmation=bool(raw.get("includeInConfirmation", defaults.include_in_confirmation)),
            delivery_method=raw.get("deliveryMethod") or defaults.delivery_method,
            full_address=raw.get("fullAddress") or "",
            display_address=raw.get("displayAddress") or defaults.display_address,
            google_maps_link=raw.get("googleMapsLink") or "",
            parking_instructions=raw.get("parkingInstructions") or "",
            access_instructions=raw.get("accessInstructions") or "",
        )

    def get_active_admin_emails(self) -> list[AdminEmailConfig]:
        row = self._load_row() or {}
        configs: list[AdminEmailConfig] = []
        for raw in row.get("admin_email_configs") or []:
            if not isinstance(raw, dict) or not raw.get("email"):
                continue
            config = AdminEmailConfig(
                id=str(raw["id"]) if raw.get("id") is not None else None,
                email=str(raw["email"]),
                name=raw.get("name") or "Admin",
                is_active=bool(raw.get("isActive", True)),
                is_primary=bool(raw.get("isPrimary", False)),
            )
            if config.is_active:
                configs.append(config)
        return configs

    def _load_row(self) -> dict[str, Any] | None:
        try:
            rows = self._store.select(STUDIO_SETTINGS_TABLE, limit=1)
        except StoreFetchError as e:
            self._logger.error("Error fetching studio settings", extra={"error": str(e)})
            return None
        return rows[0] if rows else None
