from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StudioConfig:
    studio_name: str = "Francis Lozano Studio"
    studio_phone: str = "(+1 737-378-5755"
    studio_email: str = "francislozanostudio@gmail.com"
    website_url: str = "https://francislozanostudio.com"


@dataclass(frozen=True)
class LocationConfig:
    include_in_confirmation: bool = True
    delivery_method: str = "inline"  # "inline", "separate", "both"
    full_address: str = ""
    display_address: str = "Private Studio, Nashville TN"
    google_maps_link: str = ""
    parking_instructions: str = "Free parking available on-site"
    access_instructions: str = "Please ring doorbell upon arrival"


@dataclass(frozen=True)
class AdminEmailConfig:
    email: str
    name: str = "Admin"
    is_active: bool = True
    is_primary: bool = False
    id: str | None = None
