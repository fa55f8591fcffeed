"""Platform configuration service.

Loads and provides access to instance-specific configuration: the timezone
used for all calendar arithmetic, the platform launch date and the locales
labels are rendered in.
"""

import json
import os
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator

from models.config import settings

DEFAULT_TIMEZONE = "UTC"


class PlatformInfo(BaseModel):
    """Platform identity and lifetime."""

    name: str = "IdeaStats"
    version: str = "1.0.0"
    # Series without a start bound begin here
    created_at: datetime | None = None


class InstanceEntity(BaseModel):
    """Entity being served (city, organization, etc.)."""

    type: str  # city, region, country, organization, community
    name: dict[str, str]  # {"en": "Montreal", "fr": "Montréal"}


class InstanceConfig(BaseModel):
    """Instance-specific configuration."""

    name: dict[str, str]  # {"en": "Ideas for Montreal", "fr": "Idées pour Montréal"}
    entity: InstanceEntity
    location: dict[str, Any] | None = None

    @field_validator("location")
    @classmethod
    def validate_timezone(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        """Reject timezone names unknown to the IANA database."""
        if v and v.get("timezone"):
            try:
                ZoneInfo(v["timezone"])
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {v['timezone']}") from e
        return v


class LocalizationConfig(BaseModel):
    """Localization settings."""

    default_locale: str = "en"
    supported_locales: list[str] = ["en"]


class PlatformConfig(BaseModel):
    """Complete platform configuration."""

    platform: PlatformInfo = PlatformInfo()
    instance: InstanceConfig
    localization: LocalizationConfig = LocalizationConfig()


@lru_cache(maxsize=1)
def load_platform_config() -> PlatformConfig:
    """Load platform configuration from file.

    Returns:
        PlatformConfig: Parsed and validated configuration, or the default
        configuration when the file does not exist.

    Raises:
        ValidationError: If config is invalid.
    """
    config_path = os.getenv("PLATFORM_CONFIG_PATH", settings.PLATFORM_CONFIG_PATH)

    config_file = Path(config_path)

    if not config_file.exists():
        return _get_default_config()

    with open(config_file, encoding="utf-8") as f:
        data = json.load(f)

    return PlatformConfig(**data)


def _get_default_config() -> PlatformConfig:
    """Default configuration for a Montreal instance."""
    return PlatformConfig(
        platform=PlatformInfo(name="IdeaStats", version="1.0.0"),
        instance=InstanceConfig(
            name={"en": "Ideas for Montreal", "fr": "Idées pour Montréal"},
            entity=InstanceEntity(
                type="city",
                name={"en": "Montreal", "fr": "Montréal"},
            ),
            location={
                "display": {"en": "Montreal, Quebec", "fr": "Montréal, Québec"},
                "timezone": "America/Montreal",
            },
        ),
        localization=LocalizationConfig(
            default_locale="fr",
            supported_locales=["fr", "en"],
        ),
    )


def get_config() -> PlatformConfig:
    """Get the current platform configuration."""
    return load_platform_config()


def get_timezone() -> ZoneInfo:
    """Timezone used for bucket boundaries and for reading naked date bounds."""
    location = get_config().instance.location or {}
    return ZoneInfo(location.get("timezone") or DEFAULT_TIMEZONE)


def get_platform_created_at() -> datetime | None:
    """When the platform went live, as an aware UTC datetime (None if unknown)."""
    created_at = get_config().platform.created_at
    if created_at is None:
        return None
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(timezone.utc)


def get_default_locale() -> str:
    """Locale labels fall back to."""
    return get_config().localization.default_locale


def get_supported_locales() -> list[str]:
    """Locales labels can be rendered in."""
    return get_config().localization.supported_locales


def get_instance_name(locale: str = "en") -> str:
    """Get localized instance name."""
    config = get_config()
    return config.instance.name.get(
        locale, config.instance.name.get("en", config.platform.name)
    )


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when configuration changes at runtime.
    """
    load_platform_config.cache_clear()
