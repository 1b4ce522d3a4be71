from __future__ import annotations

from typing import cast

from django.conf import settings

from .base import PointSeriesProvider
from .nasa_power import NasaPowerProvider
from .types import ProviderName


def build_registry() -> dict[ProviderName, PointSeriesProvider]:
    """Instantiate supported point series providers."""

    providers: dict[ProviderName, PointSeriesProvider] = {
        "nasa_power": NasaPowerProvider(),
    }
    return providers


def default_provider_name() -> ProviderName:
    configured = getattr(settings, "CLIMATE_PROVIDER_DEFAULT", "nasa_power")
    return cast(ProviderName, configured.lower())


def validate_provider(
    provider: str | None, registry: dict[ProviderName, PointSeriesProvider]
) -> ProviderName:
    name = (provider or default_provider_name()).lower()
    if name not in registry:
        raise ValueError(f"Unsupported climate provider: {name}")
    return cast(ProviderName, name)
