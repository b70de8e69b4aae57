"""
Geocoding Module
--------------
Handles reverse geocoding operations to convert geographic coordinates to canonical address records.
Wraps Google Geocoding, Goong and user-supplied custom URL endpoints behind one adapter interface.
"""
from geobroker.geocoding.base import GeocodingProvider
from geobroker.geocoding.custom import CustomUrlProvider
from geobroker.geocoding.errors import (
    ProviderConfigError,
    ProviderError,
    ProviderPayloadError,
    ProviderTransportError,
    ProviderUpstreamStatus,
)
from geobroker.geocoding.factory import build_provider
from geobroker.geocoding.google import GoogleGeocodingProvider
from geobroker.geocoding.goong import GoongGeocodingProvider

__all__ = [
    "GeocodingProvider",
    "GoogleGeocodingProvider",
    "GoongGeocodingProvider",
    "CustomUrlProvider",
    "build_provider",
    "ProviderError",
    "ProviderConfigError",
    "ProviderTransportError",
    "ProviderUpstreamStatus",
    "ProviderPayloadError",
]
