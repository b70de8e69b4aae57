from typing import Optional

import requests

from geobroker.geocoding.base import REQUEST_TIMEOUT, GeocodingProvider
from geobroker.geocoding.custom import CustomUrlProvider
from geobroker.geocoding.errors import ProviderConfigError
from geobroker.geocoding.google import GoogleGeocodingProvider
from geobroker.geocoding.goong import GoongGeocodingProvider
from geobroker.models.config import ProviderConfig


def build_provider(
    config: ProviderConfig,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> GeocodingProvider:
    """Pick the adapter for one request from a configuration snapshot."""
    if config.provider == "google":
        return GoogleGeocodingProvider(config.google_api_key, language=config.language, session=session, timeout=timeout)
    if config.provider == "goong":
        return GoongGeocodingProvider(config.goong_api_key, session=session, timeout=timeout)
    if config.provider == "custom":
        return CustomUrlProvider(config.custom_url, session=session, timeout=timeout)
    raise ProviderConfigError(f"Unknown provider: {config.provider}")
