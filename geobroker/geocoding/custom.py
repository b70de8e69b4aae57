from typing import Any, Dict, Optional, Tuple

import requests

from geobroker.geocoding.base import REQUEST_TIMEOUT, GeocodingProvider
from geobroker.geocoding.errors import ProviderConfigError
from geobroker.geocoding.google import parse_google_payload
from geobroker.models.record import AddressRecord


def render_url(template: str, latitude: float, longitude: float) -> str:
    """Substitute {lat}, {lng} and its alias {long} verbatim."""
    lat_text, lng_text = str(latitude), str(longitude)
    return template.replace("{lat}", lat_text).replace("{lng}", lng_text).replace("{long}", lng_text)


class CustomUrlProvider(GeocodingProvider):
    """User-supplied endpoint that answers with a Google-style payload."""

    name = "custom"

    def __init__(
        self,
        url_template: str,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        if not url_template:
            raise ProviderConfigError("Custom URL not configured")
        super().__init__(session=session, timeout=timeout)
        self.url_template = url_template

    def build_request(self, latitude: float, longitude: float) -> Tuple[str, Optional[Dict[str, Any]]]:
        return render_url(self.url_template, latitude, longitude), None

    def parse_payload(self, payload: Dict[str, Any]) -> AddressRecord:
        return parse_google_payload(payload, self.name)
