"""Provider-agnostic reverse geocoding interface."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests

from geobroker.geocoding.errors import (
    ProviderPayloadError,
    ProviderTransportError,
    ProviderUpstreamStatus,
)
from geobroker.models.record import AddressRecord

USER_AGENT = "GeocoderApp/1.0"
REQUEST_TIMEOUT = 10

OK_STATUS = "OK"
EMPTY_STATUS = "ZERO_RESULTS"

logger = logging.getLogger(__name__)


class GeocodingProvider(ABC):
    """
    One upstream geocoding service.

    ``resolve`` performs the HTTP call and hands the decoded payload to
    ``parse_payload``, which is pure so the same payload always produces the
    same record.
    """

    name = ""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = REQUEST_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    @abstractmethod
    def build_request(self, latitude: float, longitude: float) -> Tuple[str, Optional[Dict[str, Any]]]:
        """Return the URL and query parameters for one lookup."""

    @abstractmethod
    def parse_payload(self, payload: Dict[str, Any]) -> AddressRecord:
        """Convert a decoded, successful payload into an AddressRecord."""

    def resolve(self, latitude: float, longitude: float) -> AddressRecord:
        url, params = self.build_request(latitude, longitude)
        payload = self._get_json(url, params)
        self.check_status(payload)
        return self.parse_payload(payload)

    def check_status(self, payload: Dict[str, Any]) -> None:
        status = payload.get("status")
        if status is None or status in (OK_STATUS, EMPTY_STATUS):
            return
        detail = payload.get("error_message") or payload.get("message") or ""
        logger.warning(f"{self.name} returned status {status} {detail}".rstrip())
        raise ProviderUpstreamStatus(str(status), str(detail))

    def _get_json(self, url: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Network error calling {self.name}: {e}")
            raise ProviderTransportError(None, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"{self.name} HTTP error ({response.status_code})")
            raise ProviderTransportError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {self.name}: {e}")
            raise ProviderPayloadError(f"Invalid JSON from {self.name}: {e}") from e

        if not isinstance(payload, dict):
            raise ProviderPayloadError(f"Unexpected payload from {self.name}: {type(payload).__name__}")
        logger.debug(f"{self.name} response: {payload}")
        return payload


def first_result(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    results = payload.get("results")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        raise ProviderPayloadError(f"Unexpected result entry: {type(first).__name__}")
    return first


def string_list(value: Any) -> List[str]:
    """Read a JSON value that should be an array of strings; a bare string counts as one item."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def location_of(result: Dict[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    geometry = result.get("geometry")
    if geometry is None:
        return None, None
    if not isinstance(geometry, dict):
        raise ProviderPayloadError(f"Unexpected geometry: {type(geometry).__name__}")
    location = geometry.get("location")
    if location is None:
        return None, None
    if not isinstance(location, dict):
        raise ProviderPayloadError(f"Unexpected location: {type(location).__name__}")
    lat, lng = location.get("lat"), location.get("lng")
    try:
        return (float(lat) if lat is not None else None, float(lng) if lng is not None else None)
    except (TypeError, ValueError):
        return None, None


def global_plus_code(result: Dict[str, Any]) -> Optional[str]:
    plus_code = result.get("plus_code")
    if isinstance(plus_code, dict):
        return plus_code.get("global_code") or None
    return None
