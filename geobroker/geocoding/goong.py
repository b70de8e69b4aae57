"""
Goong (goong.io) reverse geocoding adapter.

Goong answers with a Google-like envelope, but its address components carry
no types. Administrative units come from the ``compound`` block when present,
otherwise from the component order or the component names themselves.
"""
from typing import Any, Dict, Optional, Tuple

import requests

from geobroker.geocoding.base import (
    EMPTY_STATUS,
    REQUEST_TIMEOUT,
    GeocodingProvider,
    first_result,
    global_plus_code,
    location_of,
    string_list,
)
from geobroker.geocoding.errors import ProviderConfigError
from geobroker.geocoding.normalizer import (
    clean_text,
    derive_house_and_street,
    infer_admin_units,
    split_house_number,
)
from geobroker.models.record import STATUS_OK, AddressRecord

GOONG_GEOCODE_URL = "https://rsapi.goong.io/Geocode"


class GoongGeocodingProvider(GeocodingProvider):
    name = "goong"

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        if not api_key:
            raise ProviderConfigError("Goong API key not configured")
        super().__init__(session=session, timeout=timeout)
        self.api_key = api_key

    def build_request(self, latitude: float, longitude: float) -> Tuple[str, Optional[Dict[str, Any]]]:
        return GOONG_GEOCODE_URL, {"latlng": f"{latitude},{longitude}", "api_key": self.api_key}

    def parse_payload(self, payload: Dict[str, Any]) -> AddressRecord:
        if payload.get("status") == EMPTY_STATUS:
            return AddressRecord.no_results()
        result = first_result(payload)
        if result is None:
            return AddressRecord.no_results()

        address = clean_text(result.get("formatted_address")) or ""
        components = [c for c in result.get("address_components") or [] if isinstance(c, dict)]
        compound = result.get("compound") if isinstance(result.get("compound"), dict) else None
        units = infer_admin_units(compound, [c.get("long_name") for c in components])

        name = clean_text(result.get("name"))
        house_num, st_name = derive_house_and_street(name, address)
        # "91 Trung Kính" is an address line, not a point of interest
        poi_name = name if name and split_house_number(name)[0] is None else None

        types = string_list(result.get("types"))
        latitude, longitude = location_of(result)

        return AddressRecord(
            status=STATUS_OK,
            address=address,
            province=units.province,
            district=units.district,
            ward=units.ward,
            poi_vn=poi_name,
            type=types[0] if types else None,
            sub_type=types[1] if len(types) > 1 else None,
            house_num=house_num,
            st_name=st_name,
            source=self.name,
            gen_type="auto",
            google_id=clean_text(result.get("place_id")),
            plus_code=global_plus_code(result),
            latitude=latitude,
            longitude=longitude,
        )
