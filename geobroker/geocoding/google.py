"""
Google Geocoding adapter.

Also exposes ``parse_google_payload`` for any endpoint that answers with a
Google-style body (the custom URL provider relies on it).
"""
from typing import Any, Dict, List, Optional, Tuple

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
    strip_admin_prefix,
)
from geobroker.models.record import STATUS_OK, AddressRecord

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

POI_TYPES = ("premise", "point_of_interest", "establishment")
ROOM_TYPES = ("floor", "room", "subpremise")
WARD_TYPES = ("administrative_area_level_3", "ward")


def _components_by_type(components: List[Dict[str, Any]]) -> Dict[str, str]:
    # First component wins for each type, matching Google's most-specific-first order
    by_type: Dict[str, str] = {}
    for component in components:
        long_name = clean_text(component.get("long_name"))
        if long_name is None:
            continue
        for component_type in string_list(component.get("types")):
            by_type.setdefault(component_type, long_name)
    return by_type


def _pick(by_type: Dict[str, str], types: Tuple[str, ...]) -> Optional[str]:
    for component_type in types:
        if component_type in by_type:
            return by_type[component_type]
    return None


def parse_google_payload(payload: Dict[str, Any], source: str) -> AddressRecord:
    if payload.get("status") == EMPTY_STATUS:
        return AddressRecord.no_results()
    result = first_result(payload)
    if result is None:
        return AddressRecord.no_results()

    address = clean_text(result.get("formatted_address")) or ""
    components = [c for c in result.get("address_components") or [] if isinstance(c, dict)]
    by_type = _components_by_type(components)

    typed_province = by_type.get("administrative_area_level_1")
    typed_district = by_type.get("administrative_area_level_2") or by_type.get("locality")
    typed_ward = _pick(by_type, WARD_TYPES)
    if typed_province or typed_district or typed_ward:
        province = strip_admin_prefix(typed_province)
        district = strip_admin_prefix(typed_district)
        ward = strip_admin_prefix(typed_ward)
    else:
        units = infer_admin_units(None, [c.get("long_name") for c in components])
        province, district, ward = units.province, units.district, units.ward

    poi_name = _pick(by_type, POI_TYPES)
    house_num = by_type.get("street_number")
    st_name = by_type.get("route")
    if house_num is None or st_name is None:
        derived_house, derived_street = derive_house_and_street(poi_name, address)
        house_num = house_num or derived_house
        st_name = st_name or derived_street

    result_types = string_list(result.get("types"))
    latitude, longitude = location_of(result)

    return AddressRecord(
        status=STATUS_OK,
        address=address,
        province=province,
        district=district,
        ward=ward,
        poi_vn=poi_name,
        type=result_types[0] if result_types else None,
        sub_type=result_types[1] if len(result_types) > 1 else None,
        room=_pick(by_type, ROOM_TYPES),
        house_num=house_num,
        buaname=strip_admin_prefix(by_type.get("sublocality_level_1")),
        st_name=st_name,
        sub_com=strip_admin_prefix(by_type.get("sublocality_level_2")),
        phone=clean_text(result.get("formatted_phone_number")),
        web=clean_text(result.get("website")),
        source=source,
        gen_type="auto",
        google_id=clean_text(result.get("place_id")),
        plus_code=global_plus_code(result),
        latitude=latitude,
        longitude=longitude,
    )


class GoogleGeocodingProvider(GeocodingProvider):
    name = "google"

    def __init__(
        self,
        api_key: str,
        language: str = "vi",
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        if not api_key:
            raise ProviderConfigError("Google API key not configured")
        super().__init__(session=session, timeout=timeout)
        self.api_key = api_key
        self.language = language

    def build_request(self, latitude: float, longitude: float) -> Tuple[str, Optional[Dict[str, Any]]]:
        params = {"latlng": f"{latitude},{longitude}", "key": self.api_key}
        if self.language:
            params["language"] = self.language
        return GOOGLE_GEOCODE_URL, params

    def parse_payload(self, payload: Dict[str, Any]) -> AddressRecord:
        return parse_google_payload(payload, self.name)
