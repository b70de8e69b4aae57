from __future__ import annotations

import pytest
import requests

from geobroker.geocoding.errors import (
    ProviderConfigError,
    ProviderPayloadError,
    ProviderTransportError,
    ProviderUpstreamStatus,
)
from geobroker.geocoding.google import GOOGLE_GEOCODE_URL, GoogleGeocodingProvider, parse_google_payload


def build_provider(session) -> GoogleGeocodingProvider:
    return GoogleGeocodingProvider("test-key", language="vi", session=session, timeout=3)


def test_google_provider_maps_structured_components(fake_session, json_response, google_payload) -> None:
    session = fake_session(json_response(google_payload))

    record = build_provider(session).resolve(21.0278, 105.8342)

    assert record.status == "ok"
    assert record.house_num == "12A"
    assert record.st_name == "Pham Hung"
    assert record.province == "Hà Nội"
    assert record.district == "Nam Từ Liêm"
    assert record.ward == "Mỹ Đình 2"
    assert record.google_id == "ChIJ-pham-hung-12a"
    assert record.plus_code == "7PH72RHM+4M"
    assert record.latitude == 21.0278
    assert record.longitude == 105.8342
    assert record.type == "street_address"
    assert record.source == "google"
    assert record.gen_type == "auto"


def test_google_provider_builds_query(fake_session, json_response, google_payload) -> None:
    session = fake_session(json_response(google_payload))

    build_provider(session).resolve(21.0278, 105.8342)

    call = session.calls[0]
    assert call["url"] == GOOGLE_GEOCODE_URL
    assert call["params"] == {"latlng": "21.0278,105.8342", "key": "test-key", "language": "vi"}
    assert call["timeout"] == 3


def test_google_provider_omits_fields_the_payload_lacks(fake_session, json_response, google_payload) -> None:
    record = build_provider(fake_session(json_response(google_payload))).resolve(21.0278, 105.8342)

    wire = record.to_wire()
    for absent in ("fax", "mail", "phone", "web", "room", "poi_vn", "sub_type", "be_id"):
        assert absent not in wire
    assert None not in wire.values()


def test_google_provider_maps_http_error(fake_session, json_response) -> None:
    session = fake_session(json_response({"error": "boom"}, status_code=500))

    with pytest.raises(ProviderTransportError) as exc_info:
        build_provider(session).resolve(21.0, 105.0)

    assert exc_info.value.status_code == 500


def test_google_provider_maps_network_error(fake_session) -> None:
    session = fake_session(requests.ConnectionError("connection refused"))

    with pytest.raises(ProviderTransportError) as exc_info:
        build_provider(session).resolve(21.0, 105.0)

    assert exc_info.value.status_code is None


def test_google_provider_maps_upstream_status(fake_session, json_response) -> None:
    session = fake_session(json_response({"status": "REQUEST_DENIED", "error_message": "bad key", "results": []}))

    with pytest.raises(ProviderUpstreamStatus) as exc_info:
        build_provider(session).resolve(21.0, 105.0)

    assert exc_info.value.code == "REQUEST_DENIED"
    assert "bad key" in str(exc_info.value)


def test_google_provider_rejects_non_json_body(fake_session, json_response) -> None:
    with pytest.raises(ProviderPayloadError):
        build_provider(fake_session(json_response(None))).resolve(21.0, 105.0)


def test_google_provider_zero_results_is_an_empty_record(fake_session, json_response) -> None:
    session = fake_session(json_response({"status": "ZERO_RESULTS", "results": []}))

    record = build_provider(session).resolve(21.0, 105.0)

    assert record.to_wire() == {"status": "error", "address": "", "status_detail": "no_results"}


def test_google_provider_requires_api_key() -> None:
    with pytest.raises(ProviderConfigError):
        GoogleGeocodingProvider("")


def test_parse_google_payload_is_deterministic(google_payload) -> None:
    first = parse_google_payload(google_payload, "google")
    second = parse_google_payload(google_payload, "google")

    assert first.to_json() == second.to_json()


def test_parse_google_payload_derives_house_number_from_address() -> None:
    payload = {
        "status": "OK",
        "results": [
            {
                "formatted_address": "72 Phạm Hùng, Mễ Trì, Nam Từ Liêm, Hà Nội",
                "address_components": [
                    {"long_name": "Keangnam Landmark", "types": ["premise"]},
                    {"long_name": "Hà Nội", "types": ["administrative_area_level_1"]},
                ],
                "formatted_phone_number": "024 3333 3333",
                "website": "https://keangnam.example",
                "types": ["premise", "establishment"],
            }
        ],
    }

    record = parse_google_payload(payload, "google")

    assert record.poi_vn == "Keangnam Landmark"
    assert record.house_num == "72"
    assert record.st_name == "Phạm Hùng"
    assert record.phone == "024 3333 3333"
    assert record.web == "https://keangnam.example"
    assert record.sub_type == "establishment"
    assert record.latitude is None


def test_parse_google_payload_infers_units_from_untyped_components() -> None:
    payload = {
        "results": [
            {
                "formatted_address": "Trung Hòa, Cầu Giấy, Hà Nội",
                "address_components": [
                    {"long_name": "Phường Trung Hòa"},
                    {"long_name": "Quận Cầu Giấy"},
                    {"long_name": "Thành phố Hà Nội"},
                ],
            }
        ]
    }

    record = parse_google_payload(payload, "custom")

    assert (record.province, record.district, record.ward) == ("Hà Nội", "Cầu Giấy", "Trung Hòa")
    assert record.st_name == "Trung Hòa"
    assert record.house_num is None


def test_parse_google_payload_reads_string_types(google_payload) -> None:
    result = google_payload["results"][0]
    result["types"] = "street_address"
    result["address_components"][4]["types"] = "administrative_area_level_1"

    record = parse_google_payload(google_payload, "custom")

    assert record.type == "street_address"
    assert record.sub_type is None
    assert record.province == "Hà Nội"
    assert record.district == "Nam Từ Liêm"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda result: result.update(geometry="x"),
        lambda result: result.update(geometry={"location": [21.0, 105.0]}),
    ],
)
def test_parse_google_payload_rejects_malformed_geometry(google_payload, mutate) -> None:
    mutate(google_payload["results"][0])

    with pytest.raises(ProviderPayloadError):
        parse_google_payload(google_payload, "custom")


def test_google_provider_rejects_non_object_result(fake_session, json_response) -> None:
    session = fake_session(json_response({"status": "OK", "results": ["12A Pham Hung"]}))

    with pytest.raises(ProviderPayloadError):
        build_provider(session).resolve(21.0, 105.0)
