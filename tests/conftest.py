from __future__ import annotations

import time
from typing import Any

import pytest


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays canned responses and records calls."""

    def __init__(self, *responses: Any, on_get=None) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.on_get = on_get

    def get(self, url: str, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.on_get is not None:
            self.on_get()
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_session():
    def build(*responses: Any, on_get=None) -> FakeSession:
        return FakeSession(*responses, on_get=on_get)

    return build


@pytest.fixture
def json_response():
    def build(payload: Any = None, status_code: int = 200) -> FakeResponse:
        return FakeResponse(status_code=status_code, payload=payload)

    return build


@pytest.fixture
def wait_for_pending():
    def wait(broker, timeout: float = 3.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            pending = broker.pending()
            if pending:
                return pending
            time.sleep(0.01)
        raise AssertionError("no confirmation became pending")

    return wait


@pytest.fixture
def google_payload() -> dict[str, Any]:
    return {
        "status": "OK",
        "results": [
            {
                "formatted_address": "12A Pham Hung, Mỹ Đình 2, Nam Từ Liêm, Hà Nội, Việt Nam",
                "address_components": [
                    {"long_name": "12A", "short_name": "12A", "types": ["street_number"]},
                    {"long_name": "Pham Hung", "short_name": "Pham Hung", "types": ["route"]},
                    {
                        "long_name": "Phường Mỹ Đình 2",
                        "short_name": "Mỹ Đình 2",
                        "types": ["administrative_area_level_3", "political"],
                    },
                    {
                        "long_name": "Quận Nam Từ Liêm",
                        "short_name": "Nam Từ Liêm",
                        "types": ["administrative_area_level_2", "political"],
                    },
                    {
                        "long_name": "Thành phố Hà Nội",
                        "short_name": "Hà Nội",
                        "types": ["administrative_area_level_1", "political"],
                    },
                    {"long_name": "Việt Nam", "short_name": "VN", "types": ["country", "political"]},
                ],
                "geometry": {"location": {"lat": 21.0278, "lng": 105.8342}},
                "place_id": "ChIJ-pham-hung-12a",
                "plus_code": {"compound_code": "2RHM+4M Hà Nội", "global_code": "7PH72RHM+4M"},
                "types": ["street_address"],
            }
        ],
    }


@pytest.fixture
def goong_payload() -> dict[str, Any]:
    return {
        "status": "OK",
        "results": [
            {
                "address_components": [
                    {"long_name": "91", "short_name": "91"},
                    {"long_name": "Trung Kính", "short_name": "Trung Kính"},
                    {"long_name": "Trung Hòa", "short_name": "Trung Hòa"},
                    {"long_name": "Cầu Giấy", "short_name": "Cầu Giấy"},
                    {"long_name": "Hà Nội", "short_name": "Hà Nội"},
                ],
                "formatted_address": "91 Trung Kính, Trung Hòa, Cầu Giấy, Hà Nội",
                "geometry": {"location": {"lat": 21.0137, "lng": 105.7964}},
                "place_id": "goong-place-91",
                "plus_code": {"compound_code": "2Q7W+FH Cầu Giấy", "global_code": "7PH72Q7W+FH"},
                "compound": {"district": "Quận Cầu Giấy", "commune": "Phường Trung Hòa", "province": "Hà Nội"},
                "types": [],
                "name": "91 Trung Kính",
                "address": "Trung Hòa, Cầu Giấy, Hà Nội",
            }
        ],
    }
