from __future__ import annotations

import pytest

from geobroker.geocoding.normalizer import (
    AdminUnits,
    clean_text,
    derive_house_and_street,
    first_segment,
    infer_admin_units,
    split_house_number,
    strip_admin_prefix,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Thành phố Hà Nội", "Hà Nội"),
        ("Tỉnh Bắc Ninh", "Bắc Ninh"),
        ("Quận Ba Đình", "Ba Đình"),
        ("Huyện Gia Lâm", "Gia Lâm"),
        ("Thị xã Sơn Tây", "Sơn Tây"),
        ("Thị trấn Đông Anh", "Đông Anh"),
        ("Phường Điện Biên", "Điện Biên"),
        ("Xã Bát Tràng", "Bát Tràng"),
        ("TP. Hồ Chí Minh", "Hồ Chí Minh"),
        ("TP.Hồ Chí Minh", "Hồ Chí Minh"),
        ("City of Hanoi", "Hanoi"),
        ("Ba Dinh District", "Ba Dinh"),
        ("Gia Lam Rural District", "Gia Lam"),
        ("Ho Chi Minh City", "Ho Chi Minh"),
        ("Quận 1", "1"),
        ("  Quận   Hoàn   Kiếm ", "Hoàn Kiếm"),
    ],
)
def test_strip_admin_prefix_removes_known_prefixes(raw: str, expected: str) -> None:
    assert strip_admin_prefix(raw) == expected


def test_strip_admin_prefix_keeps_bare_keyword() -> None:
    assert strip_admin_prefix("District") == "District"
    assert strip_admin_prefix("Quận") == "Quận"


def test_strip_admin_prefix_does_not_cut_words_that_start_like_keywords() -> None:
    assert strip_admin_prefix("Cityland Park Hills") == "Cityland Park Hills"
    assert strip_admin_prefix("Townhouse Khu A") == "Townhouse Khu A"


@pytest.mark.parametrize(
    "raw",
    ["Hà Nội", "Thành phố Hà Nội", "Phường Xã Đàn", "Quận 1", "Ho Chi Minh City", "District", " , Quận , Hà"],
)
def test_strip_admin_prefix_is_idempotent(raw: str) -> None:
    once = strip_admin_prefix(raw)
    assert strip_admin_prefix(once) == once


def test_clean_text_maps_blank_to_none() -> None:
    assert clean_text(None) is None
    assert clean_text("   ") is None
    assert clean_text(" a\t b ") == "a b"


def test_split_house_number_rules() -> None:
    assert split_house_number("12 Phạm Hùng") == ("12", "Phạm Hùng")
    assert split_house_number("12A Phạm Hùng") == (None, "12A Phạm Hùng")
    assert split_house_number("Vincom Center") == (None, "Vincom Center")
    assert split_house_number("42") == ("42", None)
    assert split_house_number("") == (None, None)
    assert split_house_number(None) == (None, None)


def test_derive_house_and_street_falls_back_to_first_address_segment() -> None:
    assert derive_house_and_street("Vincom Center", "72 Lê Thánh Tôn, Bến Nghé, Quận 1") == ("72", "Lê Thánh Tôn")
    assert derive_house_and_street(None, "Phạm Hùng, Hà Nội") == (None, "Phạm Hùng")
    assert derive_house_and_street("Vincom Center", "Lê Thánh Tôn, Quận 1") == (None, "Vincom Center")
    assert derive_house_and_street(None, None) == (None, None)


def test_first_segment() -> None:
    assert first_segment("91 Trung Kính, Trung Hòa") == "91 Trung Kính"
    assert first_segment("") is None


def test_infer_admin_units_prefers_compound_block() -> None:
    units = infer_admin_units(
        {"province": "Thành phố Hà Nội", "district": "Quận Cầu Giấy", "commune": "Phường Trung Hòa"},
        ["anything", "else"],
    )

    assert units == AdminUnits(province="Hà Nội", district="Cầu Giấy", ward="Trung Hòa")


def test_infer_admin_units_uses_positions_for_three_and_four_components() -> None:
    three = infer_admin_units(None, ["Phường Trung Hòa", "Quận Cầu Giấy", "Thành phố Hà Nội"])
    four = infer_admin_units(None, ["91 Trung Kính", "Trung Hòa", "Cầu Giấy", "Hà Nội"])

    assert three == AdminUnits(province="Hà Nội", district="Cầu Giấy", ward="Trung Hòa")
    assert four == AdminUnits(province="Hà Nội", district="Cầu Giấy", ward="Trung Hòa")


def test_infer_admin_units_falls_back_to_keywords() -> None:
    units = infer_admin_units(
        {},
        ["91", "Trung Kính", "Phường Trung Hòa", "Quận Cầu Giấy", "Thành phố Hà Nội", "Việt Nam"],
    )

    assert units == AdminUnits(province="Hà Nội", district="Cầu Giấy", ward="Trung Hòa")


def test_infer_admin_units_returns_empty_units_when_nothing_matches() -> None:
    assert infer_admin_units(None, ["a", "b"]) == AdminUnits()
