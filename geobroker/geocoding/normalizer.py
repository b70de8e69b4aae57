"""
Address Normalizer
------------------
Pure string cleanup shared by every provider adapter: administrative prefix
stripping, house number / street splitting and administrative unit inference.
Nothing here performs I/O.
"""
import re
import unicodedata
from typing import Iterable, List, Mapping, NamedTuple, Optional, Tuple

# Longest spellings first so "Rural District" wins over "District"
ADMIN_PREFIXES = (
    "Thành phố",
    "Thị trấn",
    "Thị xã",
    "Phường",
    "Huyện",
    "Quận",
    "Tỉnh",
    "Xã",
    "TP.",
    "TP",
    "Rural District",
    "City of",
    "Province",
    "District",
    "Commune",
    "City",
    "Ward",
    "Town",
)

ADMIN_SUFFIXES = (
    "Rural District",
    "Province",
    "District",
    "City",
    "Ward",
)

_PREFIX_RE = re.compile(
    r"^(?:%s)(?:(?<=\.)\s*|\s+)(?=\S)" % "|".join(re.escape(p) for p in ADMIN_PREFIXES),
    re.IGNORECASE,
)
_SUFFIX_RE = re.compile(
    r"(?<=\S)\s+(?:%s)$" % "|".join(re.escape(s) for s in ADMIN_SUFFIXES),
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")

WARD_KEYWORDS = ("phường", "xã", "thị trấn", "ward", "commune")
DISTRICT_KEYWORDS = ("quận", "huyện", "thị xã", "district", "town")
PROVINCE_KEYWORDS = ("tỉnh", "province")
CITY_KEYWORDS = ("thành phố", "tp", "city")


class AdminUnits(NamedTuple):
    province: Optional[str] = None
    district: Optional[str] = None
    ward: Optional[str] = None


def clean_text(value: Optional[str]) -> Optional[str]:
    """NFC-normalize, collapse whitespace and map empty strings to None."""
    if value is None:
        return None
    text = _WHITESPACE_RE.sub(" ", unicodedata.normalize("NFC", str(value))).strip(" ,")
    return text or None


def _strip_once(text: str) -> str:
    stripped = _PREFIX_RE.sub("", text, count=1)
    if stripped == text:
        stripped = _SUFFIX_RE.sub("", text, count=1)
    return stripped.strip()


def strip_admin_prefix(value: Optional[str]) -> Optional[str]:
    """
    Remove locale-specific administrative prefixes such as "Quận" or "City of".

    Stripping repeats until nothing changes, which makes the function
    idempotent. A keyword is only removed when something follows it, so a bare
    "District" is left alone.
    """
    text = clean_text(value)
    if text is None:
        return None
    while True:
        stripped = clean_text(_strip_once(text))
        if not stripped or stripped == text:
            return text
        text = stripped


def first_segment(address: Optional[str]) -> Optional[str]:
    if not address:
        return None
    return clean_text(address.split(",", 1)[0])


def split_house_number(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split "12 Phạm Hùng" into ("12", "Phạm Hùng").

    When the first whitespace token is not all digits the whole text is the
    street. Never raises; (None, None) for empty input.
    """
    cleaned = clean_text(text)
    if cleaned is None:
        return None, None
    tokens = cleaned.split(" ")
    if tokens[0].isdigit():
        street = " ".join(tokens[1:]) or None
        return tokens[0], street
    return None, cleaned


def derive_house_and_street(
    poi_name: Optional[str], formatted_address: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """Apply the split rule to the POI name, then to the first address segment."""
    house_num, street = split_house_number(poi_name)
    if house_num is None:
        segment_house, segment_street = split_house_number(first_segment(formatted_address))
        if segment_house is not None:
            return segment_house, segment_street
        if street is None:
            street = segment_street
    return house_num, street


def _has_keyword(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    for keyword in keywords:
        if lowered == keyword or lowered.endswith(" " + keyword):
            return True
        if lowered.startswith(keyword + " ") or lowered.startswith(keyword + "."):
            return True
    return False


def _from_compound(compound: Optional[Mapping[str, object]]) -> Optional[AdminUnits]:
    if not compound:
        return None
    units = AdminUnits(
        province=strip_admin_prefix(_as_text(compound.get("province"))),
        district=strip_admin_prefix(_as_text(compound.get("district"))),
        ward=strip_admin_prefix(_as_text(compound.get("commune") or compound.get("ward"))),
    )
    if not any(units):
        return None
    return units


def _from_positions(names: List[str]) -> Optional[AdminUnits]:
    if len(names) not in (3, 4):
        return None
    ward, district, province = names[-3:]
    return AdminUnits(
        province=strip_admin_prefix(province),
        district=strip_admin_prefix(district),
        ward=strip_admin_prefix(ward),
    )


def _from_keywords(names: List[str]) -> AdminUnits:
    province = district = ward = None
    cities = []
    for name in names:
        if ward is None and _has_keyword(name, WARD_KEYWORDS):
            ward = name
        elif district is None and _has_keyword(name, DISTRICT_KEYWORDS):
            district = name
        elif province is None and _has_keyword(name, PROVINCE_KEYWORDS):
            province = name
        elif _has_keyword(name, CITY_KEYWORDS):
            cities.append(name)

    # The outermost city is the province-level one, inner ones sit at district level
    if province is None and cities:
        province = cities.pop()
    if district is None and cities:
        district = cities[0]

    return AdminUnits(
        province=strip_admin_prefix(province),
        district=strip_admin_prefix(district),
        ward=strip_admin_prefix(ward),
    )


def _as_text(value: object) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return clean_text(str(value))


def infer_admin_units(
    compound: Optional[Mapping[str, object]], names: Iterable[Optional[str]]
) -> AdminUnits:
    """
    Resolve province / district / ward.

    Order: a structured compound block, then the position of each name in a
    3- or 4-element component list, then keyword matching on the names.
    """
    units = _from_compound(compound)
    if units is not None:
        return units

    cleaned = [name for name in (clean_text(n) for n in names) if name]
    units = _from_positions(cleaned)
    if units is not None:
        return units
    return _from_keywords(cleaned)
