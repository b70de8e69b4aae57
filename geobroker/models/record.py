from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

STATUS_OK = "ok"
STATUS_ERROR = "error"
STATUS_REJECTED = "rejected"

REJECTED_MESSAGE = "User rejected the result"
TIMEOUT_MESSAGE = "Confirmation timed out"


class CoordinatePair(BaseModel):
    """Body of an inbound ``POST /process`` call. Coordinates must be JSON numbers."""

    model_config = ConfigDict(strict=True)

    lat: float
    lng: float


class AddressRecord(BaseModel):
    """
    Canonical address record exchanged between every component and the HTTP boundary.

    ``status`` and ``address`` are always present. Every other field is optional
    and is left out of the wire form when the provider did not supply it, so a
    consumer can read field presence as "the provider gave us this".
    Records are frozen; corrections go through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: str
    address: str = ""

    # Administrative units
    province: Optional[str] = None
    district: Optional[str] = None
    ward: Optional[str] = None

    # Point of interest
    poi_vn: Optional[str] = None
    poi_en: Optional[str] = None
    poi_ex: Optional[str] = None
    type: Optional[str] = None
    sub_type: Optional[str] = None
    poi_st_sd: Optional[str] = None
    brandname: Optional[str] = None

    # Structural
    room: Optional[str] = None
    house_num: Optional[str] = None
    buaname: Optional[str] = None
    st_name: Optional[str] = None
    sub_com: Optional[str] = None

    # Contact
    phone: Optional[str] = None
    fax: Optional[str] = None
    web: Optional[str] = None
    mail: Optional[str] = None

    # Provenance / workflow
    import_: Optional[str] = Field(default=None, alias="import")
    status_detail: Optional[str] = None
    note: Optional[str] = None
    done: Optional[str] = None
    update_: Optional[str] = None
    source: Optional[str] = None
    gen_type: Optional[str] = None
    perform: Optional[str] = None
    dup: Optional[str] = None
    explain: Optional[str] = None
    classify: Optional[str] = None
    dtrend: Optional[str] = None
    google_id: Optional[str] = None
    be_id: Optional[str] = None

    # Geometry
    plus_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def failure(cls, message: str, status_detail: Optional[str] = None) -> "AddressRecord":
        return cls(status=STATUS_ERROR, address=message, status_detail=status_detail)

    @classmethod
    def no_results(cls) -> "AddressRecord":
        # A successful call that matched nothing; not a transport failure
        return cls(status=STATUS_ERROR, status_detail="no_results")

    @classmethod
    def rejected(cls) -> "AddressRecord":
        return cls(status=STATUS_REJECTED, address=REJECTED_MESSAGE)

    @classmethod
    def timed_out(cls) -> "AddressRecord":
        return cls(status=STATUS_ERROR, address=TIMEOUT_MESSAGE, status_detail="timeout")

    @property
    def is_ok(self) -> bool:
        return self.status == STATUS_OK

    def to_wire(self) -> Dict[str, Any]:
        """Plain dict with absent fields omitted, keyed by wire names."""
        return self.model_dump(exclude_none=True, by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True, by_alias=True)
