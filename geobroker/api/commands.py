"""
UI-facing commands.

The GUI process calls these (in-process, or through the control app) to read
the latest record, manage the provider configuration and answer pending
confirmations.
"""
from typing import Any, Dict, List, Mapping, Optional, Union

from geobroker.broker.confirmation import pending_as_dicts
from geobroker.models.config import ProviderConfig
from geobroker.models.record import AddressRecord
from geobroker.state import AppState

MAP_TYPES = ("google", "openstreetmap")


def get_latest_data(state: AppState) -> Optional[Dict[str, Any]]:
    record = state.latest_record()
    return record.to_wire() if record is not None else None


def get_api_config(state: AppState) -> Dict[str, Any]:
    return state.config_snapshot().model_dump()


def update_api_config(state: AppState, new_config: Union[ProviderConfig, Mapping[str, Any]]) -> ProviderConfig:
    """Validate, persist and activate a new configuration.

    Raises pydantic.ValidationError for invalid input and ConfigPersistError
    when the file cannot be written.
    """
    config = new_config if isinstance(new_config, ProviderConfig) else ProviderConfig.model_validate(dict(new_config))
    state.replace_config(config)
    return config


def get_processing_state(state: AppState) -> bool:
    return state.is_processing()


def get_pending_confirmations(state: AppState) -> List[Dict[str, Any]]:
    return pending_as_dicts(state.broker.pending())


def confirm_result(
    state: AppState,
    record: Union[AddressRecord, Mapping[str, Any]],
    request_id: Optional[str] = None,
) -> bool:
    if not isinstance(record, AddressRecord):
        record = AddressRecord.model_validate(dict(record))
    return state.broker.confirm(record, request_id)


def reject_result(state: AppState, request_id: Optional[str] = None) -> bool:
    return state.broker.reject(request_id)


def map_view_url(lat: float, lng: float, map_type: str) -> str:
    if map_type == "google":
        return f"https://www.google.com/maps?q={lat},{lng}"
    if map_type == "openstreetmap":
        return f"https://www.openstreetmap.org/?mlat={lat}&mlon={lng}&zoom=17"
    raise ValueError("Invalid map type")


def map_view_urls(lat: float, lng: float) -> Dict[str, str]:
    return {map_type: map_view_url(lat, lng, map_type) for map_type in MAP_TYPES}
