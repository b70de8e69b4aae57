"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines the canonical address record returned to callers, the provider
configuration snapshot and the inbound coordinate pair.
"""
from geobroker.models.config import PROVIDERS, ProviderConfig
from geobroker.models.record import AddressRecord, CoordinatePair

__all__ = ["AddressRecord", "CoordinatePair", "ProviderConfig", "PROVIDERS"]
