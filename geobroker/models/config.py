from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROVIDERS = ("custom", "google", "goong")

LAT_PLACEHOLDER = "{lat}"
LNG_PLACEHOLDERS = ("{lng}", "{long}")


class ProviderConfig(BaseModel):
    """
    Process-wide provider configuration, persisted as JSON.

    Instances are frozen: an update replaces the whole snapshot, so a request
    that already took a snapshot never sees half of a new configuration.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    provider: Literal["custom", "google", "goong"] = "custom"
    custom_url: str = ""
    google_api_key: str = ""
    goong_api_key: str = ""
    language: str = "vi"
    confirmation_enabled: bool = False
    # Only read by the GUI
    opacity: float = Field(default=0.8, ge=0.1, le=1.0)

    @field_validator("custom_url")
    @classmethod
    def check_custom_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            return value
        if LAT_PLACEHOLDER not in value:
            raise ValueError("custom_url must contain the {lat} placeholder")
        if not any(placeholder in value for placeholder in LNG_PLACEHOLDERS):
            raise ValueError("custom_url must contain a {lng} or {long} placeholder")
        return value
