from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings; provider settings live in the persisted ProviderConfig."""

    model_config = SettingsConfigDict(env_prefix="GEOBROKER_", env_file=".env", extra="ignore")

    PROJECT_NAME: str = "GeocoderApp"
    HOST: str = "127.0.0.1"
    PORT: int = 31203
    CONTROL_PORT: int = 31204
    CONTROL_ENABLED: bool = True
    CONFIRMATION_TIMEOUT: float = 30.0
    PROVIDER_TIMEOUT: float = 10.0
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    CONFIG_PATH: Optional[str] = None


def load_settings() -> Settings:
    return Settings()
