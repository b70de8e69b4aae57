"""
Handles persistence of the provider configuration.
The configuration lives in a JSON document under the platform's per-user
configuration directory; a missing or unreadable file falls back to defaults.
"""
import json
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from geobroker.models.config import ProviderConfig

APP_DIR_NAME = "GeocoderApp"
CONFIG_FILE_NAME = "config.json"

logger = logging.getLogger(__name__)


class ConfigDirectoryError(Exception):
    """No per-user configuration directory can be determined."""


class ConfigPersistError(Exception):
    """Writing the configuration file failed."""


def config_base_dir(platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Path:
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform.startswith("win"):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise ConfigDirectoryError("APPDATA is not set")
        return Path(appdata)

    home = environ.get("HOME")
    if platform == "darwin":
        if not home:
            raise ConfigDirectoryError("HOME is not set")
        return Path(home) / "Library" / "Application Support"

    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    if not home:
        raise ConfigDirectoryError("Neither XDG_CONFIG_HOME nor HOME is set")
    return Path(home) / ".config"


def get_config_path(
    override: Optional[str] = None,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    if override:
        return Path(override).expanduser()
    return config_base_dir(platform, environ) / APP_DIR_NAME / CONFIG_FILE_NAME


class ConfigStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> ProviderConfig:
        if not self.path.exists():
            logger.info(f"No configuration at {self.path}, using defaults")
            return ProviderConfig()
        try:
            content = self.path.read_text(encoding="utf-8")
            config = ProviderConfig.model_validate(json.loads(content))
        except OSError as e:
            logger.warning(f"Error reading config file: {e}, using default")
            return ProviderConfig()
        except (ValueError, ValidationError) as e:
            logger.warning(f"Error parsing config file: {e}, using default")
            return ProviderConfig()
        logger.info(f"Configuration loaded from: {self.path}")
        return config

    def save(self, config: ProviderConfig) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".json.tmp")
            tmp_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            raise ConfigPersistError(f"Failed to save config: {e}") from e
        logger.info(f"Configuration saved to: {self.path}")
