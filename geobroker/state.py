"""
Shared application state.

One object owned by the process and handed to both HTTP apps. Each mutable
value has its own lock: the intake server writes them, the UI-facing commands
read them (and replace the configuration) from other threads.
"""
import logging
import threading
from typing import Optional

import requests

from geobroker.broker.confirmation import DEFAULT_TIMEOUT, ConfirmationBroker
from geobroker.broker.events import PROCESSING_STATE, EventBus
from geobroker.geocoding.base import REQUEST_TIMEOUT
from geobroker.models.config import ProviderConfig
from geobroker.models.record import AddressRecord
from geobroker.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)


class AppState:
    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        config_store: Optional[ConfigStore] = None,
        events: Optional[EventBus] = None,
        session: Optional[requests.Session] = None,
        confirmation_timeout: float = DEFAULT_TIMEOUT,
        provider_timeout: float = REQUEST_TIMEOUT,
    ):
        self.events = events or EventBus()
        self.broker = ConfirmationBroker(self.events, timeout=confirmation_timeout)
        self.config_store = config_store
        self.session = session or requests.Session()
        self.provider_timeout = provider_timeout

        # Serializes /process handling: one in-flight intake request at a time
        self.request_lock = threading.Lock()

        self._config = config or ProviderConfig()
        self._config_lock = threading.Lock()
        # Orders concurrent updates so the file and the active config agree
        self._update_lock = threading.Lock()
        self._latest: Optional[AddressRecord] = None
        self._latest_lock = threading.Lock()
        self._processing = False
        self._processing_lock = threading.Lock()

    def config_snapshot(self) -> ProviderConfig:
        with self._config_lock:
            return self._config

    def replace_config(self, config: ProviderConfig) -> None:
        """Persist first, then swap; a failed save leaves the active config untouched."""
        with self._update_lock:
            if self.config_store is not None:
                self.config_store.save(config)
            with self._config_lock:
                self._config = config
        logger.info(f"Provider configuration updated (provider={config.provider})")

    def latest_record(self) -> Optional[AddressRecord]:
        with self._latest_lock:
            return self._latest

    def set_latest_record(self, record: AddressRecord) -> None:
        with self._latest_lock:
            self._latest = record

    def is_processing(self) -> bool:
        with self._processing_lock:
            return self._processing

    def set_processing(self, value: bool) -> None:
        with self._processing_lock:
            self._processing = value
        self.events.emit(PROCESSING_STATE, value)
