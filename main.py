"""
Main entrypoint for the geocode request broker.

Usage:
    Run directly (`python main.py`) or through the `geobroker` console script.
    The intake endpoint listens on http://127.0.0.1:31203/process and the control
    API for the desktop UI on http://127.0.0.1:31204. Ports, timeouts and the log
    level come from GEOBROKER_* environment variables or a .env file.
"""
import logging
import os
import sys
import threading
from datetime import datetime

import uvicorn

from geobroker.api.app import create_app
from geobroker.api.control import create_control_app
from geobroker.settings import Settings, load_settings
from geobroker.state import AppState
from geobroker.storage.config_store import ConfigDirectoryError, ConfigStore, get_config_path

logger = logging.getLogger("geobroker")


class BrokerServer(uvicorn.Server):
    """Intake server that releases requests blocked on confirmation as soon as shutdown starts."""

    def __init__(self, config: uvicorn.Config, state: AppState):
        super().__init__(config)
        self.state = state

    def handle_exit(self, sig, frame) -> None:
        # uvicorn waits for open connections before returning from run()
        cancelled = self.state.broker.cancel_all()
        if cancelled:
            logger.info(f"Released {cancelled} requests awaiting confirmation")
        super().handle_exit(sig, frame)


def configure_logging(settings: Settings) -> None:
    handlers = [logging.StreamHandler()]
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        log_filename = os.path.join(settings.LOG_DIR, f'geobroker_{datetime.now().strftime("%Y%m%d")}.log')
        handlers.append(logging.FileHandler(log_filename, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def build_state(settings: Settings) -> AppState:
    """Load the persisted provider configuration; raises ConfigDirectoryError when there is nowhere to keep it."""
    store = ConfigStore(get_config_path(settings.CONFIG_PATH))
    return AppState(
        config=store.load(),
        config_store=store,
        confirmation_timeout=settings.CONFIRMATION_TIMEOUT,
        provider_timeout=settings.PROVIDER_TIMEOUT,
    )


def start_control_server(state: AppState, settings: Settings) -> threading.Thread:
    config = uvicorn.Config(
        create_control_app(state),
        host=settings.HOST,
        port=settings.CONTROL_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="control-server", daemon=True)
    thread.start()
    logger.info(f"Control API listening on http://{settings.HOST}:{settings.CONTROL_PORT}")
    return thread


def main() -> int:
    """
    Start the broker and block until the intake server stops.

    Returns a process exit code: 1 when the configuration directory cannot be
    determined, 0 after a clean shutdown. uvicorn exits the process itself when
    the intake port cannot be bound.
    """
    settings = load_settings()
    configure_logging(settings)

    try:
        state = build_state(settings)
    except ConfigDirectoryError as e:
        logger.error(f"Cannot determine configuration directory: {e}")
        return 1

    if settings.CONTROL_ENABLED:
        start_control_server(state, settings)

    config = uvicorn.Config(
        create_app(state),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server = BrokerServer(config, state)
    logger.info(f"{settings.PROJECT_NAME} broker listening on http://{settings.HOST}:{settings.PORT}")
    server.run()
    return 0


def run() -> None:
    exit_code = main()
    logger.info(f"Exiting with code {exit_code}")
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
