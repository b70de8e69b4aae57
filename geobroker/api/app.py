import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from geobroker.broker.confirmation import Outcome
from geobroker.broker.events import RESULT_UPDATED, SHOW_ERROR
from geobroker.geocoding.errors import ProviderError, ProviderUpstreamStatus
from geobroker.geocoding.factory import build_provider
from geobroker.models.config import ProviderConfig
from geobroker.models.record import AddressRecord, CoordinatePair
from geobroker.state import AppState

INVALID_ROUTE = "Invalid route"
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

logger = logging.getLogger(__name__)


def serialize_record(record: AddressRecord) -> str:
    try:
        return record.to_json()
    except Exception as e:
        logger.error(f"Error serializing response: {e}")
        return json.dumps({"status": "error", "address": f"Serialization error: {e}"})


def resolve_record(state: AppState, config: ProviderConfig, coords: CoordinatePair) -> AddressRecord:
    """Call the configured provider; every provider failure becomes an error record."""
    try:
        provider = build_provider(config, session=state.session, timeout=state.provider_timeout)
        logger.info(f"Resolving ({coords.lat}, {coords.lng}) with provider {provider.name}")
        record = provider.resolve(coords.lat, coords.lng)
    except ProviderUpstreamStatus as e:
        logger.error(f"Error calling API: {e}")
        state.events.emit(SHOW_ERROR, f"API Error: {e}")
        return AddressRecord(status=e.code, address=f"API Error: {e}", source=config.provider)
    except ProviderError as e:
        logger.error(f"Error calling API: {e}")
        state.events.emit(SHOW_ERROR, f"API Error: {e}")
        return AddressRecord.failure(f"API Error: {e}")

    if not record.is_ok:
        logger.info(f"{provider.name} found no address for ({coords.lat}, {coords.lng})")
    state.set_latest_record(record)
    state.events.emit(RESULT_UPDATED, record.to_wire())
    return record


def process_coordinates(state: AppState, coords: CoordinatePair) -> AddressRecord:
    """
    Run one intake request to completion.

    Received -> ProviderCall -> DirectReturn | AwaitingConfirmation. The
    configuration is read once up front and the processing flag is always
    cleared, whatever happens in between.
    """
    with state.request_lock:
        state.set_processing(True)
        try:
            config = state.config_snapshot()
            record = resolve_record(state, config, coords)
            if not config.confirmation_enabled:
                return record

            handle = state.broker.submit(record)
            resolution = handle.wait()
            if resolution.outcome is Outcome.CONFIRMED:
                state.set_latest_record(resolution.record)
                state.events.emit(RESULT_UPDATED, resolution.record.to_wire())
            return resolution.record
        except Exception as e:
            logger.error(f"Unexpected error processing ({coords.lat}, {coords.lng}): {e}", exc_info=True)
            return AddressRecord.failure(f"Internal error: {e}")
        finally:
            state.set_processing(False)


def create_app(state: Optional[AppState] = None) -> FastAPI:
    state = state or AppState()
    app = FastAPI(
        title="Geocode Request Broker",
        description="Loopback intake for reverse geocoding requests",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.broker_state = state

    @app.post("/process")
    async def process(request: Request):
        logger.info("Received request from Addin!")
        try:
            body = await request.body()
        except Exception as e:
            logger.error(f"Error reading request body: {e}")
            return PlainTextResponse(f"Error reading body: {e}")
        logger.debug(f"Raw data = {body!r}")

        try:
            coords = CoordinatePair.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Error parsing JSON: {e}")
            return PlainTextResponse(f"Error parsing JSON: {e}")
        logger.info(f"Lat = {coords.lat}, Lon = {coords.lng}")

        record = await run_in_threadpool(process_coordinates, state, coords)
        return Response(content=serialize_record(record), media_type="application/json")

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def invalid_route(path: str):
        return PlainTextResponse(INVALID_ROUTE)

    return app
