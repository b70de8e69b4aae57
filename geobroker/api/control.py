"""
Control API consumed by the GUI process, served on its own loopback port.
Exposes the UI-facing commands and a long-poll event feed.
"""
import json
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, ValidationError

from geobroker.api import commands
from geobroker.broker.events import EventBuffer
from geobroker.models.record import AddressRecord
from geobroker.state import AppState
from geobroker.storage.config_store import ConfigPersistError

MAX_POLL_SECONDS = 60.0

logger = logging.getLogger(__name__)


class ConfirmRequest(BaseModel):
    record: AddressRecord
    request_id: Optional[str] = None


class RejectRequest(BaseModel):
    request_id: Optional[str] = None


def create_control_app(state: AppState, buffer: Optional[EventBuffer] = None) -> FastAPI:
    buffer = buffer or EventBuffer()
    state.events.subscribe(buffer)

    app = FastAPI(
        title="Geocode Request Broker Control",
        description="Commands for the desktop UI",
        version="1.0.0",
    )

    @app.get("/latest")
    def get_latest():
        return {"record": commands.get_latest_data(state)}

    @app.get("/config")
    def get_config():
        return commands.get_api_config(state)

    @app.put("/config")
    def put_config(payload: Dict[str, Any]):
        try:
            config = commands.update_api_config(state, payload)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=json.loads(e.json()))
        except ConfigPersistError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return config.model_dump()

    @app.get("/processing")
    def get_processing():
        return {"processing": commands.get_processing_state(state)}

    @app.get("/pending")
    def get_pending():
        return {"pending": commands.get_pending_confirmations(state)}

    @app.post("/confirm")
    def confirm(body: ConfirmRequest):
        resolved = commands.confirm_result(state, body.record, body.request_id)
        if not resolved:
            logger.info("Confirm received with nothing pending")
        return {"resolved": resolved}

    @app.post("/reject")
    def reject(body: Optional[RejectRequest] = None):
        request_id = body.request_id if body else None
        resolved = commands.reject_result(state, request_id)
        if not resolved:
            logger.info("Reject received with nothing pending")
        return {"resolved": resolved}

    @app.get("/map-urls")
    def get_map_urls(lat: float, lng: float, map_type: Optional[str] = None):
        if map_type is None:
            return commands.map_view_urls(lat, lng)
        try:
            return {map_type: commands.map_view_url(lat, lng, map_type)}
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/events")
    def get_events(
        after: int = Query(default=0, ge=0),
        timeout: float = Query(default=25.0, ge=0.0, le=MAX_POLL_SECONDS),
    ):
        return {"events": buffer.poll(after=after, timeout=timeout)}

    return app
