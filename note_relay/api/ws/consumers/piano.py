from fastapi import APIRouter

from note_relay.api.ws.websocket import RelayWebSocketEndpoint
from note_relay.constants import NOTE_EVENT
from note_relay.logging import logger
from note_relay.schemas.event import EventModel
from note_relay.settings import app_settings
from note_relay.utils.metrics import (
    notes_received_total,
    ws_frames_dropped_total,
)

router = APIRouter()


@router.websocket_route(app_settings.WS_PATH)
class Piano(RelayWebSocketEndpoint):
    """
    WebSocket endpoint of the shared piano.

    Every ``note`` event a client emits is passed on to all other
    connected clients. Other events are ignored.
    """

    async def on_receive(self, websocket, data: EventModel) -> None:
        if data.event != NOTE_EVENT:
            logger.debug(f"Ignoring unknown event {data.event!r}")
            ws_frames_dropped_total.labels(reason="unknown_event").inc()
            return

        notes_received_total.inc()
        await self.relay.relay(self.connection_id, data)
