import json
import uuid
from typing import Any

from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from note_relay.constants import CORRELATION_ID_LENGTH, DATA_KEY, EVENT_KEY
from note_relay.exceptions import InvalidEventError
from note_relay.logging import clear_log_context, logger, set_log_context
from note_relay.managers.broadcast_relay import BroadcastRelay
from note_relay.managers.connection_registry import ConnectionRegistry
from note_relay.schemas.event import EventModel
from note_relay.utils.metrics import (
    ws_connections_active,
    ws_connections_total,
    ws_frames_dropped_total,
)


class RelayWebSocketEndpoint(WebSocketEndpoint):
    """
    WebSocket endpoint that registers every client with the relay.

    Owns the connection lifecycle: a connection id is assigned and the
    connection registered once the handshake is accepted, each text frame
    is decoded into an ``EventModel`` and handed to ``on_receive``, and the
    connection is unregistered when the client goes away for any reason.

    The registry and relay are looked up on ``app.state``, where the
    application factory stores them.
    """

    encoding = None  # frames are decoded into events by decode()

    @property
    def registry(self) -> ConnectionRegistry:
        return self.scope["app"].state.connection_registry

    @property
    def relay(self) -> BroadcastRelay:
        return self.scope["app"].state.broadcast_relay

    async def dispatch(self) -> None:
        """
        Runs the receive loop of one connection.

        Frames that are not event envelopes are dropped without closing the
        connection. Any other error closes the connection with code 1011
        and is re-raised; the connection is unregistered in every case.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        await self.on_connect(websocket)

        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    try:
                        event = await self.decode(websocket, message)
                    except InvalidEventError as exc:
                        logger.debug(f"Dropped frame: {exc}")
                        ws_frames_dropped_total.labels(
                            reason="invalid_frame"
                        ).inc()
                        continue
                    await self.on_receive(websocket, event)
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or status.WS_1000_NORMAL_CLOSURE
                    )
                    break
        except Exception as exc:
            close_code = status.WS_1011_INTERNAL_ERROR
            raise exc
        finally:
            await self.on_disconnect(websocket, close_code)

    async def decode(
        self, websocket: WebSocket, message: dict[str, Any]
    ) -> EventModel:
        """
        Decode an incoming frame into an event.

        Only the envelope is checked: the frame must be a JSON object with a
        string ``event``. The ``data`` value is taken as is.

        Args:
            websocket: WebSocket connection instance
            message: Raw message dict from WebSocket

        Returns:
            EventModel: The decoded event.

        Raises:
            InvalidEventError: If the frame is not an event envelope.
        """
        text = message.get("text")
        if text is None:
            raise InvalidEventError("binary frames are not supported")

        try:
            envelope = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidEventError(f"frame is not valid JSON: {exc}") from exc

        if not isinstance(envelope, dict) or not isinstance(
            envelope.get(EVENT_KEY), str
        ):
            raise InvalidEventError("frame has no event name")

        return EventModel(event=envelope[EVENT_KEY], data=envelope.get(DATA_KEY))

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accepts the connection and adds it to the registry.
        """
        await websocket.accept()

        self.connection_id = str(uuid.uuid4())
        set_log_context(
            connection_id=self.connection_id,
            correlation_id=self.connection_id[:CORRELATION_ID_LENGTH],
            endpoint=websocket.url.path,
        )

        self.registry.register(self.connection_id, websocket)
        ws_connections_total.inc()
        ws_connections_active.inc()
        logger.info(
            f"Client connected (connection_id: {self.connection_id}, "
            f"active: {len(self.registry)})"
        )

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Removes the connection from the registry.
        """
        self.registry.unregister(self.connection_id)
        ws_connections_active.dec()
        logger.info(
            f"Client {self.connection_id} disconnected with code {close_code}"
        )
        clear_log_context()
