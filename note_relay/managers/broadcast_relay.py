import asyncio

from starlette.websockets import WebSocket, WebSocketDisconnect

from note_relay.logging import logger
from note_relay.managers.connection_registry import ConnectionRegistry
from note_relay.schemas.event import EventModel
from note_relay.utils.metrics import (
    notes_relayed_total,
    relay_send_failures_total,
)


class BroadcastRelay:
    """
    Forwards events from one connection to every other open connection.

    Delivery is best effort: no acknowledgment, no retry and no ordering
    across recipients. A recipient that fails to receive is logged,
    unregistered and skipped; the sender never hears about it.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    async def relay(self, sender_id: str, event: EventModel) -> int:
        """
        Sends the event to all registered connections except the sender.

        Sends run concurrently with ``asyncio.gather``; each send is
        wrapped so that one failing recipient cannot affect the others.

        Args:
            sender_id: Connection id of the client that emitted the event.
            event: The received event, forwarded unchanged.

        Returns:
            int: Number of recipients the event was delivered to.
        """
        recipients = self.registry.all_except(sender_id)
        if not recipients:
            return 0

        message = event.to_message()

        async def safe_send(connection_id: str, connection: WebSocket) -> bool:
            try:
                await connection.send_json(message)
                return True
            except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
                # WebSocketDisconnect: Client disconnected
                # ConnectionError: Network errors
                # RuntimeError: WebSocket in invalid state
                logger.warning(
                    f"Failed to relay {event.event} to connection "
                    f"{connection_id}: {e!r}"
                )
            except Exception as e:
                logger.warning(
                    f"Unexpected error relaying {event.event} to connection "
                    f"{connection_id}: {e!r}"
                )

            relay_send_failures_total.inc()
            self.registry.unregister(connection_id)
            return False

        results = await asyncio.gather(
            *[safe_send(key, conn) for key, conn in recipients]
        )
        delivered = sum(results)
        notes_relayed_total.inc(delivered)

        logger.debug(
            f"Relayed {event.event} from {sender_id} to "
            f"{delivered}/{len(recipients)} connections"
        )
        return delivered
