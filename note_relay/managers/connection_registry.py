from starlette.websockets import WebSocket

from note_relay.logging import logger


class ConnectionRegistry:
    """
    Registry of open WebSocket connections.

    Maps connection ids to WebSocket connections. A connection is open for
    as long as it is registered; every registered connection is a broadcast
    target. One registry is created per app by the factory
    ``application()`` in ``note_relay/__init__.py`` and lives only in memory.

    All methods are synchronous and are called from the event loop thread,
    so mutation and iteration never interleave.
    """

    def __init__(self) -> None:
        self.connections: dict[str, WebSocket] = {}

    def __len__(self) -> int:
        return len(self.connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self.connections

    def register(self, connection_id: str, websocket: WebSocket) -> None:
        """
        Adds a freshly accepted WebSocket connection.

        Args:
            connection_id: Unique identifier assigned at connect time.
            websocket: The accepted WebSocket connection.
        """
        self.connections[connection_id] = websocket
        logger.debug(
            f"websocket object ({id(websocket)}) added to active connections "
            f"with id {connection_id}"
        )

    def unregister(self, connection_id: str) -> None:
        """
        Removes a connection by id.

        Safe to call more than once for the same connection, e.g. when a
        failed send already removed it before the close event arrived.

        Args:
            connection_id: The id of the connection to remove.
        """
        websocket = self.connections.pop(connection_id, None)
        if websocket is None:
            return

        logger.debug(
            f"websocket object ({id(websocket)}) removed from active connections "
            f"for id {connection_id}"
        )

    def get_connection(self, connection_id: str) -> WebSocket | None:
        """
        Get WebSocket connection by id.

        Returns:
            WebSocket connection if registered, None otherwise.
        """
        return self.connections.get(connection_id)

    def all_except(self, connection_id: str) -> list[tuple[str, WebSocket]]:
        """
        Snapshot of every registered connection other than the given one.

        The returned list is detached from the registry, so connections may
        come and go while a caller is still sending to the snapshot.

        Args:
            connection_id: The id of the connection to leave out.

        Returns:
            List of ``(connection_id, websocket)`` pairs in no particular order.
        """
        return [
            (key, websocket)
            for key, websocket in self.connections.items()
            if key != connection_id
        ]

    def clear(self) -> None:
        """Forget every connection, used on application shutdown."""
        self.connections.clear()
