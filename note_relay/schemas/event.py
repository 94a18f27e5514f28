from typing import Any

from pydantic import BaseModel, ConfigDict


class EventModel(BaseModel):
    """
    Named event carried by a WebSocket text frame.

    Wire format is ``{"event": <name>, "data": <payload>}``. The payload is
    opaque: it is neither validated nor transformed, and a missing payload
    is carried as ``None``.

    Attributes:
        event: Event name, e.g. ``"note"``.
        data: Payload exactly as sent by the client.
    """

    model_config = ConfigDict(frozen=True)

    event: str
    data: Any = None

    def to_message(self) -> dict[str, Any]:
        """Envelope sent to peers."""
        return {"event": self.event, "data": self.data}
