"""Settings the static piano client needs to reach the relay."""

from fastapi import APIRouter
from pydantic import BaseModel

from note_relay.constants import NOTE_EVENT
from note_relay.settings import app_settings

router = APIRouter()


class ClientConfigResponse(BaseModel):
    ws_path: str
    note_event: str


@router.get(
    "/client-config",
    response_model=ClientConfigResponse,
    summary="Client configuration",
    tags=["client"],
)
async def client_config() -> ClientConfigResponse:
    return ClientConfigResponse(ws_path=app_settings.WS_PATH, note_event=NOTE_EVENT)
