"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    active_connections: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(request: Request) -> HealthResponse:
    """
    Report that the relay is up and how many clients are connected.

    The relay has no backing services, so it is healthy whenever it can
    answer this request.
    """
    registry = request.app.state.connection_registry
    return HealthResponse(status="healthy", active_connections=len(registry))
