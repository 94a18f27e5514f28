# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from note_relay.logging import logger
from note_relay.managers.broadcast_relay import BroadcastRelay
from note_relay.managers.connection_registry import ConnectionRegistry
from note_relay.middlewares.correlation_id import CorrelationIDMiddleware
from note_relay.middlewares.logging_context import LoggingContextMiddleware
from note_relay.routing import collect_subrouters
from note_relay.settings import app_settings
from note_relay.utils.metrics import app_info

__version__ = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown handler.

    On shutdown the registry is emptied; open sockets are closed by the
    server itself.
    """
    logger.info("Application startup initiated")

    app_info.labels(
        version=__version__,
        python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        environment=app_settings.ENVIRONMENT,
    ).set(1)
    logger.info("Initialized Prometheus metrics")

    logger.info(
        f"Relaying note events on {app_settings.WS_PATH}, "
        f"serving static files from {app_settings.STATIC_DIR}"
    )

    yield

    logger.info("Application shutdown initiated")
    registry: ConnectionRegistry = app.state.connection_registry
    if len(registry):
        logger.info(f"Dropping {len(registry)} open connections")
    registry.clear()
    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    The function:
    - creates the connection registry and the broadcast relay and stores
      them on `app.state`, so their lifetime is the lifetime of the app
    - includes the routers collected by `collect_subrouters()`
    - mounts the static client files at "/" (after all other routes, so
      that /health, /metrics and the WebSocket path take precedence)
    - adds the correlation ID and logging context middlewares
    """
    app = FastAPI(
        title="Note relay",
        description="Relays note events between WebSocket clients",
        version=__version__,
        lifespan=lifespan,
    )

    registry = ConnectionRegistry()
    app.state.connection_registry = registry
    app.state.broadcast_relay = BroadcastRelay(registry)

    app.include_router(collect_subrouters())

    if not os.path.isdir(app_settings.STATIC_DIR):
        logger.warning(
            f"Static directory {app_settings.STATIC_DIR} does not exist"
        )
    app.mount(
        "/",
        StaticFiles(
            directory=app_settings.STATIC_DIR, html=True, check_dir=False
        ),
        name="static",
    )

    # Middlewares (execute in REVERSE order of registration)
    # Execution flow: CorrelationIDMiddleware → LoggingContextMiddleware
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
