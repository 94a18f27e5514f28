"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the application, the connection
registry and the broadcast relay.
"""

import os
import tempfile
from pathlib import Path

import pytest

# Set environment variables for testing before importing application modules
os.environ.setdefault(
    "STATIC_DIR", str(Path(__file__).resolve().parent.parent / "public")
)
os.environ.setdefault(
    "LOG_FILE_PATH",
    os.path.join(tempfile.gettempdir(), "note_relay_test_errors.log"),
)


@pytest.fixture
def app():
    """
    Provides a freshly built application with an empty registry.

    Returns:
        FastAPI: Application instance.
    """
    from note_relay import application

    return application()


@pytest.fixture
def client(app):
    """
    Provides a test client that runs the application lifespan.

    All WebSocket sessions opened through this client share one event loop.

    Yields:
        TestClient: FastAPI test client instance.
    """
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registry():
    """
    Provides an empty ConnectionRegistry.

    Returns:
        ConnectionRegistry: Registry instance.
    """
    from note_relay.managers.connection_registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def relay(registry):
    """
    Provides a BroadcastRelay bound to the registry fixture.

    Returns:
        BroadcastRelay: Relay instance.
    """
    from note_relay.managers.broadcast_relay import BroadcastRelay

    return BroadcastRelay(registry)


@pytest.fixture
def note_payload():
    """
    Provides the payload of a single key press.

    Returns:
        dict: Note payload.
    """
    return {"key": "C4", "velocity": 90}
