"""
Prometheus metrics definitions and utilities.

All metrics are re-exported here so callers import from one place:

    from note_relay.utils.metrics import ws_connections_active
"""

from note_relay.utils.metrics._helpers import _get_or_create_gauge
from note_relay.utils.metrics.websocket import (
    notes_received_total,
    notes_relayed_total,
    relay_send_failures_total,
    ws_connections_active,
    ws_connections_total,
    ws_frames_dropped_total,
)

# Application info, set once on startup
app_info = _get_or_create_gauge(
    "app_info",
    "Application information",
    ["version", "python_version", "environment"],
)

__all__ = [
    "app_info",
    "notes_received_total",
    "notes_relayed_total",
    "relay_send_failures_total",
    "ws_connections_active",
    "ws_connections_total",
    "ws_frames_dropped_total",
]
