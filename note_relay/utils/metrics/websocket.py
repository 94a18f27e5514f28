"""
Prometheus metrics for WebSocket connection and relay monitoring.
"""

from note_relay.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
)

# WebSocket Connection Metrics
ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of active WebSocket connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total", "Total accepted WebSocket connections"
)

# Relay Metrics
notes_received_total = _get_or_create_counter(
    "notes_received_total", "Total note events received from clients"
)

notes_relayed_total = _get_or_create_counter(
    "notes_relayed_total", "Total note events delivered to peer clients"
)

relay_send_failures_total = _get_or_create_counter(
    "relay_send_failures_total",
    "Total failed note deliveries to peer clients",
)

ws_frames_dropped_total = _get_or_create_counter(
    "ws_frames_dropped_total",
    "Total incoming frames dropped without being relayed",
    ["reason"],  # invalid_frame, unknown_event
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "notes_received_total",
    "notes_relayed_total",
    "relay_send_failures_total",
    "ws_frames_dropped_total",
]
