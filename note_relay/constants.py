"""
Application-level constants for hardcoded relay behavior.

These values define the wire protocol and the log correlation id length and are not meant
to be changed via environment variables. For configurable values (port,
static directory, log level, etc.), see note_relay/settings.py.
"""

# ============================================================================
# Event Protocol Constants
# ============================================================================

# Name of the only event that is relayed between clients
NOTE_EVENT = "note"

# Envelope keys of a JSON text frame: {"event": <name>, "data": <payload>}
EVENT_KEY = "event"
DATA_KEY = "data"


# ============================================================================
# Log Correlation
# ============================================================================

# Number of characters of the connection id used as log correlation id
CORRELATION_ID_LENGTH = 8
