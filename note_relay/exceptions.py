"""
Custom exception classes for the application.
"""


class InvalidEventError(Exception):
    """
    Incoming frame is not an event envelope.

    Raised when a WebSocket frame is not a JSON object carrying an
    ``event`` name. The payload itself is never validated.
    """

    pass
