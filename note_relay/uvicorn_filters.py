"""Custom filters for uvicorn access logging."""

import logging

from note_relay.settings import app_settings


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Requests to paths listed in the LOG_EXCLUDED_PATHS setting (by default
    /metrics and /health) will not appear in uvicorn's access logs.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn.access args: (client_addr, method, full_path, http_version, status_code)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            path = str(record.args[2]).split("?", 1)[0]
            return path not in app_settings.LOG_EXCLUDED_PATHS

        message = record.getMessage()
        return not any(
            path in message for path in app_settings.LOG_EXCLUDED_PATHS
        )
