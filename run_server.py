"""
Entry point for running the relay with uvicorn.

The port comes from the PORT environment variable (default 8080).
"""

import logging


def main() -> None:
    import uvicorn

    from note_relay.settings import app_settings
    from note_relay.uvicorn_filters import ExcludeMetricsFilter

    logging.getLogger("uvicorn.access").addFilter(ExcludeMetricsFilter())

    uvicorn.run(
        "note_relay:app",
        host=app_settings.HOST,
        port=app_settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
