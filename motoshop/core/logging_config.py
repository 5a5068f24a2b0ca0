"""Logging setup for the ``motoshop`` logger namespace."""

import logging
import sys

log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app_logger = logging.getLogger("motoshop")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(log_formatter)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach the stdout handler to the package logger.

    Modules log through ``logging.getLogger(__name__)`` so their loggers
    ("motoshop.services.reporting_service", ...) inherit the level and
    handler set here. Safe to call once per created app.
    """

    app_logger.setLevel(level.upper())
    if console_handler not in app_logger.handlers:
        app_logger.addHandler(console_handler)
    return app_logger
