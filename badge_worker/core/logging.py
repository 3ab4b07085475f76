"""
Process-wide logging setup.

Gunicorn captures stdout/stderr, so a single stream handler is enough.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers (gunicorn, pytest).
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("badge_worker").setLevel(level.upper())
