"""
Logging setup for the API server and maintenance CLI.

Modules only ever call ``logging.getLogger(__name__)``; handlers and levels
are configured once here by the process entry point.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
