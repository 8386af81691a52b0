"""Package loggers.

Library modules log below the ``docx_html`` logger, which carries only a
``NullHandler``. Output is configured by the command line entry point, or by
whichever application imports the package.
"""
from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER_NAME = "docx_html"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the package hierarchy for ``name``."""
    if name is None or name == "__main__":
        return logging.getLogger(PACKAGE_LOGGER_NAME)
    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int = logging.INFO) -> None:
    """Write log records to stderr; used by the command line entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
