"""Console logging for actionchat.

Importing this module configures logging once from settings; the CLI
imports it before anything else.
"""

import logging
import sys
from typing import Literal

from actionchat.settings import get_settings

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

# HTTP and provider SDK loggers are chatty at DEBUG/INFO (one line per request)
LIBRARY_LOGGERS = ("httpx", "httpcore", "openai", "langchain_core", "langchain_openai")


def configure_logging(level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None) -> None:
    """Install a single stderr handler and set the package log level.

    Args:
        level: Override for ``settings.log_level``
    """
    log_level = getattr(logging, level or get_settings().log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=logging.WARNING, handlers=[handler], force=True)

    logging.getLogger("actionchat").setLevel(log_level)
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()
