"""Logging setup shared by the API, the workers and the scripts."""
import logging
import sys
from config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False

def configure_logging():
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = logging.DEBUG if settings.ENV == "development" else logging.INFO
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level)
    _configured = True

def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    configure_logging()
    return logging.getLogger(name)
