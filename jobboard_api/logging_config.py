import logging

from .config import settings


def configure_logging():
    """Configure basic structured logging for the application.

    Uses a simple format including level, module, and message. Safe to call
    more than once; an already configured root logger is left alone.
    """
    if logging.getLogger().handlers:
        # Already configured (avoid duplicate handlers in reload / dev)
        return
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=fmt)


def get_logger(name: str):
    configure_logging()
    return logging.getLogger(name)
