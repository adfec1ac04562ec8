"""
Logging setup for LocaleSync
"""
import logging
import sys

from localesync.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """
    Configure root logger once.
    Safe to call multiple times - later calls only adjust the level.
    """
    global _configured
    
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    
    if _configured:
        return
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    
    # SQL echo is too noisy outside of debugging
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    
    _configured = True
