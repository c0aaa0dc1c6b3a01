import logging
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

from sagepay_server.core.config import settings


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None):
    """
    Configure structured logging for the application.
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_format = (log_format or settings.LOG_FORMAT).lower()

    # Standard library records (httpx, uvicorn) go out as JSON too
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter("%(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(handlers=[handler], level=getattr(logging, level), force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class ContextLogger:
    """
    Logger with context support for tracing gateway calls and callbacks.
    """

    def __init__(self, name: str):
        self.logger = structlog.get_logger(name)

    def with_context(self, **kwargs) -> structlog.BoundLogger:
        """Add context to logger."""
        return self.logger.bind(**kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger instance.
    """
    return ContextLogger(name)
