"""
Structured logging configuration for conductor.

Provides text or JSON-formatted logs with trace_id support. The dispatcher
uses the event name being dispatched as trace_id so every log line from one
dispatch can be correlated.

Usage:
    from conductor.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="s1/init")
    logger.info("Dispatching event")
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config import ConductorConfig


def setup_logging(config: Optional[ConductorConfig] = None) -> None:
    """
    Configure root logger with structured logging.

    Reads level and format from config (environment when omitted):
    - CONDUCTOR_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - CONDUCTOR_LOG_FORMAT: json, text (default: text)
    """
    config = config or ConductorConfig.from_env()
    level = getattr(logging, config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(TraceIDFilter())

    if config.log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the event name)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Installed on the handler so records from any logger get the field.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
