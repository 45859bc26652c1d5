"""
Environment configuration.

Environment Variables:
    CONDUCTOR_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) - default: INFO
    CONDUCTOR_LOG_FORMAT: Log format (json, text) - default: text
    CONDUCTOR_QUERY_URL: Endpoint for the cgql/request effect - default: http://localhost:8080/cgql
    CONDUCTOR_QUERY_TIMEOUT: Request timeout in seconds - default: 30
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .core.errors import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class ConductorConfig:
    log_level: str = "INFO"
    log_format: str = "text"
    query_url: str = "http://localhost:8080/cgql"
    query_timeout: float = 30.0

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "ConductorConfig":
        """
        Read configuration from environment variables.

        Unknown log levels fall back to INFO, unknown formats to text.

        Raises:
            ConfigError: If CONDUCTOR_QUERY_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ

        log_level = env.get("CONDUCTOR_LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            log_level = "INFO"

        log_format = env.get("CONDUCTOR_LOG_FORMAT", "text").lower()
        if log_format not in LOG_FORMATS:
            log_format = "text"

        raw_timeout = env.get("CONDUCTOR_QUERY_TIMEOUT", "30")
        try:
            query_timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"CONDUCTOR_QUERY_TIMEOUT must be a number, got {raw_timeout!r}")
        if query_timeout <= 0:
            raise ConfigError(f"CONDUCTOR_QUERY_TIMEOUT must be positive, got {raw_timeout!r}")

        return ConductorConfig(
            log_level=log_level,
            log_format=log_format,
            query_url=env.get("CONDUCTOR_QUERY_URL", "http://localhost:8080/cgql"),
            query_timeout=query_timeout,
        )
