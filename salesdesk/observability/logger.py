"""
Logger configuration.

Configures root logging once per process (API server or worker).

Dependencies: logging (stdlib), salesdesk.configs
System role: Centralized logging configuration
"""

import logging
import sys

from salesdesk.configs.observability import ObservabilitySettings

_NOISY_LOGGERS = ("urllib3", "botocore", "boto3", "httpx", "httpcore", "asyncio")


def configure_logging(settings: ObservabilitySettings | None = None) -> None:
    """
    Configure Python logging with a single stdout handler.

    Args:
        settings: Logging settings; read from the environment when omitted
    """
    settings = settings or ObservabilitySettings()

    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(settings.log_format, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(settings.log_level.upper())
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
