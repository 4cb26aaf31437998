"""
Logging setup for the EZGIF API facade.

configure_logging() attaches handlers to the "ezgif_api" logger from the
application Settings; every module logs through a child of that logger.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

SERVICE_LOGGER = "ezgif_api"

LOG_FORMATS = {
    "standard": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    "dev": '%(asctime)s [%(levelname)8s] %(name)s:%(lineno)d - %(message)s',
    "json": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def resolve_level(level_name: Optional[str]) -> int:
    """Level for a name like "debug" or "WARN"; INFO for unknown names.

    Without a name the level is INFO, or WARNING while pytest is loaded.
    """
    if not level_name:
        return logging.WARNING if "pytest" in sys.modules else logging.INFO

    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def resolve_format(format_name: Optional[str]) -> str:
    name = (format_name or "standard").lower()
    if name == "development":
        name = "dev"
    return LOG_FORMATS.get(name, LOG_FORMATS["standard"])


def configure_logging(settings) -> logging.Logger:
    """Replace the service logger's handlers according to settings."""
    service_logger = logging.getLogger(SERVICE_LOGGER)
    level = resolve_level(settings.log_level)
    formatter = logging.Formatter(resolve_format(settings.log_format))

    for handler in service_logger.handlers[:]:
        service_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    service_logger.addHandler(console_handler)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setFormatter(formatter)
        service_logger.addHandler(file_handler)

    service_logger.setLevel(level)
    return service_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the service hierarchy; module names outside it are nested."""
    if name == SERVICE_LOGGER or name.startswith(f"{SERVICE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{SERVICE_LOGGER}.{name}")
