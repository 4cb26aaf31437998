"""
Configuration for the EZGIF API facade.

This module defines the action vocabulary accepted by /api/convert, the
fixed upstream constants, and the environment-driven runtime settings.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


SERVICE_NAME = "EZGIF API"

# Upstream website checked by /api/status and used as the base for output links
DEFAULT_TARGET_WEBSITE = "https://ezgif.com"
OUTPUT_BASE_URL = "https://ezgif.com/output"

# The only header sent upstream
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

DEFAULT_HTTP_TIMEOUT = 10.0

PRODUCTION_ENV = "production"

ENDPOINTS = [
    "GET /api/status",
    "POST /api/convert",
]


class ConvertAction(str, Enum):
    """Conversion actions accepted by /api/convert."""
    GIF_TO_MP4 = "gif-to-mp4"
    VIDEO_TO_GIF = "video-to-gif"
    RESIZE = "resize"
    OPTIMIZE = "optimize"
    CROP = "crop"
    REVERSE = "reverse"
    SPEED = "speed"
    ROTATE = "rotate"


# Enum definition order is the order reported back to clients
VALID_ACTIONS: List[str] = [action.value for action in ConvertAction]

CONVERT_EXAMPLE = {
    "action": "gif-to-mp4",
    "url": "https://example.com/image.gif",
    "options": {"quality": 80},
}


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime settings, read once at startup and passed into create_app()."""

    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    target_website: str = DEFAULT_TARGET_WEBSITE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: Optional[str] = None
    log_format: str = "standard"
    log_file: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION_ENV

    @classmethod
    def from_env(cls) -> 'Settings':
        """Create settings from environment variables."""
        return cls(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', '3000')),
            environment=os.getenv('EZGIF_API_ENV', 'development'),
            target_website=os.getenv('EZGIF_API_TARGET_URL', DEFAULT_TARGET_WEBSITE),
            http_timeout=float(os.getenv('EZGIF_API_HTTP_TIMEOUT', str(DEFAULT_HTTP_TIMEOUT))),
            cors_origins=_split_origins(os.getenv('EZGIF_API_CORS_ORIGINS', '*')) or ["*"],
            log_level=os.getenv('EZGIF_API_LOG_LEVEL') or None,
            log_format=os.getenv('EZGIF_API_LOG_FORMAT', 'standard'),
            log_file=os.getenv('EZGIF_API_LOG_FILE') or None,
        )
