"""
CORS origin whitelist
"""
import logging
from typing import List

from maintenance_desk.config import Settings

logger = logging.getLogger(__name__)


def get_cors_origins(config: Settings) -> List[str]:
    """
    Origins allowed to call the API.

    Localhost origins are dropped in production.
    """
    origins = list(config.cors_origins)
    if config.environment == "production":
        origins = [origin for origin in origins if "localhost" not in origin and "127.0.0.1" not in origin]
    logger.info(f"CORS origins: {origins}")
    return origins
