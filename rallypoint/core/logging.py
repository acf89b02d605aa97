import sys
from typing import Optional
from loguru import logger
import os

from .config import AppConfig


def setup_logging(config: Optional[AppConfig] = None):
    """
    Configures Loguru logger.
    """
    config = config or AppConfig()
    settings = config.logging

    # Remove default handler
    logger.remove()

    # Console Handler
    level = settings.level or ("DEBUG" if config.general.debug_mode else "INFO")
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")

    # File Handler
    if settings.file_logging:
        if not os.path.exists(settings.log_dir):
            os.makedirs(settings.log_dir)

        logger.add(os.path.join(settings.log_dir, "rallypoint_{time}.log"), rotation=settings.rotation, retention=settings.retention, level="DEBUG")

    logger.info("Logging initialized.")
