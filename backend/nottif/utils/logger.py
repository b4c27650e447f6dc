"""
Logging configuration using loguru.
"""
import sys
from typing import Optional
from loguru import logger
from nottif.config import Settings, settings as default_settings
from nottif.middleware.request_id import request_id_filter


def setup_logger(settings: Optional[Settings] = None):
    """Configure loguru sinks: console always, rotating file when log_dir is set."""
    settings = settings or default_settings

    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <dim>{extra[request_id]}</dim> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level="DEBUG" if settings.debug else "INFO",
        colorize=True,
        filter=request_id_filter,
    )

    if settings.log_dir:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.log_dir / "nottif.log",
            rotation="10 MB",
            retention="7 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} - {message}",
            filter=request_id_filter,
        )

    logger.info("Logger initialized")
