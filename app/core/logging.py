"""Loguru setup."""
import sys

from loguru import logger

from app.core.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Replace loguru's default sink with a stderr sink at the configured level."""
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}",
        backtrace=settings.debug,
        diagnose=False,
    )
