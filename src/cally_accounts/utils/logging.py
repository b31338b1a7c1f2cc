"""Loguru setup driven by the application configuration."""

import sys
from typing import TYPE_CHECKING, Optional

from loguru import logger

if TYPE_CHECKING:
    from cally_accounts.config import AppConfig

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
DEBUG_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(config: "AppConfig", log_level: Optional[str] = None) -> None:
    """Install the stderr sink and, if configured, the rotating file sink.

    Args:
        config: Supplies ``log_level``, ``log_file``, ``log_rotation`` and
            ``log_retention``.
        log_level: Level that wins over ``config.log_level``, e.g. from the
            ``--log-level`` flag.
    """
    level = (log_level or config.log_level).upper()
    logger.remove()

    # Source locations only help when debugging.
    logger.add(
        sys.stderr,
        format=DEBUG_CONSOLE_FORMAT if level == "DEBUG" else CONSOLE_FORMAT,
        level=level,
        colorize=sys.stderr.isatty(),
    )

    if config.log_file:
        logger.add(
            config.log_file,
            format=FILE_FORMAT,
            level=level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="zip",
        )
        logger.debug("Writing logs to {}", config.log_file)


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(name=name)
