"""Centralized logging configuration."""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = " | ".join(
    (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level:<8}</level>",
        "<cyan>{name}:{function}:{line}</cyan>",
        "{message}",
    )
)


def configure_logging(level: str = "INFO") -> None:
    # Replace the default handler so output is not duplicated
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper())
