from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> list[str]:
    """Configure logging sinks. Returns a description of each registered sink."""
    logger.remove()

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    descriptions = [f"console (stderr, {level})"]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=level,
            format=FILE_FORMAT,
            rotation="5 MB",
            retention=3,
        )
        descriptions.append(f"file ({log_file}, {level})")

    return descriptions
