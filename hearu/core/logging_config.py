import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> list[str]:
    """Configure loguru sinks. Returns a description of each registered sink."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    sinks = [f"console (stderr, {level})"]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level, format=_FILE_FORMAT, rotation="10 MB", retention=3)
        sinks.append(f"file ({log_file}, {level})")

    return sinks
