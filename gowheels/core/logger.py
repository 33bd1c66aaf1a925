import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Chatty libraries only get through at WARNING and above
QUIET_LOGGERS = ("uvicorn.access", "httpx", "hpack")


def loguru_level(record: logging.LogRecord):
    """Loguru level name for a stdlib record, or its number for custom levels."""
    try:
        return logger.level(record.levelname).name
    except ValueError:
        return record.levelno


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records (uvicorn, httpx, supabase) to loguru."""

    def emit(self, record: logging.LogRecord):
        # Skip logging's own frames so loguru reports the real call site
        frame, depth = sys._getframe(6), 6
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(loguru_level(record), record.getMessage())


def setup_logging(level: str = "INFO", log_dir: str = "logs"):
    logger.remove()
    logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT)
    logger.add(
        str(Path(log_dir) / "errors.log"),
        level="ERROR",
        rotation="10 MB",
        retention="1 month",
        compression="zip",
        format=FILE_FORMAT,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["logger", "setup_logging"]
