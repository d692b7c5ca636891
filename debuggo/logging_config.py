"""Configure logging for the debuggo application."""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

from loguru import logger

from debuggo.settings import settings

# Third-party namespaces whose chatter never reaches our sinks
NOISY_LOGGERS = ["httpx", "httpcore", "urllib3", "openai", "filelock"]


def _filter_noisy_loggers(record) -> bool:
    for logger_name in NOISY_LOGGERS:
        if record["name"].startswith(logger_name):
            return False

    if (
        "Qdrant client version" in record["message"]
        and "incompatible with server version" in record["message"]
    ):
        return False

    return True


def configure_loguru(
    sink=sys.stderr,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "20 MB",
    retention: str = "1 week",
    format_string: Optional[str] = None,
    serialize: bool = False,
) -> None:
    """
    Configure Loguru logger with given parameters.

    :param sink: Output sink (default: stderr, stdout belongs to the CLI)
    :param level: Log level (default: from settings)
    :param log_file: Optional file path to write logs to
    :param rotation: When to rotate logs (size or time)
    :param retention: How long to keep logs
    :param format_string: Log format string
    :param serialize: Whether to serialize file logs as JSON
    """
    logger.remove()

    if level is None:
        level = settings.log_level.value

    if format_string is None:
        format_string = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

    logger.add(
        sink=sink,
        level=level,
        format=format_string,
        colorize=True,
        backtrace=True,
        diagnose=False,
        filter=_filter_noisy_loggers,
    )

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            sink=log_file,
            level=level,
            format=format_string,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=serialize,
            backtrace=True,
            diagnose=False,
            filter=_filter_noisy_loggers,
        )

    logger.debug(f"Configured Loguru with level: {level}")


class InterceptHandler(logging.Handler):
    """
    Intercepts standard library logging and redirects to loguru.

    qdrant-client and openai log through the standard logging module.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging() -> None:
    """Configures the application logging."""
    for logger_name in NOISY_LOGGERS:
        module_logger = logging.getLogger(logger_name)
        module_logger.setLevel(logging.WARNING)

    level = settings.log_level.value

    log_file = None
    if settings.enable_file_logging:
        logs_dir = settings.logs_dir or "logs"
        date_str = datetime.now().strftime("%Y-%m-%d")
        log_file = os.path.join(logs_dir, f"debuggo_{date_str}.log")

    configure_loguru(
        level=level,
        log_file=log_file,
        serialize=settings.structured_logging,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.WARNING, force=True)

    logger.debug(f"Logging configured with level {level}")
    if log_file:
        logger.info(f"Logging to file: {log_file}")
