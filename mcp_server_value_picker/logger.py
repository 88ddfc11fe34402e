"""Loguru-based logging configuration for the Value Picker MCP Server."""

import functools
import inspect
import logging
import sys
import time
from pathlib import Path

from loguru import logger

from .config import Settings, get_settings


class InterceptHandler(logging.Handler):
    """Forward standard library log records (the mcp SDK, anyio) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that issued the logged message
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(quiet: bool = False, settings: Settings | None = None) -> None:
    """Configure loguru logging based on settings.

    With ``quiet`` set no sink is attached to stdout or stderr. The stdio
    transport owns both streams, and a single stray byte corrupts the
    JSON-RPC framing. File sinks are still honoured when configured.
    """
    settings = settings or get_settings()

    # Remove default handler
    logger.remove()

    # Without a root handler the stdlib last-resort handler would print to stderr.
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.captureWarnings(True)

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level: <8} | "
        "{name}:{function}:{line} | "
        "{message}"
    )
    serialize = settings.log_format == "json"

    if not quiet:
        if serialize:
            logger.add(sys.stderr, format="{message}", serialize=True, level=settings.log_level)
        else:
            logger.add(sys.stderr, format=console_format, level=settings.log_level, colorize=True)

    if not settings.log_file_path:
        return

    log_path = Path(settings.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_path,
        format="{message}" if serialize else file_format,
        serialize=serialize,
        rotation=settings.log_rotation_size,
        retention=f"{settings.log_retention_days} days",
        compression="gz",
        level=settings.log_level,
    )

    # Add error file handler for ERROR and above
    error_log_path = log_path.parent / f"{log_path.stem}_errors{log_path.suffix}"
    logger.add(
        error_log_path,
        format="{message}" if serialize else file_format,
        serialize=serialize,
        rotation=settings.log_rotation_size,
        retention=f"{settings.log_retention_days * 2} days",  # Keep errors longer
        compression="gz",
        level="ERROR",
    )


def get_logger(name: str = None) -> "logger":
    """Get a contextualized logger instance."""
    if name:
        return logger.bind(module=name)
    return logger


def log_performance(func):
    """Decorator to log coroutine performance."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()

        logger.debug(f"Starting {func.__name__}", extra={"function": func.__name__})

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            elapsed_time = time.perf_counter() - start_time
            # The error text stays out of the message: it may contain braces.
            logger.warning(
                f"Failed {func.__name__} after {elapsed_time:.3f}s",
                extra={
                    "function": func.__name__,
                    "elapsed_time": elapsed_time,
                    "error": str(e),
                }
            )
            raise

        elapsed_time = time.perf_counter() - start_time
        logger.success(
            f"Completed {func.__name__} in {elapsed_time:.3f}s",
            extra={"function": func.__name__, "elapsed_time": elapsed_time}
        )
        return result

    return wrapper
