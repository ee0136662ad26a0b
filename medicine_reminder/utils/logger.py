"""Logging configuration and utilities for the medicine reminder."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logger(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    logs_dir: Optional[Path] = None,
) -> None:
    """Configure loguru logger with console and optional file output.

    Sets up structured logging with:
    - Console output with colors and proper formatting
    - Optional file output with daily rotation and 30-day retention
    - Exception tracebacks in logs

    Args:
        console_level: Log level for console output (default: INFO)
        file_level: Log level for file output (default: DEBUG)
        logs_dir: Directory for log files, no file output when None
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=console_level,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            logs_dir / "reminder_{time:YYYY-MM-DD}.log",
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} | "
                "{message}"
            ),
            level=file_level,
            rotation="00:00",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=True,
            enqueue=True,
        )
        logger.debug(f"Logs directory: {logs_dir}")

    logger.info("Logger configured successfully")
    logger.debug(f"Console log level: {console_level}")


__all__ = ["setup_logger", "logger"]
