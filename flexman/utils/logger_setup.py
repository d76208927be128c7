"""
Colored logging setup for FlexMan runs.

Loguru configuration with colored console output and file logging. Call it
once at process start; the engine itself never touches the handlers.
"""

from datetime import datetime, timezone
import os
import sys

from loguru import logger


def setup_logger(
    log_dir: str = "logs",
    level: str = "INFO",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> str:
    """
    Set up colored logging with file and console output.

    Args:
        log_dir: Directory for log files
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation: Log rotation policy (e.g., "50 MB", "1 day")
        retention: Log retention policy (e.g., "30 days", "1 month")
        enable_colors: Whether to enable colored console output

    Returns:
        Path to the main log file
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"flexman_{timestamp}.log")

    # Remove any existing handlers to avoid duplicates
    logger.remove()

    colorize = enable_colors and sys.stdout.isatty()
    if colorize:
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        )
    else:
        console_format = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"

    # Location info is only worth the noise when debugging.
    if level.upper() == "DEBUG":
        console_format = console_format.replace(
            " | {message}", " | {name}:{function}:{line} | {message}"
        ).replace(
            " | <level>{message}</level>",
            " | <cyan>{name}</cyan>:<blue>{function}</blue>:<yellow>{line}</yellow> | <level>{message}</level>",
        )

    logger.add(
        sys.stderr,
        level=level,
        format=console_format,
        colorize=colorize,
        backtrace=True,
        diagnose=level.upper() == "DEBUG",
    )

    # File handler (no colors in file)
    logger.add(
        log_file,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )

    logger.info("[app] Logger initialized, writing to console and {}", log_file)
    logger.debug("[app] Log level: {}, colors: {}", level, colorize)
    return log_file
