"""
Logging configuration for Shadow Sight.

Console output plus a size-capped rotating log file next to the player's
progression data.
"""

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = Path.home() / ".shadowsight" / "shadowsight.log"


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    console_output: bool = True,
) -> None:
    """
    Configure the root logger for the Shadow Sight client.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path. If None, logs to ~/.shadowsight/shadowsight.log
        console_output: Whether to also log to the console
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_path = Path(log_file) if log_file is not None else DEFAULT_LOG_FILE
    try:
        root_logger.addHandler(_file_handler(log_path, numeric_level, formatter))
    except OSError as e:
        # Console-only logging is acceptable; the game must still start.
        if console_output:
            logging.warning(f"Could not create log file {log_path}: {e}")


def _file_handler(
    log_path: Path, level: int, formatter: logging.Formatter
) -> logging.Handler:
    """Create a rotating file handler, making the parent directory if needed."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=2 * 1024 * 1024,  # 2MB
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
