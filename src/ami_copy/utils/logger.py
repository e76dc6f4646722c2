# utils/logger.py
"""Console and rotating-file logging shared by every ami_copy module."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

LOG_DIR = "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Level each logger asked for, keyed by logger name
_requested_levels: Dict[str, str] = {}

# Set by the CLI --verbose flag, wins over the requested levels
_level_override: Optional[str] = None


def _resolve_level(requested: str) -> int:
    return getattr(logging, (_level_override or requested).upper())


def _file_handler(
    log_file: str, enable_rotation: bool, max_bytes: int, backup_count: int
) -> logging.Handler:
    logs_dir = Path(LOG_DIR)
    logs_dir.mkdir(exist_ok=True)
    log_path = logs_dir / log_file
    if enable_rotation:
        return logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    return logging.FileHandler(log_path, encoding="utf-8")


def setup_logger(
    name: str,
    log_file: str,
    level: str = "INFO",
    enable_rotation: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Return the named logger, writing to stdout and to logs/<log_file>.

    Handlers are attached on the first call for a name; later calls only
    update the level.
    """
    logger = logging.getLogger(name)
    _requested_levels[name] = level
    logger.setLevel(_resolve_level(level))

    if logger.handlers:
        return logger

    handlers = [logging.StreamHandler(sys.stdout)]
    file_error = None
    if log_file:
        try:
            handlers.append(_file_handler(log_file, enable_rotation, max_bytes, backup_count))
        except OSError as e:
            file_error = e

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)

    # Handlers are per logger, so the root logger must not repeat messages
    logger.propagate = False

    if file_error is not None:
        logger.warning(
            f"Failed to create log file {LOG_DIR}/{log_file}: {file_error}. Logging to console only."
        )
    return logger


def set_default_level(level: Optional[str]) -> None:
    """Force `level` on every ami_copy logger, including ones already created.

    Passing None restores the level each logger asked for.
    """
    global _level_override
    _level_override = level
    for name, requested in _requested_levels.items():
        logging.getLogger(name).setLevel(_resolve_level(requested))
