"""
Logging Setup

loguru sinks for the server. Console output always goes to stderr because
the stdio transport owns stdout; an optional rotating file sink can be
enabled from configuration.
"""

import sys
from loguru import logger
from typing import Optional

# loguru has no "warn" level name
_LEVEL_ALIASES = {
    "warn": "WARNING",
}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
DEFAULT_LOG_FILE = "host_mcp_jenkins.log"


def normalize_level(level: str) -> str:
    """Map a CLI/env log level name onto a loguru level name."""
    return _LEVEL_ALIASES.get(level.lower(), level.upper())


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    enable_file_logging: bool = False,
    log_file_path: str = DEFAULT_LOG_FILE,
    rotation: str = "10 MB",
    retention: str = "30 days"
) -> None:
    """
    Replace loguru's default sink with the server's sinks.

    Args:
        level: debug, info, warn/warning, error or critical (any case)
        format_string: Console format (None for CONSOLE_FORMAT)
        enable_file_logging: Also write to log_file_path
        log_file_path: File sink path
        rotation: File rotation policy (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "30 days")

    Example:
        >>> setup_logging(level="warn")
        >>> logger.warning("Jenkins answered 503, retrying")
    """
    level = normalize_level(level)

    logger.remove()

    # diagnose=False everywhere: frame locals may hold the API token
    logger.add(
        sys.stderr,
        format=format_string or CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if enable_file_logging:
        logger.add(
            log_file_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )
        logger.info(f"Writing logs to {log_file_path}")

    logger.debug(f"Log level set to {level}")


def configure_logging_from_config(config_obj) -> None:
    """Apply the logging.* settings of a Config."""
    setup_logging(
        level=config_obj.log_level,
        enable_file_logging=config_obj.get('logging.enable_file', default=False, expected_type=bool),
        log_file_path=config_obj.get('logging.file_path', default=DEFAULT_LOG_FILE, expected_type=str),
        rotation=config_obj.get('logging.rotation', default='10 MB', expected_type=str),
        retention=config_obj.get('logging.retention', default='30 days', expected_type=str),
    )
