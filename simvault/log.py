"""
Logging setup for SimVault scripts and simulations.

The package modules only create `logging.getLogger(__name__)` loggers under
the `simvault` namespace. Scripts call `setup_logger` once to attach output
handlers, with the level and optional log file taken from VaultSettings
unless given explicitly.
"""

import logging
import sys

from .config import settings as default_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level):
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logger(name="simvault", level=None, log_file=None, settings=None):
    """
    Configures a logger in the simvault namespace.

    Calling it again for the same logger updates the level without stacking
    handlers. matplotlib's own loggers are held at WARNING so plotting does
    not flood DEBUG runs.

    Args:
        name: Logger name, usually "simvault" or a child of it
        level: Level name or number, defaults to settings.log_level
        log_file: Optional file to copy records to, defaults to settings.log_file
        settings: VaultSettings to read defaults from

    Returns:
        The configured logger
    """
    settings = settings or default_settings
    if level is None:
        level = settings.log_level
    if log_file is None:
        log_file = settings.log_file or None

    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    if getattr(logger, "_simvault_configured", False):
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._simvault_configured = True
    return logger
