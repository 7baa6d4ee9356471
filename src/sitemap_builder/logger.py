"""
Centralized logging configuration for sitemap-builder
统一日志配置模块
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "sitemap_builder"

# Package logger, configured on first use
_logger: Optional[logging.Logger] = None


def _configure() -> logging.Logger:
    global _logger

    if _logger is None:
        _logger = logging.getLogger(PACKAGE_LOGGER)
        _logger.setLevel(logging.INFO)

        # Avoid adding handlers multiple times
        if not _logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)

            # Format: [LEVEL] message
            formatter = logging.Formatter("[%(levelname)s] %(message)s")
            console_handler.setFormatter(formatter)

            _logger.addHandler(console_handler)

    return _logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Logger name, usually ``__name__`` of the calling module

    Returns:
        Logger whose records end up on the package console handler
    """
    package_logger = _configure()
    if name == PACKAGE_LOGGER:
        return package_logger
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """
    Set the package log level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               or integer level
    """
    logger = _configure()
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
