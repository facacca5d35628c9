"""
Message Audit Bot - Core Package
================================

Configuration and logging.

DESIGN:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
"""

from .config import (
    Config,
    ConfigValidationError,
    get_config,
    load_config,
)

from .logger import logger, TreeLogger


__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "get_config",
    "load_config",
    # Logger
    "logger",
    "TreeLogger",
]
