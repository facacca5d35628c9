"""
Message Audit Bot - Utils Package
=================================

Available Utilities:
    ErrorHandler: Categorized error logging with context
    log_http_error: Structured logging of discord.HTTPException
"""

from .error_handler import ErrorContext, ErrorHandler
from .http_errors import log_http_error

__all__ = [
    "ErrorContext",
    "ErrorHandler",
    "log_http_error",
]
