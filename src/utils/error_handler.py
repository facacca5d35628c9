"""
Message Audit Bot - Error Handler
=================================

Categorized error logging with context.

Features:
- Error categorization (Discord, network, general)
- Discord message context capture
- Recovery suggestions in the log line
"""

import traceback
from datetime import datetime
from typing import Any, Dict

import aiohttp
import discord

from src.core.logger import logger


class ErrorContext:
    """Captures and formats detailed error context."""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (message, etc.)
        """
        context = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "additional_context": kwargs,
        }

        msg = kwargs.get("message")
        if isinstance(msg, discord.Message):
            context["discord_context"] = {
                "guild": msg.guild.name if msg.guild else "DM",
                "channel": getattr(msg.channel, "name", str(msg.channel)),
                "author": str(msg.author),
                "author_id": msg.author.id if msg.author else None,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints."""

    ERROR_CATEGORIES = {
        "discord": (discord.DiscordException,),
        "network": (aiohttp.ClientError, ConnectionError, TimeoutError, OSError),
    }

    SUGGESTIONS = (
        (discord.Forbidden, "Check bot permissions (Send Messages, Attach Files, View Audit Log)"),
        (discord.NotFound, "Resource not found - check channel IDs"),
        (discord.HTTPException, "Discord API issue - report was not delivered"),
        (aiohttp.ClientError, "Network issue while talking to Discord or the CDN"),
        (TimeoutError, "Request timed out"),
    )

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: Exception) -> str:
        for error_type, suggestion in cls.SUGGESTIONS:
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> None:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error stops the bot
            **context: Additional context
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:200]),
            ("Recovery", suggestion),
        ]
        if "discord_context" in full_context:
            dc = full_context["discord_context"]
            details.append(("Discord", f"Guild={dc['guild']}, Channel={dc['channel']}, User={dc['author']}"))

        if critical:
            logger.error("💥 CRITICAL ERROR", details)
            logger.info(f"Traceback:\n{full_context['traceback']}")
        else:
            logger.error("Unhandled Error", details)


__all__ = ["ErrorContext", "ErrorHandler"]
