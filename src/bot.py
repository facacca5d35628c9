"""
Message Audit Bot - Main Bot Class
==================================

Discord client that reports deleted and edited messages.
"""

import sys
from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from src.core.config import Config, get_config
from src.core.logger import logger
from src.services.message_audit import MessageAuditService
from src.utils.error_handler import ErrorHandler


# =============================================================================
# Extensions
# =============================================================================

EVENT_COGS = [
    "src.handlers.message_audit",
]


# =============================================================================
# AuditBot Class
# =============================================================================

class AuditBot(commands.Bot):
    """
    Discord bot hosting the message audit reporter.

    SERVICE INITIALIZATION ORDER:
    1. __init__: config and intents
    2. setup_hook (before on_ready):
       - MessageAuditService creation
       - Event cog loading
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.guild_messages = True
        intents.members = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()
        self.message_audit: Optional[MessageAuditService] = None

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Create services and load event cogs before on_ready."""
        self.message_audit = MessageAuditService(self, self.config)

        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

    async def on_ready(self) -> None:
        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
            ("Audit Channel", str(self.config.audit_channel_id or "Origin channel")),
        ], emoji="🚀")

    # =========================================================================
    # Errors
    # =========================================================================

    async def on_error(self, event_method: str, *args, **kwargs) -> None:
        """Log exceptions escaping event listeners, such as failed report sends."""
        _, error, _ = sys.exc_info()
        if error is None:
            return

        context = {}
        if args and isinstance(args[0], discord.Message):
            context["message"] = args[0]
        ErrorHandler.handle(error, location=f"event.{event_method}", **context)

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Close the download session, then the Discord connection."""
        logger.info("Initiating Graceful Shutdown")

        if self.message_audit:
            await self.message_audit.close()

        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")


__all__ = ["AuditBot", "EVENT_COGS"]
