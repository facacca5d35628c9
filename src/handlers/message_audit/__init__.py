"""
Message Audit Bot - Message Audit Events Package
================================================

Structure:
    - cog.py: MessageAuditEvents cog with the delete/edit listeners
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import MessageAuditEvents

if TYPE_CHECKING:
    from src.bot import AuditBot

__all__ = ["MessageAuditEvents"]


async def setup(bot: "AuditBot") -> None:
    """Load the MessageAuditEvents cog."""
    await bot.add_cog(MessageAuditEvents(bot, bot.message_audit))
    logger.tree("Message Audit Events Loaded", [
        ("Events", "on_message_delete, on_message_edit"),
        ("Gate", "Privileged user only" if bot.message_audit.gate.enabled else "All users"),
    ], emoji="💬")
