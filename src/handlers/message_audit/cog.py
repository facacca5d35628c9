"""
Message Audit Bot - Cog
=======================

Binds Discord message delete and edit events to the audit service.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from src.services.message_audit import MessageAuditService

if TYPE_CHECKING:
    from src.bot import AuditBot


class MessageAuditEvents(commands.Cog):
    """Message delete/edit listeners."""

    def __init__(self, bot: "AuditBot", service: MessageAuditService) -> None:
        self.bot = bot
        self.service = service

    def _is_own(self, message: discord.Message) -> bool:
        return self.bot.user is not None and message.author == self.bot.user

    @commands.Cog.listener()
    async def on_message_delete(self, message: discord.Message) -> None:
        """Report a deleted message."""
        if self._is_own(message):
            return
        await self.service.handle_delete(message)

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        """Report an edited message."""
        if self._is_own(after):
            return
        await self.service.handle_update(before, after)


__all__ = ["MessageAuditEvents"]
