"""
Message Audit Bot - Message Audit Service
=========================================

Turns message delete and edit events into reports.

DESIGN:
    Each event is handled on its own with no state shared between
    events. Steps run one after another:
    1. Materialize partial messages (abort on failure)
    2. Channel eligibility and access gate
    3. Deleter lookup in the audit log (deletes only)
    4. Attachment recovery
    5. Publish

    Optional steps degrade to fallbacks. Publishing is not caught here,
    its failures reach the bot's on_error handler.
"""

from typing import TYPE_CHECKING, Optional

import aiohttp
import discord

from src.core.config import Config
from src.core.logger import logger

from .actor import resolve_deleter
from .attachments import RecoveryResult, recover_attachments
from .constants import (
    BEFORE_EDIT_PREFIX,
    DEFAULT_UPLOAD_LIMIT,
    DELETED_PREFIX,
    MAX_FILES_PER_MESSAGE,
)
from .fields import attachment_urls, author_tag, channel_label, clean_content, clip
from .filters import is_reportable
from .gate import AccessGate
from .report import Report, build_delete_report, build_update_report, detect_changes
from .resolver import ensure_full_message

if TYPE_CHECKING:
    from discord.ext import commands


class MessageAuditService:
    """
    Reports deleted and edited messages to a channel.

    Attributes:
        bot: The running bot, used to look up the audit channel.
        config: Startup configuration.
        gate: Access gate built from the privileged user setting.
    """

    def __init__(
        self,
        bot: "commands.Bot",
        config: Config,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.bot = bot
        self.config = config
        self.gate = AccessGate(config.privileged_user_id)
        self._session = session

    # =========================================================================
    # HTTP Session
    # =========================================================================

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the persistent HTTP session for downloads."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(limit=10, limit_per_host=5)
            self._session = aiohttp.ClientSession(connector=connector)
        return self._session

    async def close(self) -> None:
        """Close HTTP session on shutdown."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # =========================================================================
    # Routing
    # =========================================================================

    def _report_channel(self, message: discord.Message) -> discord.abc.Messageable:
        """Configured audit channel, or the message's own channel."""
        if self.config.audit_channel_id:
            channel = self.bot.get_channel(self.config.audit_channel_id)
            if isinstance(channel, discord.abc.Messageable):
                return channel
            logger.warning("Audit Channel Unavailable", [
                ("Channel ID", str(self.config.audit_channel_id)),
                ("Fallback", "Origin channel"),
            ])
        return message.channel

    def _origin_label(
        self,
        message: discord.Message,
        destination: discord.abc.Messageable,
    ) -> Optional[str]:
        if getattr(destination, "id", None) == message.channel.id:
            return None
        return channel_label(message.channel)

    def _accepts(self, message: discord.Message, event: str) -> bool:
        if not is_reportable(message):
            logger.debug(f"{event} Skipped", [
                ("Reason", "Not a guild text channel"),
                ("Message ID", str(message.id)),
            ])
            return False

        author_id = message.author.id if message.author else None
        if not self.gate.allows(author_id):
            logger.debug(f"{event} Skipped", [
                ("Reason", "Author is not the privileged user"),
                ("Author", author_tag(message.author)),
            ])
            return False

        return True

    def _upload_limit(
        self,
        message: discord.Message,
        destination: discord.abc.Messageable,
    ) -> int:
        """Total bytes the destination accepts in one message."""
        guild = getattr(destination, "guild", None) or message.guild
        limit = getattr(guild, "filesize_limit", None)
        if isinstance(limit, int) and limit > 0:
            return limit
        return DEFAULT_UPLOAD_LIMIT

    async def _recover(
        self,
        message: discord.Message,
        prefix: str,
        destination: discord.abc.Messageable,
    ) -> RecoveryResult:
        if not message.attachments:
            return RecoveryResult()

        upload_limit = self._upload_limit(message, destination)
        max_bytes = upload_limit
        if self.config.attachment_max_bytes:
            max_bytes = min(max_bytes, self.config.attachment_max_bytes)

        session = await self._get_session()
        return await recover_attachments(
            list(message.attachments),
            prefix,
            session,
            max_bytes=max_bytes,
            max_total_bytes=upload_limit,
            max_files=MAX_FILES_PER_MESSAGE,
        )

    async def _publish(
        self,
        channel: discord.abc.Messageable,
        report: Report,
    ) -> discord.Message:
        kwargs = {"allowed_mentions": discord.AllowedMentions.none()}
        if report.files:
            kwargs["files"] = report.files
        return await channel.send(report.render(), **kwargs)

    # =========================================================================
    # Delete
    # =========================================================================

    async def handle_delete(
        self,
        message: discord.Message,
    ) -> Optional[discord.Message]:
        """
        Report a deleted message.

        Returns:
            The published report message, or None when nothing was sent.
        """
        resolved = await ensure_full_message(message)
        if resolved is None:
            return None
        message = resolved

        if not self._accepts(message, "Delete Report"):
            return None

        destination = self._report_channel(message)

        deleter = None
        if message.author is not None:
            deleter = await resolve_deleter(
                message.guild,
                message.author.id,
                message.channel.id,
                limit=self.config.audit_log_lookback,
                window_seconds=self.config.audit_log_window_seconds,
            )

        recovery = await self._recover(message, DELETED_PREFIX, destination)
        report = build_delete_report(
            message,
            deleter,
            recovery,
            channel_label=self._origin_label(message, destination),
            max_content_length=self.config.message_content_max_length,
        )
        sent = await self._publish(destination, report)

        bot_name = self.bot.user.name if self.bot.user else "unknown"
        content = clean_content(message)
        logger.tree("Message Deleted", [
            ("Bot", bot_name),
            ("Message", f"{author_tag(message.author)}: {clip(content, 100) if content else '(no content)'}"),
            ("Deleted By", author_tag(deleter)),
            ("Files", f"{len(recovery.files)} recovered, {len(recovery.warnings)} warnings"),
        ], emoji="🗑️")
        if message.attachments:
            logger.debug("Deleted Attachment URLs", [
                (str(i + 1), url) for i, url in enumerate(attachment_urls(message))
            ])
        return sent

    # =========================================================================
    # Update
    # =========================================================================

    async def handle_update(
        self,
        before: discord.Message,
        after: discord.Message,
    ) -> Optional[discord.Message]:
        """
        Report an edited message.

        Returns:
            The published report message, or None when nothing was sent
            (including edits that changed neither content nor attachments).
        """
        # on_message_edit already delivers full messages from the cache,
        # only PartialMessage references from other callers are fetched here
        resolved = await ensure_full_message(after)
        if resolved is None:
            return None
        after = resolved

        if not self._accepts(after, "Edit Report"):
            return None

        content_changed, attachments_changed = detect_changes(before, after)
        if not (content_changed or attachments_changed):
            logger.debug("Edit Report Skipped", [
                ("Reason", "No content or attachment change"),
                ("Message ID", str(after.id)),
            ])
            return None

        destination = self._report_channel(after)
        recovery = await self._recover(before, BEFORE_EDIT_PREFIX, destination)
        report = build_update_report(
            before,
            after,
            recovery,
            channel_label=self._origin_label(after, destination),
            max_content_length=self.config.message_content_max_length,
        )
        sent = await self._publish(destination, report)

        logger.tree("Message Edited", [
            ("Author", author_tag(after.author)),
            ("Content Changed", str(content_changed)),
            ("Attachments Changed", str(attachments_changed)),
            ("Files", f"{len(recovery.files)} recovered, {len(recovery.warnings)} warnings"),
        ], emoji="✏️")
        return sent


__all__ = ["MessageAuditService"]
