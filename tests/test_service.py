"""
Message Audit Bot - Service Tests
=================================

End-to-end tests of MessageAuditService with mocked Discord objects.
"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import discord

from src.core.config import Config
from src.services.message_audit import MessageAuditService
from src.services.message_audit.gate import AccessGate
from tests.helpers import (
    AsyncIter,
    FakeResponse,
    RaisingAsyncIter,
    http_error,
    make_attachment,
    make_audit_entry,
    make_message,
    make_session,
)


def sent_text(channel) -> str:
    return channel.send.await_args.args[0]


def sent_files(channel) -> list:
    return channel.send.await_args.kwargs.get("files", [])


@pytest.fixture
def service(mock_bot, config, session):
    return MessageAuditService(mock_bot, config, session=session)


# =============================================================================
# Delete Path
# =============================================================================

class TestHandleDelete:
    """Tests for MessageAuditService.handle_delete."""

    @pytest.mark.asyncio
    async def test_content_report_sent_to_origin_channel(self, service, guild_message, mock_text_channel, author):
        await service.handle_delete(guild_message)

        mock_text_channel.send.assert_awaited_once()
        assert sent_text(mock_text_channel).split("\n") == [
            "🗑️ Message deleted.",
            "Deleted by: unknown",
            f"Author: <@{author.id}> (alice)",
            "Content: hello",
        ]
        assert "files" not in mock_text_channel.send.await_args.kwargs

    @pytest.mark.asyncio
    async def test_mentions_are_not_pinged(self, service, guild_message, mock_text_channel):
        await service.handle_delete(guild_message)

        allowed = mock_text_channel.send.await_args.kwargs["allowed_mentions"]
        assert allowed.users is False
        assert allowed.everyone is False

    @pytest.mark.asyncio
    async def test_deleter_from_audit_log(self, service, guild_message, mock_guild, mock_text_channel, moderator):
        entry = make_audit_entry(
            guild_message.author.id,
            mock_text_channel.id,
            discord.utils.utcnow() - timedelta(seconds=1),
            moderator,
        )
        mock_guild.audit_logs.return_value = AsyncIter([entry])

        await service.handle_delete(guild_message)

        assert f"Deleted by: <@{moderator.id}> (modbob)" in sent_text(mock_text_channel)

    @pytest.mark.asyncio
    async def test_audit_log_failure_still_reports(self, service, guild_message, mock_guild, mock_text_channel):
        mock_guild.audit_logs.return_value = RaisingAsyncIter(http_error(discord.Forbidden, 403))

        await service.handle_delete(guild_message)

        assert "Deleted by: unknown" in sent_text(mock_text_channel)

    @pytest.mark.asyncio
    async def test_attachments_recovered_with_deleted_prefix(
        self, mock_bot, config, author, mock_text_channel, mock_guild
    ):
        first = make_attachment(1, "a.png")
        second = make_attachment(2, "b.png")
        session = make_session({
            first.url: FakeResponse(200, b"a"),
            second.url: FakeResponse(200, b"b"),
        })
        service = MessageAuditService(mock_bot, config, session=session)
        message = make_message("", attachments=[first, second], author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        assert [f.filename for f in sent_files(mock_text_channel)] == ["deleted-a.png", "deleted-b.png"]
        assert "Content attachments: a.png, b.png" in sent_text(mock_text_channel)

    @pytest.mark.asyncio
    async def test_ephemeral_attachment_warns_without_file(
        self, service, author, mock_text_channel, mock_guild, session
    ):
        att = make_attachment(1, "voice.ogg", ephemeral=True)
        message = make_message("", attachments=[att], author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        assert sent_files(mock_text_channel) == []
        assert sent_text(mock_text_channel).split("\n")[-1].startswith("⚠️ voice.ogg")
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_dm_message_ignored(self, service, author, mock_guild):
        dm = MagicMock(spec=discord.DMChannel)
        dm.send = AsyncMock()
        message = make_message("hi", author=author, channel=dm, guild=None)

        assert await service.handle_delete(message) is None
        dm.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_fetch_failure_aborts(self, service, mock_text_channel):
        partial = MagicMock(spec=discord.PartialMessage)
        partial.id = 1
        partial.fetch = AsyncMock(side_effect=http_error(discord.NotFound, 404))

        assert await service.handle_delete(partial) is None
        mock_text_channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_message_fetched_then_reported(self, service, guild_message, mock_text_channel):
        partial = MagicMock(spec=discord.PartialMessage)
        partial.id = guild_message.id
        partial.fetch = AsyncMock(return_value=guild_message)

        await service.handle_delete(partial)

        assert "Content: hello" in sent_text(mock_text_channel)

    @pytest.mark.asyncio
    async def test_publish_failure_propagates(self, service, guild_message, mock_text_channel):
        mock_text_channel.send.side_effect = http_error(discord.Forbidden, 403)

        with pytest.raises(discord.Forbidden):
            await service.handle_delete(guild_message)

    @pytest.mark.asyncio
    async def test_designated_audit_channel(
        self, mock_bot, session, guild_message, mock_text_channel, mock_audit_channel
    ):
        mock_bot.get_channel.return_value = mock_audit_channel
        config = Config(discord_token="t", audit_channel_id=mock_audit_channel.id)
        service = MessageAuditService(mock_bot, config, session=session)

        await service.handle_delete(guild_message)

        mock_text_channel.send.assert_not_awaited()
        assert sent_text(mock_audit_channel).startswith("🗑️ Message deleted in <#555666777>.")

    @pytest.mark.asyncio
    async def test_missing_audit_channel_falls_back_to_origin(
        self, mock_bot, session, guild_message, mock_text_channel
    ):
        mock_bot.get_channel.return_value = None
        config = Config(discord_token="t", audit_channel_id=1)
        service = MessageAuditService(mock_bot, config, session=session)

        await service.handle_delete(guild_message)

        mock_text_channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_file_count_capped(self, mock_bot, config, author, mock_text_channel, mock_guild):
        attachments = [make_attachment(i, f"{i}.png") for i in range(12)]
        session = make_session({att.url: FakeResponse(200, b"x") for att in attachments})
        service = MessageAuditService(mock_bot, config, session=session)
        message = make_message("", attachments=attachments, author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        assert len(sent_files(mock_text_channel)) == 10
        assert "2 more file(s) not attached" in sent_text(mock_text_channel)

    @pytest.mark.asyncio
    async def test_upload_kept_within_guild_limit(self, mock_bot, config, author, mock_text_channel, mock_guild):
        mock_guild.filesize_limit = 10 * 1024
        attachments = [make_attachment(i, f"{i}.jpg", size=7 * 1024) for i in range(4)]
        session = make_session({
            att.url: FakeResponse(200, b"x" * 7 * 1024) for att in attachments
        })
        service = MessageAuditService(mock_bot, config, session=session)
        message = make_message("", attachments=attachments, author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        files = sent_files(mock_text_channel)
        assert sum(len(f.fp.getvalue()) for f in files) <= mock_guild.filesize_limit
        assert len(files) == 1
        assert sent_text(mock_text_channel).count("upload size limit reached") == 3

    @pytest.mark.asyncio
    async def test_per_file_limit_follows_guild(self, mock_bot, config, author, mock_text_channel, mock_guild):
        mock_guild.filesize_limit = 10 * 1024
        att = make_attachment(1, "movie.mp4", size=30 * 1024)
        session = make_session({att.url: FakeResponse(200, b"x" * 30 * 1024)})
        service = MessageAuditService(mock_bot, config, session=session)
        message = make_message("", attachments=[att], author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        assert sent_files(mock_text_channel) == []
        assert "movie.mp4: too large to recover (30 KB)" in sent_text(mock_text_channel)
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_configured_file_cap_below_guild_limit(self, mock_bot, author, mock_text_channel, mock_guild):
        config = Config(discord_token="test-token", attachment_max_bytes=1024)
        att = make_attachment(1, "photo.png", size=2048)
        session = make_session({att.url: FakeResponse(200, b"x" * 2048)})
        service = MessageAuditService(mock_bot, config, session=session)
        message = make_message("", attachments=[att], author=author,
                               channel=mock_text_channel, guild=mock_guild)

        await service.handle_delete(message)

        assert "photo.png: too large to recover" in sent_text(mock_text_channel)


# =============================================================================
# Update Path
# =============================================================================

class TestHandleUpdate:
    """Tests for MessageAuditService.handle_update."""

    @pytest.mark.asyncio
    async def test_unchanged_edit_not_published(self, service, author, mock_text_channel, mock_guild):
        att = make_attachment(1)
        before = make_message("a", attachments=[att], author=author, channel=mock_text_channel, guild=mock_guild)
        after = make_message("a", attachments=[att], author=author, channel=mock_text_channel, guild=mock_guild)

        assert await service.handle_update(before, after) is None
        mock_text_channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_content_edit_published(self, service, author, mock_text_channel, mock_guild):
        before = make_message("old", author=author, channel=mock_text_channel, guild=mock_guild)
        after = make_message("new", author=author, channel=mock_text_channel, guild=mock_guild)

        await service.handle_update(before, after)

        text = sent_text(mock_text_channel)
        assert "Before: old" in text
        assert "After: new" in text

    @pytest.mark.asyncio
    async def test_only_before_attachments_recovered(self, mock_bot, config, author, mock_text_channel, mock_guild):
        removed = make_attachment(1, "removed.png")
        added = make_attachment(2, "added.png")
        session = make_session({
            removed.url: FakeResponse(200, b"old"),
            added.url: FakeResponse(200, b"new"),
        })
        service = MessageAuditService(mock_bot, config, session=session)
        before = make_message("", attachments=[removed], author=author, channel=mock_text_channel, guild=mock_guild)
        after = make_message("", attachments=[added], author=author, channel=mock_text_channel, guild=mock_guild)

        await service.handle_update(before, after)

        assert [f.filename for f in sent_files(mock_text_channel)] == ["before-edit-removed.png"]
        session.get.assert_called_once()

    @pytest.mark.asyncio
    async def test_non_guild_edit_ignored(self, service, author):
        dm = MagicMock(spec=discord.DMChannel)
        dm.send = AsyncMock()
        before = make_message("a", author=author, channel=dm, guild=None)
        after = make_message("b", author=author, channel=dm, guild=None)

        assert await service.handle_update(before, after) is None
        dm.send.assert_not_awaited()


# =============================================================================
# Access Gate
# =============================================================================

class TestAccessGate:
    """Tests for the privileged user gate."""

    def test_disabled_gate_allows_everyone(self):
        gate = AccessGate(None)
        assert gate.enabled is False
        assert gate.allows(1) is True
        assert gate.allows(None) is True

    def test_enabled_gate_allows_only_privileged(self):
        gate = AccessGate(42)
        assert gate.enabled is True
        assert gate.allows(42) is True
        assert gate.allows(7) is False

    def test_fallback_warning_logged_once(self):
        with patch("src.services.message_audit.gate.logger") as mock_logger:
            gate = AccessGate(None)
            gate.allows(1)
            gate.allows(2)

        mock_logger.warning.assert_called_once()

    def test_no_warning_when_configured(self):
        with patch("src.services.message_audit.gate.logger") as mock_logger:
            AccessGate(42)

        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_service_skips_other_authors(self, mock_bot, session, guild_message, mock_text_channel):
        service = MessageAuditService(mock_bot, Config(discord_token="t", privileged_user_id=1), session=session)

        assert await service.handle_delete(guild_message) is None
        mock_text_channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_reports_privileged_author(self, mock_bot, session, guild_message, mock_text_channel):
        config = Config(discord_token="t", privileged_user_id=guild_message.author.id)
        service = MessageAuditService(mock_bot, config, session=session)

        await service.handle_delete(guild_message)

        mock_text_channel.send.assert_awaited_once()


# =============================================================================
# Session Lifecycle
# =============================================================================

class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_close_closes_session(self, mock_bot, config):
        session = make_session()
        session.close = AsyncMock()
        service = MessageAuditService(mock_bot, config, session=session)

        await service.close()

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_session(self, mock_bot, config):
        service = MessageAuditService(mock_bot, config)
        await service.close()


# =============================================================================
# Cog Listeners
# =============================================================================

class TestMessageAuditEvents:
    """Tests for the cog forwarding events to the service."""

    def _cog(self, mock_bot):
        from src.handlers.message_audit.cog import MessageAuditEvents
        service = MagicMock()
        service.handle_delete = AsyncMock()
        service.handle_update = AsyncMock()
        return MessageAuditEvents(mock_bot, service), service

    @pytest.mark.asyncio
    async def test_delete_forwarded(self, mock_bot, guild_message):
        cog, service = self._cog(mock_bot)

        await cog.on_message_delete(guild_message)

        service.handle_delete.assert_awaited_once_with(guild_message)

    @pytest.mark.asyncio
    async def test_edit_forwarded(self, mock_bot, guild_message):
        cog, service = self._cog(mock_bot)
        before = make_message("old", author=guild_message.author)

        await cog.on_message_edit(before, guild_message)

        service.handle_update.assert_awaited_once_with(before, guild_message)

    @pytest.mark.asyncio
    async def test_own_messages_ignored(self, mock_bot):
        cog, service = self._cog(mock_bot)
        own = make_message("report", author=mock_bot.user)

        await cog.on_message_delete(own)
        await cog.on_message_edit(own, own)

        service.handle_delete.assert_not_awaited()
        service.handle_update.assert_not_awaited()
