"""
Message Audit Bot - Test Helpers
================================

Factories for Discord objects and fakes for async APIs. Discord objects
are MagicMocks specced on the real discord.py classes so isinstance
checks behave like they do at runtime.
"""

from datetime import datetime
from typing import Iterable, Optional
from unittest.mock import MagicMock

import discord


# =============================================================================
# Async Helpers
# =============================================================================

class AsyncIter:
    """Async iterator over a fixed list, stands in for guild.audit_logs()."""

    def __init__(self, items: Iterable) -> None:
        self._items = list(items)

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for item in self._items:
            yield item


class RaisingAsyncIter:
    """Async iterator that raises on first use."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def __aiter__(self):
        return self

    async def __anext__(self):
        raise self.error


class FakeResponse:
    """Minimal aiohttp response usable as an async context manager."""

    def __init__(self, status: int = 200, data: bytes = b"") -> None:
        self.status = status
        self.data = data

    async def read(self) -> bytes:
        return self.data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_session(responses: Optional[dict] = None) -> MagicMock:
    """
    Build a fake aiohttp session.

    ``responses`` maps URL to a FakeResponse or to an exception raised
    when that URL is requested.
    """
    responses = responses or {}

    def get(url, **kwargs):
        result = responses.get(url, FakeResponse(404))
        if isinstance(result, Exception):
            raise result
        return result

    session = MagicMock()
    session.get = MagicMock(side_effect=get)
    session.closed = False
    return session


def http_error(cls=discord.HTTPException, status: int = 500, text: str = "error"):
    """Create a discord HTTP exception with a fake response."""
    response = MagicMock()
    response.status = status
    response.reason = "Error"
    return cls(response, text)


# =============================================================================
# Discord Object Factories
# =============================================================================

def make_user(user_id: int = 123456789, name: str = "testuser", bot: bool = False) -> MagicMock:
    user = MagicMock(spec=discord.Member)
    user.id = user_id
    user.name = name
    user.bot = bot
    user.mention = f"<@{user_id}>"
    user.__str__.return_value = name
    return user


def make_attachment(
    attachment_id: int = 1,
    filename: str = "image.png",
    url: Optional[str] = None,
    ephemeral: bool = False,
    description: Optional[str] = None,
    size: int = 1024,
    spoiler: bool = False,
) -> MagicMock:
    attachment = MagicMock(spec=discord.Attachment)
    attachment.id = attachment_id
    attachment.filename = filename
    attachment.url = url or f"https://cdn.example.com/attachments/{attachment_id}/{filename}"
    attachment.ephemeral = ephemeral
    attachment.description = description
    attachment.size = size
    attachment.is_spoiler.return_value = spoiler
    return attachment


def make_message(
    content: Optional[str] = "Test message content",
    attachments: Optional[list] = None,
    author=None,
    channel=None,
    guild=None,
    message_id: int = 111222333,
) -> MagicMock:
    message = MagicMock(spec=discord.Message)
    message.id = message_id
    message.content = content
    message.attachments = attachments or []
    message.author = author if author is not None else make_user()
    message.guild = guild
    message.channel = channel
    message.jump_url = f"https://discord.com/channels/1/2/{message_id}"
    return message


def make_audit_entry(
    target_id: int,
    channel_id: int,
    created_at: datetime,
    executor=None,
) -> MagicMock:
    entry = MagicMock()
    entry.target = MagicMock()
    entry.target.id = target_id
    entry.extra = MagicMock()
    entry.extra.channel = MagicMock()
    entry.extra.channel.id = channel_id
    entry.created_at = created_at
    entry.user = executor if executor is not None else make_user(999, "moderator")
    return entry

