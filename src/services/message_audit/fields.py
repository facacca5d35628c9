"""
Message Audit Bot - Field Helpers
=================================

Resolve-with-default helpers for the optional fields of a message.
Every helper accepts None and falls back to a printable value.
"""

from typing import List, Optional

import discord

from .constants import UNKNOWN


def author_tag(user: Optional[discord.abc.User]) -> str:
    """Return the user's tag (``name`` or ``name#1234``), or ``unknown``."""
    if user is None:
        return UNKNOWN
    return str(user)


def author_mention(user: Optional[discord.abc.User]) -> str:
    """Return the user's mention form (``<@id>``), or ``unknown``."""
    if user is None:
        return UNKNOWN
    return user.mention


def user_label(user: Optional[discord.abc.User]) -> str:
    """Return ``<@id> (tag)`` for a user, or ``unknown``."""
    if user is None:
        return UNKNOWN
    return f"{author_mention(user)} ({author_tag(user)})"


def clean_content(message: Optional[discord.Message]) -> Optional[str]:
    """Return the trimmed message content, or None when it is empty."""
    if message is None:
        return None
    content = getattr(message, "content", None)
    if not content:
        return None
    return content.strip() or None


def attachment_label(attachment: discord.Attachment) -> str:
    """Display name of an attachment, its id when it has no filename."""
    return attachment.filename or str(attachment.id)


def attachment_labels(attachments: List[discord.Attachment]) -> List[str]:
    return [attachment_label(att) for att in attachments]


def attachment_urls(message: Optional[discord.Message]) -> List[str]:
    """Ordered list of attachment URLs, used for change detection."""
    if message is None:
        return []
    return [att.url for att in message.attachments]


def channel_label(channel: Optional[discord.abc.Messageable]) -> str:
    if channel is None:
        return UNKNOWN
    mention = getattr(channel, "mention", None)
    if mention:
        return mention
    name = getattr(channel, "name", None)
    return f"#{name}" if name else UNKNOWN


def clip(text: str, limit: int) -> str:
    """Clip text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)] + "…"


__all__ = [
    "author_tag",
    "author_mention",
    "user_label",
    "clean_content",
    "attachment_label",
    "attachment_labels",
    "attachment_urls",
    "channel_label",
    "clip",
]
