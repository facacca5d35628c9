"""
Message Audit Bot - Deleter Resolution
======================================

Finds who deleted a message by reading the guild's recent audit log.

DESIGN:
    Discord only records deletions performed by someone other than the
    author. When no fresh entry matches, the deleter is unknown (usually
    the author themselves or a bot without an audit trail).

    Among matching entries the newest one wins.
"""

from datetime import datetime
from typing import Optional

import discord

from src.core.logger import logger
from src.utils.http_errors import log_http_error


DEFAULT_LOOKBACK = 5
DEFAULT_WINDOW_SECONDS = 5


def _entry_matches(
    entry: discord.AuditLogEntry,
    author_id: int,
    channel_id: int,
    now: datetime,
    window_seconds: float,
) -> bool:
    target = entry.target
    if target is None or target.id != author_id:
        return False

    channel = getattr(entry.extra, "channel", None)
    if channel is None or channel.id != channel_id:
        return False

    age = (now - entry.created_at).total_seconds()
    return abs(age) <= window_seconds


async def resolve_deleter(
    guild: discord.Guild,
    author_id: int,
    channel_id: int,
    *,
    limit: int = DEFAULT_LOOKBACK,
    window_seconds: float = DEFAULT_WINDOW_SECONDS,
    now: Optional[datetime] = None,
) -> Optional[discord.abc.User]:
    """
    Resolve the user who deleted a message.

    Args:
        guild: Guild the message was deleted from.
        author_id: ID of the deleted message's author.
        channel_id: ID of the channel the message lived in.
        limit: Number of recent message-delete entries to inspect.
        window_seconds: Max distance between the entry and ``now``.
        now: Reference time, defaults to the current UTC time.

    Returns:
        The executor of the newest matching entry, or None when unknown.
        Audit log failures also return None.
    """
    now = now or discord.utils.utcnow()
    newest: Optional[discord.AuditLogEntry] = None

    try:
        async for entry in guild.audit_logs(
            action=discord.AuditLogAction.message_delete,
            limit=limit,
        ):
            if not _entry_matches(entry, author_id, channel_id, now, window_seconds):
                continue
            if newest is None or entry.created_at > newest.created_at:
                newest = entry
    except discord.Forbidden:
        logger.debug("Audit Log Access Denied", [
            ("Action", "message_delete_lookup"),
            ("Guild", guild.name),
        ])
        return None
    except discord.HTTPException as e:
        log_http_error(e, "Audit Log Fetch", [
            ("Action", "message_delete_lookup"),
            ("Guild", guild.name),
        ])
        return None

    if newest is None:
        return None
    return newest.user


__all__ = ["resolve_deleter", "DEFAULT_LOOKBACK", "DEFAULT_WINDOW_SECONDS"]
