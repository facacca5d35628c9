"""
Message Audit Bot - Partial Message Resolver
============================================

Materializes partial message references before they are reported.
"""

from typing import Optional, Union

import discord

from src.core.logger import logger
from src.utils.http_errors import log_http_error


async def ensure_full_message(
    message: Union[discord.Message, discord.PartialMessage],
) -> Optional[discord.Message]:
    """
    Return a fully populated message, fetching it when only a partial
    reference is available.

    DESIGN:
        A failed fetch aborts the event. The failure is logged and never
        retried, so no report is built from incomplete data.

    Args:
        message: A cached message or a partial reference.

    Returns:
        The full message, or None if the fetch failed.
    """
    if isinstance(message, discord.Message):
        return message

    try:
        return await message.fetch()
    except discord.NotFound:
        logger.warning("Partial Message Fetch Failed", [
            ("Message ID", str(message.id)),
            ("Reason", "Not found"),
        ])
    except discord.Forbidden:
        logger.warning("Partial Message Fetch Failed", [
            ("Message ID", str(message.id)),
            ("Reason", "Forbidden"),
        ])
    except discord.HTTPException as e:
        log_http_error(e, "Partial Message Fetch", [("Message ID", str(message.id))])
    return None


__all__ = ["ensure_full_message"]
