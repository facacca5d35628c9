"""
Message Audit Bot - Channel Eligibility
=======================================

Only messages from text-capable guild channels are reported.
"""

import discord


def is_reportable(message: discord.Message) -> bool:
    """
    Check whether a message lives in a guild channel that can be reported.

    Rejects direct messages, group DMs and any channel that cannot hold
    text messages. The same rule applies to deletes and edits.
    """
    if message.guild is None:
        return False

    channel = message.channel
    if channel is None:
        return False
    if isinstance(channel, (discord.DMChannel, discord.GroupChannel)):
        return False
    return isinstance(channel, discord.abc.Messageable)


__all__ = ["is_reportable"]
