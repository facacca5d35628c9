"""
Message Audit Bot - Handlers Package
====================================

Event cogs loaded as extensions by the bot.

    To add a new handler:
    1. Create a package in this directory with a cog and a setup() entry
    2. Add its dotted path to EVENT_COGS in bot.py

Available Handlers:
    message_audit: on_message_delete / on_message_edit listeners
"""
