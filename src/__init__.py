"""
Message Audit Bot - Source Package
==================================

Discord bot that reports deleted and edited messages, with the deleting
moderator and re-hosted attachments.

Package Structure:
- bot.py: Main Discord bot class
- core/: Configuration and logging
- handlers/: Event cogs binding Discord events to services
- services/: Message audit reporter
- utils/: Error handling helpers

Version: v1.0.0
"""
