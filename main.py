#!/usr/bin/env python3
"""
Message Audit Bot Entry Point
=============================

Reports deleted and edited Discord messages, with the deleting moderator
and re-hosted attachments, to a designated channel.
"""

import asyncio
import sys

from dotenv import load_dotenv

from src.core.config import ConfigValidationError, validate_and_log_config
from src.core.logger import logger
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Main entry point.

    1. Loads environment configuration
    2. Validates it once
    3. Starts the bot with the validated config
    """
    load_dotenv()

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    from src.bot import AuditBot

    bot = AuditBot(config)
    logger.info("🤖 Bot instance created successfully")

    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(e, location="main.__main__", critical=True)
        sys.exit(1)
