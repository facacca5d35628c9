"""
Message Audit Bot - Test Fixtures
=================================

Shared fixtures for all tests. Factories live in tests/helpers.py.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ["TESTING"] = "1"
os.environ.setdefault("AUDIT_LOGS_DIR", tempfile.mkdtemp(prefix="audit-logs-"))

import discord  # noqa: E402

from src.core.config import Config  # noqa: E402
from tests.helpers import AsyncIter, make_message, make_session, make_user  # noqa: E402


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def now():
    return discord.utils.utcnow()


@pytest.fixture
def author():
    return make_user(123456789, "alice")


@pytest.fixture
def moderator():
    return make_user(111222333, "modbob")


@pytest.fixture
def mock_guild():
    guild = MagicMock(spec=discord.Guild)
    guild.id = 987654321
    guild.name = "Test Server"
    guild.filesize_limit = 25 * 1024 * 1024
    guild.audit_logs = MagicMock(return_value=AsyncIter([]))
    return guild


@pytest.fixture
def mock_text_channel(mock_guild):
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = 555666777
    channel.name = "general"
    channel.mention = "<#555666777>"
    channel.guild = mock_guild
    channel.send = AsyncMock(return_value=MagicMock(spec=discord.Message))
    return channel


@pytest.fixture
def mock_audit_channel(mock_guild):
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = 444555666
    channel.name = "audit-log"
    channel.mention = "<#444555666>"
    channel.guild = mock_guild
    channel.send = AsyncMock(return_value=MagicMock(spec=discord.Message))
    return channel


@pytest.fixture
def guild_message(author, mock_text_channel, mock_guild):
    return make_message("hello", author=author, channel=mock_text_channel, guild=mock_guild)


@pytest.fixture
def mock_bot():
    bot = MagicMock()
    bot.user = make_user(424242, "AuditBot", bot=True)
    bot.get_channel = MagicMock(return_value=None)
    return bot


@pytest.fixture
def config():
    return Config(discord_token="test-token")


@pytest.fixture
def session():
    return make_session()
