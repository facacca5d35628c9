"""
Message Audit Bot - Configuration Module
========================================

Centralized configuration loaded from environment variables.

DESIGN:
    Single source of truth for all configuration, read once at startup.
    The resulting Config object is handed to the components that need it
    instead of being looked up from inside event handlers.

    Key patterns:
    - Singleton via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
"""

import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        privileged_user_id: When set, only this user's messages are reported.
        audit_channel_id: Channel that receives reports. Reports go to the
            message's own channel when unset.
        audit_log_lookback: Number of recent delete audit entries inspected.
        audit_log_window_seconds: Max age of an audit entry to count as fresh.
        message_content_max_length: Content lines are clipped to this length.
        attachment_max_bytes: Attachments above this size are not re-hosted.
            The guild upload limit applies when unset or larger.
        error_webhook_url: Discord webhook that receives error alerts.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str

    # -------------------------------------------------------------------------
    # Optional: Reporting
    # -------------------------------------------------------------------------

    privileged_user_id: Optional[int] = None
    audit_channel_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Audit Log Lookup
    # -------------------------------------------------------------------------

    audit_log_lookback: int = 5
    audit_log_window_seconds: int = 5

    # -------------------------------------------------------------------------
    # Optional: Limits
    # -------------------------------------------------------------------------

    message_content_max_length: int = 1500   # Discord caps messages at 2000
    attachment_max_bytes: Optional[int] = None   # guild upload limit when unset

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int_optional(value: Optional[str], name: str) -> Optional[int]:
    """
    Parse optional string to integer.

    Args:
        value: String value from environment variable, may be None.
        name: Variable name for error messages.

    Returns:
        Parsed integer or None if the variable is unset.

    Raises:
        ConfigValidationError: If the value is set but not an integer.
    """
    if not value or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range clamping.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default

    from src.core.logger import logger

    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default

    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """
    Validate URL format for webhooks.

    Returns:
        URL if valid, None if invalid or empty.
    """
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If a required variable is missing or an ID
            variable is not an integer.
    """
    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigValidationError("Missing required environment variables: DISCORD_TOKEN")

    return Config(
        discord_token=discord_token,
        privileged_user_id=_parse_int_optional(os.getenv("PRIVILEGED_USER_ID"), "PRIVILEGED_USER_ID"),
        audit_channel_id=_parse_int_optional(os.getenv("AUDIT_CHANNEL_ID"), "AUDIT_CHANNEL_ID"),
        audit_log_lookback=_parse_int_with_default(
            os.getenv("AUDIT_LOG_LOOKBACK"), 5, "AUDIT_LOG_LOOKBACK", min_val=1, max_val=100
        ),
        audit_log_window_seconds=_parse_int_with_default(
            os.getenv("AUDIT_LOG_WINDOW_SECONDS"), 5, "AUDIT_LOG_WINDOW_SECONDS", min_val=1, max_val=60
        ),
        message_content_max_length=_parse_int_with_default(
            os.getenv("MESSAGE_CONTENT_MAX_LENGTH"), 1500, "MESSAGE_CONTENT_MAX_LENGTH", min_val=50, max_val=1900
        ),
        attachment_max_bytes=_parse_int_with_default(
            os.getenv("ATTACHMENT_MAX_BYTES"), 0, "ATTACHMENT_MAX_BYTES", min_val=0
        ) or None,
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Required", "✅ All required variables set"),
        ("Privileged User", str(config.privileged_user_id) if config.privileged_user_id else "Not set"),
        ("Audit Channel", str(config.audit_channel_id) if config.audit_channel_id else "Origin channel"),
        ("Audit Lookback", f"{config.audit_log_lookback} entries / {config.audit_log_window_seconds}s"),
        ("Error Webhook", "Set" if config.error_webhook_url else "Not set"),
    ], emoji="⚙️")

    return config


__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "load_config",
    "validate_and_log_config",
]
