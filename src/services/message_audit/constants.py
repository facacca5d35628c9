"""
Message Audit Bot - Reporter Constants
======================================

Report markers, labels and limits shared by the message audit modules.
"""

# =============================================================================
# Report Text
# =============================================================================

DELETE_MARKER = "🗑️ Message deleted"
EDIT_MARKER = "✏️ Message edited"

UNKNOWN = "unknown"
CONTENT_UNAVAILABLE = "(unavailable)"

# =============================================================================
# Attachment Recovery
# =============================================================================

DELETED_PREFIX = "deleted-"
BEFORE_EDIT_PREFIX = "before-edit-"

# =============================================================================
# Discord Limits
# =============================================================================

MESSAGE_MAX_LENGTH = 2000
MAX_FILES_PER_MESSAGE = 10

# Upload limit of a guild without boosts, used when the guild reports none
DEFAULT_UPLOAD_LIMIT = 8 * 1024 * 1024

DOWNLOAD_TIMEOUT_SECONDS = 30
