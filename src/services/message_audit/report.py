"""
Message Audit Bot - Report Builders
===================================

Builds the text and files published for one delete or edit event.

DESIGN:
    A Report is built from exactly one event and discarded after it is
    sent. Body sections follow the same priority everywhere:
    1. Trimmed text content
    2. Attachment names
    3. "(unavailable)" fallback
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import discord

from .attachments import RecoveryResult
from .constants import (
    CONTENT_UNAVAILABLE,
    DELETE_MARKER,
    EDIT_MARKER,
    MESSAGE_MAX_LENGTH,
)
from .fields import (
    attachment_labels,
    attachment_urls,
    clean_content,
    clip,
    user_label,
)


DEFAULT_CONTENT_MAX_LENGTH = 1500


# =============================================================================
# Report
# =============================================================================

@dataclass
class Report:
    """Ordered report lines plus the files recovered for them."""

    lines: List[str] = field(default_factory=list)
    files: List[discord.File] = field(default_factory=list)

    def add_recovery(self, recovery: Optional[RecoveryResult]) -> None:
        if recovery is None:
            return
        self.files.extend(recovery.files)
        self.lines.extend(recovery.warnings)

    def render(self) -> str:
        """Join the lines into a single message body within Discord's limit."""
        return clip("\n".join(self.lines), MESSAGE_MAX_LENGTH)


# =============================================================================
# Shared Helpers
# =============================================================================

def _marker(base: str, channel_label: Optional[str]) -> str:
    if channel_label:
        return f"{base} in {channel_label}."
    return f"{base}."


def _body_budget(other_lines: List[str], sections: int) -> int:
    """Characters left for each body line once every other line is placed."""
    # One newline between each pair of lines
    used = sum(len(line) for line in other_lines) + len(other_lines) + sections - 1
    return max((MESSAGE_MAX_LENGTH - used) // sections, 0)


def _body_line(
    label: str,
    message: Optional[discord.Message],
    max_length: int,
    line_budget: int = MESSAGE_MAX_LENGTH,
) -> str:
    """One content / attachment / fallback line for a message."""
    content = clean_content(message)
    if content:
        return clip(f"{label}: {clip(content, max_length)}", line_budget)

    attachments = list(message.attachments) if message is not None else []
    if attachments:
        return clip(f"{label} attachments: {', '.join(attachment_labels(attachments))}", line_budget)

    return f"{label}: {CONTENT_UNAVAILABLE}"


# =============================================================================
# Delete Report
# =============================================================================

def build_delete_report(
    message: discord.Message,
    deleter: Optional[discord.abc.User],
    recovery: Optional[RecoveryResult] = None,
    *,
    channel_label: Optional[str] = None,
    max_content_length: int = DEFAULT_CONTENT_MAX_LENGTH,
) -> Report:
    """
    Build the report for a deleted message.

    Lines, in order:
        marker, deleter (``unknown`` when unresolved), author, then one of
        content / attachment names / unavailable, then recovery warnings.

    The body line is shortened further when the other lines leave less
    than ``max_content_length`` of Discord's message limit.

    Args:
        message: The deleted message.
        deleter: Resolved deleter, None when unknown.
        recovery: Result of recovering the message's attachments.
        channel_label: Origin channel, only set when the report is
            published somewhere else.
        max_content_length: Content is clipped beyond this length.
    """
    head = [
        _marker(DELETE_MARKER, channel_label),
        f"Deleted by: {user_label(deleter)}",
        f"Author: {user_label(message.author)}",
    ]
    warnings = recovery.warnings if recovery is not None else []
    budget = _body_budget(head + warnings, 1)

    report = Report(lines=head + [_body_line("Content", message, max_content_length, budget)])
    report.add_recovery(recovery)
    return report


# =============================================================================
# Update Report
# =============================================================================

def detect_changes(
    before: discord.Message,
    after: discord.Message,
) -> Tuple[bool, bool]:
    """
    Compare two states of a message.

    Returns:
        (content_changed, attachments_changed). Content is compared after
        trimming, attachments by their ordered URL lists.
    """
    content_changed = (clean_content(before) or "") != (clean_content(after) or "")
    attachments_changed = attachment_urls(before) != attachment_urls(after)
    return content_changed, attachments_changed


def has_changes(before: discord.Message, after: discord.Message) -> bool:
    """True when an edit changed the content or the attachments."""
    content_changed, attachments_changed = detect_changes(before, after)
    return content_changed or attachments_changed


def build_update_report(
    before: discord.Message,
    after: discord.Message,
    recovery: Optional[RecoveryResult] = None,
    *,
    channel_label: Optional[str] = None,
    max_content_length: int = DEFAULT_CONTENT_MAX_LENGTH,
) -> Report:
    """
    Build the report for an edited message.

    Callers decide with detect_changes() whether the edit is reported at
    all. Before and After share what is left of the message limit after
    the marker, author, jump link and warnings, so those lines are never
    cut off.
    """
    head = [
        _marker(EDIT_MARKER, channel_label),
        f"Author: {user_label(after.author or before.author)}",
    ]
    tail = []
    jump_url = getattr(after, "jump_url", None)
    if jump_url:
        tail.append(f"Message: {jump_url}")

    warnings = recovery.warnings if recovery is not None else []
    budget = _body_budget(head + tail + warnings, 2)

    report = Report(lines=head + [
        _body_line("Before", before, max_content_length, budget),
        _body_line("After", after, max_content_length, budget),
    ] + tail)
    report.add_recovery(recovery)
    return report


__all__ = [
    "Report",
    "build_delete_report",
    "build_update_report",
    "detect_changes",
    "has_changes",
]
