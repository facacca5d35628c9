"""
Message Audit Bot - Attachment Recovery
=======================================

Re-downloads attachments of deleted or edited messages so they can be
re-uploaded with the report.

DESIGN:
    Discord CDN links stop working once the owning message is deleted or
    the attachment is removed by an edit, so the bytes are fetched while
    the event is handled.

    Recovery never raises. Each attachment that cannot be recovered
    produces one warning line for the report:
    - ephemeral attachments are skipped without a download
    - oversized attachments are skipped without a download
    - files past the upload budget are not attached
    - files past the per-message file count share a single warning
    - HTTP and network failures drop that single file
"""

import io
from dataclasses import dataclass, field
from typing import List, Optional

import aiohttp
import discord

from src.core.logger import logger

from .constants import DOWNLOAD_TIMEOUT_SECONDS
from .fields import attachment_label


@dataclass
class RecoveryResult:
    """Files recovered from one attachment set plus warning lines."""

    files: List[discord.File] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class AttachmentDownloadError(Exception):
    """Raised when the CDN answers an attachment download with a non-200 status."""

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP {status}")
        self.status = status


async def _download(session: aiohttp.ClientSession, url: str) -> bytes:
    async with session.get(
        url,
        timeout=aiohttp.ClientTimeout(total=DOWNLOAD_TIMEOUT_SECONDS),
    ) as resp:
        if resp.status != 200:
            raise AttachmentDownloadError(resp.status)
        return await resp.read()


async def recover_attachments(
    attachments: List[discord.Attachment],
    prefix: str,
    session: aiohttp.ClientSession,
    max_bytes: Optional[int] = None,
    max_total_bytes: Optional[int] = None,
    max_files: Optional[int] = None,
) -> RecoveryResult:
    """
    Recover a set of attachments as renamed discord.File copies.

    Args:
        attachments: Attachments to recover, in message order.
        prefix: Filename prefix such as ``deleted-`` or ``before-edit-``.
        session: HTTP session used for the downloads.
        max_bytes: Attachments larger than this are skipped.
        max_total_bytes: Upload budget shared by all recovered files.
            Files that no longer fit are dropped with a warning.
        max_files: Files beyond this count are not downloaded.

    Returns:
        RecoveryResult with one file per recovered attachment.
    """
    result = RecoveryResult()
    remaining = max_total_bytes
    over_count = 0

    for attachment in attachments:
        name = attachment_label(attachment)

        if attachment.ephemeral:
            result.warnings.append(f"⚠️ {name}: ephemeral attachment, cannot be recovered")
            continue

        if max_bytes is not None and attachment.size and attachment.size > max_bytes:
            result.warnings.append(
                f"⚠️ {name}: too large to recover ({attachment.size // 1024} KB)"
            )
            continue

        if max_files is not None and len(result.files) >= max_files:
            over_count += 1
            continue

        if remaining is not None and attachment.size and attachment.size > remaining:
            result.warnings.append(f"⚠️ {name}: not attached, upload size limit reached")
            continue

        try:
            data = await _download(session, attachment.url)
        except Exception as e:
            logger.warning("Attachment Recovery Failed", [
                ("Attachment", name),
                ("URL", attachment.url),
                ("Error", f"{type(e).__name__}: {str(e)[:100]}"),
            ])
            result.warnings.append(f"⚠️ {name}: could not be recovered")
            continue

        # Declared sizes can be missing or stale
        if remaining is not None:
            if len(data) > remaining:
                result.warnings.append(f"⚠️ {name}: not attached, upload size limit reached")
                continue
            remaining -= len(data)

        result.files.append(discord.File(
            io.BytesIO(data),
            filename=f"{prefix}{name}",
            spoiler=attachment.is_spoiler(),
            description=attachment.description,
        ))

    if over_count:
        result.warnings.append(f"⚠️ {over_count} more file(s) not attached (Discord limit)")

    if attachments:
        logger.debug("Attachments Recovered", [
            ("Prefix", prefix),
            ("Recovered", f"{len(result.files)}/{len(attachments)}"),
            ("Upload Budget Left", str(remaining) if remaining is not None else "unlimited"),
        ])

    return result


__all__ = ["AttachmentDownloadError", "RecoveryResult", "recover_attachments"]
