"""
Message Audit Bot - Message Audit Package
=========================================

Reconstructs deleted and edited messages and republishes them.

Structure:
    - constants.py: Report markers, filename prefixes, Discord limits
    - fields.py: Resolve-with-default helpers for optional message fields
    - resolver.py: Partial message materialization
    - filters.py: Channel eligibility
    - actor.py: Deleter lookup through the audit log
    - attachments.py: Attachment re-download
    - report.py: Delete and edit report builders
    - gate.py: Privileged user access gate
    - service.py: MessageAuditService orchestrating the above
"""

from .actor import resolve_deleter
from .attachments import RecoveryResult, recover_attachments
from .filters import is_reportable
from .gate import AccessGate
from .report import Report, build_delete_report, build_update_report, has_changes
from .resolver import ensure_full_message
from .service import MessageAuditService

__all__ = [
    "AccessGate",
    "MessageAuditService",
    "RecoveryResult",
    "Report",
    "build_delete_report",
    "build_update_report",
    "ensure_full_message",
    "has_changes",
    "is_reportable",
    "recover_attachments",
    "resolve_deleter",
]
