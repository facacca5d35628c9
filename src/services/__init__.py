"""
Message Audit Bot - Services Package
====================================

DESIGN:
    Services are plain classes created by the bot in setup_hook and
    handed to the cogs that drive them. They handle their own optional
    failures and degrade to fallbacks.

Available Services:
    MessageAuditService: Delete/edit reports with attachment recovery
"""

from .message_audit import MessageAuditService

__all__ = ["MessageAuditService"]
