"""Audit logging package."""

from pocketledger.audit.logger import AuditLogger, get_logger

__all__ = ["AuditLogger", "get_logger"]
