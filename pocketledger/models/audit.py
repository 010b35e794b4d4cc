"""
Audit Models for pocketledger

Every user-visible mutation of the ledger is logged as an audit event.
This provides:
1. A readable history of what the user changed
2. Debugging information when a collaborator (sheet, advisor) fails
3. A record of rejected input without surfacing it as an error

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_CLEARED = "transactions_cleared"
    BULK_ENTRY_SUBMITTED = "bulk_entry_submitted"
    ENTRY_REJECTED = "entry_rejected"

    # Shortcuts
    SHORTCUT_USED = "shortcut_used"
    SHORTCUT_SAVED = "shortcut_saved"
    SHORTCUT_DELETED = "shortcut_deleted"

    # Settings
    DAILY_LIMIT_UPDATED = "daily_limit_updated"
    DAILY_LIMIT_REJECTED = "daily_limit_rejected"
    CURRENCY_UPDATED = "currency_updated"

    # Collaborators
    ADVICE_GENERATED = "advice_generated"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'shortcut', 'setting')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction)
        event = AuditEventBuilder.daily_limit_rejected("abc", "not a number")
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        amount: str,
        category: str,
        source: str = "form",
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {category} {amount}",
            details={
                "amount": amount,
                "category": category,
                "source": source,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {amount}",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def transactions_cleared(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description=f"All transactions cleared ({count} removed)",
            details={"count": count},
            is_user_action=True,
        )

    @staticmethod
    def bulk_entry_submitted(submitted: int, skipped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_ENTRY_SUBMITTED,
            entity_type="transaction",
            description=f"Bulk entry: {submitted} added, {skipped} lines skipped",
            details={
                "submitted": submitted,
                "skipped": skipped,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(field: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description=f"Entry rejected: {reason}",
            details={"field": field},
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def shortcut_used(shortcut_id: str, transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHORTCUT_USED,
            entity_type="shortcut",
            entity_id=shortcut_id,
            description="Shortcut used",
            details={"transaction_id": transaction_id},
            is_user_action=True,
        )

    @staticmethod
    def shortcut_saved(shortcut_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHORTCUT_SAVED,
            entity_type="shortcut",
            entity_id=shortcut_id,
            description=f"Shortcut saved: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def shortcut_deleted(shortcut_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHORTCUT_DELETED,
            entity_type="shortcut",
            entity_id=shortcut_id,
            description="Shortcut deleted",
            is_user_action=True,
        )

    @staticmethod
    def daily_limit_updated(old: str, new: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAILY_LIMIT_UPDATED,
            entity_type="setting",
            entity_id="dailyFoodLimit",
            description=f"Daily food limit changed from {old} to {new}",
            details={"old": old, "new": new},
            is_user_action=True,
        )

    @staticmethod
    def daily_limit_rejected(raw_value: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAILY_LIMIT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="setting",
            entity_id="dailyFoodLimit",
            description="Daily food limit rejected; previous value kept",
            details={"raw_value": raw_value},
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def currency_updated(currency: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_UPDATED,
            entity_type="setting",
            entity_id="currency",
            description=f"Currency set to {currency}",
            details={"currency": currency},
            is_user_action=True,
        )

    @staticmethod
    def advice_generated(source: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_GENERATED,
            entity_type="advice",
            description=f"Advice generated ({source})",
            details={
                "source": source,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service, **(details or {})},
        )
