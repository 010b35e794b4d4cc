"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged. This provides:
1. Traceability of what the user changed and when
2. Debugging capability when a collaborator misbehaves
3. A place for rejected input to go instead of raising at the user

The audit logger:
- Is synchronous: the ledger core is synchronous and must stay so
- Never raises (a broken log must not break a transaction)
- Logs at the level matching the event severity
"""

from typing import Optional

import structlog

from pocketledger.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: Optional[str] = None):
    """Module-level loggers share the audit logger's configuration."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Keeps an in-memory trail of the events of this session (bounded) in
    addition to the structured log, so callers can show recent activity.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("pocketledger.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> tuple[AuditEvent, ...]:
        """Events logged in this session, oldest first."""
        return tuple(self._history)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written to the structured log.
        """
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never interrupt a ledger mutation
            return False

        return True
