# Core - Audit Logging
#
# Append-only audit trail for every ledger write and vault access.
# One JSON object per line, one file per day, rendered through structlog.
#
# Audit events never carry passphrases, secrets or record contents: only
# transaction ids, addresses, field names and counts.

import json
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO
from uuid import uuid4

import structlog


class EventType(str, Enum):
    """Types of events written to the audit log."""

    # Ledger Events
    TRANSFER_SENT = "ledger.transfer.sent"
    TRANSFER_FAILED = "ledger.transfer.failed"
    ACCOUNT_CREATED = "account.created"

    # Vault Events
    RECORD_STORED = "vault.record.stored"
    RECORD_FAILED = "vault.record.failed"
    RECORDS_LISTED = "vault.records.listed"


class EventSeverity(str, Enum):
    """Severity levels for audit events."""

    INFO = "info"
    ALERT = "alert"
    CRITICAL = "critical"


class AuditLogger:
    """
    Append-only structured audit logger.

    Features:
    - Structured JSON lines via structlog
    - Automatic timestamp and event ID
    - Daily log files under ``log_dir``
    """

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for audit logs (default: ./audit_logs)
        """
        self.log_dir = Path(log_dir) if log_dir else Path("./audit_logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self._log_file_for(datetime.now())
        self._stream: TextIO = open(self.log_file, mode="a", encoding="utf-8")

        self.logger = structlog.wrap_logger(
            structlog.WriteLogger(self._stream),
            processors=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            context_class=dict,
        )

    def _log_file_for(self, day: datetime) -> Path:
        return self.log_dir / f"audit_{day.strftime('%Y-%m-%d')}.log"

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.close()

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log an audit event (append-only).

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (never secrets)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())
        event_data = {
            "event_id": event_id,
            "event_type": event_type.value,
            "severity": severity.value,
            "message": message,
            "details": details or {},
            "platform": sys.platform,
        }

        if severity == EventSeverity.INFO:
            self.logger.info("audit_event", **event_data)
        else:
            self.logger.warning("audit_event", **event_data)

        return event_id

    def log_ledger_event(
        self,
        event_type: EventType,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        failed: bool = False,
    ) -> str:
        """Log a ledger write (transfer, account creation)."""
        return self.log_event(
            event_type=event_type,
            severity=EventSeverity.ALERT if failed else EventSeverity.INFO,
            message=f"Ledger: {message}",
            details=details,
        )

    def log_vault_event(
        self,
        event_type: EventType,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        failed: bool = False,
    ) -> str:
        """
        Log a Vault event.

        Args:
            event_type: Type of Vault event
            message: Event description
            details: Additional details (never log record values!)
            failed: Mark the event as an alert

        Returns:
            str: Event ID
        """
        return self.log_event(
            event_type=event_type,
            severity=EventSeverity.ALERT if failed else EventSeverity.INFO,
            message=f"Vault: {message}",
            details=details,
        )

    def read_events(
        self,
        event_types: Optional[List[EventType]] = None,
        day: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Read back the events logged on ``day`` (default: today)."""
        path = self._log_file_for(day or datetime.now())
        if not path.exists():
            return []

        wanted = {t.value for t in event_types} if event_types else None
        events = []
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                entry = json.loads(line)
                if wanted is None or entry.get("event_type") in wanted:
                    events.append(entry)
        return events


# Global logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Get global audit logger (singleton pattern)."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger
