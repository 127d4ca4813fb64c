# Core Module - Shared Utilities
#
# - Client configuration
# - Error taxonomy
# - Audit logging

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    get_audit_logger,
)
from .config import ClientConfig
from .errors import (
    AmountError,
    ConfigError,
    EncryptionError,
    JupiterVaultError,
    LedgerOperationError,
    RecordFormatError,
    TransportError,
)

__all__ = [
    # Configuration
    "ClientConfig",
    # Errors
    "JupiterVaultError",
    "ConfigError",
    "AmountError",
    "TransportError",
    "LedgerOperationError",
    "EncryptionError",
    "RecordFormatError",
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
]
