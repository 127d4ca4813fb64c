# Jupiter Vault - Main Package
#
# Password records stored as encrypted messages on the Jupiter ledger.

__version__ = "0.1.0"
__author__ = "Jupiter Vault Team"
__description__ = "Encrypted password records stored on the Jupiter ledger"

from .core import (
    ClientConfig,
    EncryptionError,
    JupiterVaultError,
    LedgerOperationError,
    RecordFormatError,
    TransportError,
)
from .ledger import AmountConverter, LedgerClient
from .vault import RECORD_KEY, AESGCMEncryption, RecordCodec
from .vault.record_store import RecordStore, StoredRecord

__all__ = [
    "__version__",
    "ClientConfig",
    "JupiterVaultError",
    "TransportError",
    "LedgerOperationError",
    "EncryptionError",
    "RecordFormatError",
    "AmountConverter",
    "LedgerClient",
    "RECORD_KEY",
    "AESGCMEncryption",
    "RecordCodec",
    "RecordStore",
    "StoredRecord",
]
