# Vault Module - Encrypted Password Records
#
# Records are JSON objects encrypted with AES-256-GCM and stored as
# self-addressed ledger messages.

from .encryption import AESGCMEncryption, EncryptionAdapter, EncryptionService
from .record_codec import RECORD_KEY, RecordCodec

__all__ = [
    "AESGCMEncryption",
    "EncryptionAdapter",
    "EncryptionService",
    "RECORD_KEY",
    "RecordCodec",
]
