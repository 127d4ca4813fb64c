# Vault - Record Store
#
# Read/write password records kept as self-addressed encrypted messages:
#   save()         -> LedgerClient.store_record
#   list_records() -> merged history -> node decryptFrom -> RecordCodec
#                     -> keep payloads carrying the discriminator
#
# Messages that are not ours (other senders, other schemas, other secrets)
# are skipped.  Transport and node errors propagate.

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.audit_log import EventType
from ..core.errors import EncryptionError, RecordFormatError
from ..ledger.client import LedgerClient
from ..ledger.models import TransactionReceipt
from ..ledger.transactions import MESSAGE_TRANSACTION_TYPE, Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredRecord:
    """A decoded password record and where it came from."""

    transaction_id: str
    timestamp: int
    confirmed: bool
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "timestamp": self.timestamp,
            "confirmed": self.confirmed,
            "fields": dict(self.fields),
        }


class RecordStore:
    """Password records on top of a LedgerClient."""

    def __init__(self, client: LedgerClient):
        self.client = client

    async def save(self, record: Mapping[str, Any]) -> TransactionReceipt:
        return await self.client.store_record(record)

    async def list_records(
        self,
        with_message: bool = True,
        type: int = MESSAGE_TRANSACTION_TYPE,
    ) -> List[StoredRecord]:
        """All records in timeline order (pending first, newest pending first)."""
        transactions = await self.client.list_transactions(with_message, type)
        records: List[StoredRecord] = []
        skipped = 0

        for tx in transactions:
            record = await self._decode(tx)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        logger.debug(
            "Scanned %d transactions: %d records, %d skipped",
            len(transactions), len(records), skipped,
        )
        self.client.audit.log_vault_event(
            EventType.RECORDS_LISTED,
            "Records listed",
            details={"records": len(records), "scanned": len(transactions)},
        )
        return records

    async def _decode(self, tx: Transaction) -> Optional[StoredRecord]:
        message = tx.encrypted_message
        if message is None or not tx.is_self_addressed(self.client.config.address):
            return None

        plaintext = await self.client.fetch_decrypted_message(message)
        try:
            data = await self.client.codec.decode_record(plaintext)
        except (EncryptionError, RecordFormatError) as exc:
            logger.debug("Transaction %s is not a record: %s", tx.transaction, type(exc).__name__)
            return None

        if not self.client.codec.is_record(data):
            return None

        return StoredRecord(
            transaction_id=tx.transaction,
            timestamp=tx.timestamp,
            confirmed=tx.confirmed,
            fields=self.client.codec.strip_marker(data),
        )
