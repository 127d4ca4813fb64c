# Ledger - Transaction History
#
# The node exposes confirmed and unconfirmed transactions through two
# independent, differently-shaped endpoints:
#   GET  getBlockchainTransactions  -> {"transactions": [...]}
#   POST getUnconfirmedTransactions -> {"unconfirmedTransactions": [...]}
#
# TransactionAggregator fetches both concurrently and merges them into one
# timeline: pending (newest first) followed by confirmed, in node order.

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .transport import NodeTransport, RequestDescriptor, Verb

logger = logging.getLogger(__name__)

# Transaction type 1 = messaging (arbitrary / encrypted messages)
MESSAGE_TRANSACTION_TYPE = 1


@dataclass(frozen=True)
class EncryptedMessage:
    """Encrypted message carried in a transaction attachment."""

    data: str
    nonce: str
    is_text: bool = True
    is_compressed: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EncryptedMessage":
        return cls(
            data=raw["data"],
            nonce=raw["nonce"],
            is_text=bool(raw.get("isText", True)),
            is_compressed=bool(raw.get("isCompressed", False)),
        )


@dataclass(frozen=True)
class Transaction:
    """Read-only view over one transaction returned by the node.

    ``raw`` keeps the node's full mapping; the typed fields cover what the
    vault needs.
    """

    transaction: str
    timestamp: int
    confirmed: bool
    attachment: Dict[str, Any] = field(default_factory=dict)
    sender_rs: Optional[str] = None
    recipient_rs: Optional[str] = None
    amount_nqt: str = "0"
    fee_nqt: str = "0"
    type: Optional[int] = None
    subtype: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], confirmed: bool) -> "Transaction":
        return cls(
            transaction=str(raw.get("transaction", "")),
            timestamp=int(raw.get("timestamp") or 0),
            confirmed=confirmed,
            attachment=dict(raw.get("attachment") or {}),
            sender_rs=raw.get("senderRS"),
            recipient_rs=raw.get("recipientRS"),
            amount_nqt=str(raw.get("amountNQT", "0")),
            fee_nqt=str(raw.get("feeNQT", "0")),
            type=raw.get("type"),
            subtype=raw.get("subtype"),
            raw=dict(raw),
        )

    @property
    def encrypted_message(self) -> Optional[EncryptedMessage]:
        """The attachment's encrypted message, if it carries one."""
        message = self.attachment.get("encryptedMessage")
        if not isinstance(message, Mapping):
            return None
        if not message.get("data") or not message.get("nonce"):
            return None
        return EncryptedMessage.from_dict(message)

    def is_self_addressed(self, address: str) -> bool:
        """True when ``address`` both sent and received this transaction.

        ``address`` may be in Reed-Solomon or numeric form.
        """
        senders = {self.sender_rs, self.raw.get("sender")}
        recipients = {self.recipient_rs, self.raw.get("recipient")}
        return address in senders and address in recipients


class TransactionAggregator:
    """Merged confirmed + unconfirmed history for one account."""

    def __init__(self, transport: NodeTransport, address: str):
        self.transport = transport
        self.address = address

    def _history_params(self, with_message: bool, type: int) -> Dict[str, Any]:
        return {
            "account": self.address,
            "withMessage": with_message,
            "type": type,
        }

    async def list_transactions(
        self,
        with_message: bool = True,
        type: int = MESSAGE_TRANSACTION_TYPE,
    ) -> List[Transaction]:
        """Return unconfirmed (newest first) followed by confirmed.

        If either fetch fails the other is cancelled and the first error
        is raised as-is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                confirmed_task = group.create_task(
                    self.list_confirmed(with_message, type))
                unconfirmed_task = group.create_task(
                    self.list_unconfirmed(with_message, type))
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None
        confirmed = confirmed_task.result()
        unconfirmed = unconfirmed_task.result()
        logger.debug(
            "History for %s: %d unconfirmed, %d confirmed",
            self.address, len(unconfirmed), len(confirmed),
        )
        return unconfirmed + confirmed

    async def list_confirmed(
        self,
        with_message: bool = True,
        type: int = MESSAGE_TRANSACTION_TYPE,
    ) -> List[Transaction]:
        data = await self.transport.send(RequestDescriptor(
            Verb.GET,
            "getBlockchainTransactions",
            self._history_params(with_message, type),
        ))
        entries = data.get("transactions") or []
        return [Transaction.from_dict(entry, confirmed=True) for entry in entries]

    async def list_unconfirmed(
        self,
        with_message: bool = True,
        type: int = MESSAGE_TRANSACTION_TYPE,
    ) -> List[Transaction]:
        """Pending transactions, newest first.

        The node returns oldest-pending-first, so the order is reversed.
        """
        data = await self.transport.send(RequestDescriptor(
            Verb.POST,
            "getUnconfirmedTransactions",
            self._history_params(with_message, type),
        ))
        entries = data.get("unconfirmedTransactions") or []
        return [
            Transaction.from_dict(entry, confirmed=False)
            for entry in reversed(entries)
        ]
