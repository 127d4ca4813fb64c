# Ledger Module - Jupiter Node Client
#
# - NQT <-> JUP conversion
# - Node transport (/nxt)
# - Merged transaction history
# - Account, balance, transfer and message operations

from .amounts import AmountConverter
from .client import LedgerClient
from .models import Account, TransactionReceipt
from .transactions import EncryptedMessage, Transaction, TransactionAggregator
from .transport import NodeTransport, RequestDescriptor, Verb

__all__ = [
    "AmountConverter",
    "LedgerClient",
    "Account",
    "TransactionReceipt",
    "EncryptedMessage",
    "Transaction",
    "TransactionAggregator",
    "NodeTransport",
    "RequestDescriptor",
    "Verb",
]
