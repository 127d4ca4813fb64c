# Ledger - Value Types
#
# Account and TransactionReceipt are immutable snapshots of what the node
# returned.  Transaction and EncryptedMessage live in transactions.py.

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Account:
    """A ledger account derived from a passphrase."""

    address: str  # Reed-Solomon form, e.g. "JUP-XXXX-XXXX-XXXX-XXXXX"
    public_key: Optional[str] = None
    account_id: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Account":
        account_id = raw.get("account")
        return cls(
            address=raw["accountRS"],
            public_key=raw.get("publicKey"),
            account_id=str(account_id) if account_id is not None else None,
        )


@dataclass(frozen=True)
class TransactionReceipt:
    """Node response to a successfully submitted transaction."""

    signature_hash: str
    transaction: Optional[str] = None
    full_hash: Optional[str] = None
    broadcasted: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TransactionReceipt":
        return cls(
            signature_hash=raw["signatureHash"],
            transaction=raw.get("transaction"),
            full_hash=raw.get("fullHash"),
            broadcasted=bool(raw.get("broadcasted", False)),
            raw=dict(raw),
        )
