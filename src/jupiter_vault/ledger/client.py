# Ledger - Client Operations
#
# Account, balance, transfer and message operations built from
# NodeTransport + RecordCodec + AmountConverter.
#
# Write failures: the node answers HTTP 200 even when it rejects a
# transaction, so every write response is checked for a non-zero errorCode
# and a missing signatureHash.  Nothing is retried.

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..core.audit_log import AuditLogger, EventType, get_audit_logger
from ..core.config import ClientConfig
from ..core.errors import LedgerOperationError
from ..vault.encryption import AESGCMEncryption, EncryptionAdapter
from ..vault.record_codec import RecordCodec
from .amounts import AmountConverter
from .models import Account, TransactionReceipt
from .transactions import (
    MESSAGE_TRANSACTION_TYPE,
    EncryptedMessage,
    Transaction,
    TransactionAggregator,
)
from .transport import NodeTransport, RequestDescriptor, Verb

logger = logging.getLogger(__name__)


def _has_error_code(data: Mapping[str, Any]) -> bool:
    return data.get("errorCode") not in (None, 0, "0")


def check_write_response(data: Mapping[str, Any]) -> TransactionReceipt:
    """Validate a transaction-creating response.

    Raises:
        LedgerOperationError: non-zero ``errorCode`` or null ``signatureHash``.
    """
    if _has_error_code(data) or data.get("signatureHash") is None:
        raise LedgerOperationError(data)
    return TransactionReceipt.from_dict(data)


def check_read_response(data: Mapping[str, Any], field: str) -> Any:
    """Return ``data[field]`` or raise if the node reported an error."""
    if _has_error_code(data) or field not in data:
        raise LedgerOperationError(data)
    return data[field]


class LedgerClient:
    """Password-record client for a Jupiter node.

    Capabilities (transport, encryption) are injected or built from the
    config; nothing is shared between instances.

    Usage::

        config = ClientConfig.from_env()
        async with LedgerClient(config) as client:
            print(await client.get_balance())
            await client.store_record({"site": "example.com", "password": "..."})
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[NodeTransport] = None,
        encryption: Optional[EncryptionAdapter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.config = config
        self._owns_transport = transport is None
        self.transport = transport or NodeTransport(config.server, timeout=config.timeout)
        self.codec = RecordCodec(encryption or AESGCMEncryption(config.encryption_secret))
        self.amounts = AmountConverter(config.nqt_decimals)
        self.aggregator = TransactionAggregator(self.transport, config.address)
        self.audit = audit_logger or get_audit_logger()

    @property
    def record_key(self) -> str:
        return self.codec.record_key

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport this client created.

        An injected transport and the audit logger belong to the caller
        and stay open.
        """
        if self._owns_transport:
            await self.transport.aclose()

    # ------------------------------------------------------------------
    # Balances & accounts
    # ------------------------------------------------------------------

    async def get_balance_nqt(self, address: Optional[str] = None) -> str:
        """Raw balance in NQT for ``address`` (default: configured account)."""
        data = await self.transport.send(RequestDescriptor(
            Verb.GET,
            "getBalance",
            {"account": address or self.config.address},
        ))
        return str(check_read_response(data, "balanceNQT"))

    async def get_balance(self, address: Optional[str] = None) -> str:
        """Balance in JUP for ``address`` (default: configured account)."""
        return self.amounts.to_major(await self.get_balance_nqt(address))

    async def is_funded(self, address: Optional[str] = None) -> bool:
        """True when the balance covers the minimum user balance."""
        balance = self.amounts.minor_as_int(await self.get_balance_nqt(address))
        return balance >= self.config.minimum_user_balance

    async def create_account(self, passphrase: str) -> Account:
        """Derive the account for ``passphrase``.

        The node only computes the address; the account exists on the
        ledger once it receives its first funded transaction.
        """
        data = await self.transport.send(RequestDescriptor(
            Verb.POST,
            "getAccountId",
            {"secretPhrase": passphrase},
        ))
        check_read_response(data, "accountRS")
        account = Account.from_dict(data)
        self.audit.log_ledger_event(
            EventType.ACCOUNT_CREATED,
            "Account derived from passphrase",
            details={"address": account.address},
        )
        return account

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def transfer(self, recipient: str) -> TransactionReceipt:
        """Send the minimum funding amount to ``recipient``."""
        data = await self.transport.send(RequestDescriptor(
            Verb.POST,
            "sendMoney",
            {
                "secretPhrase": self.config.passphrase,
                "recipient": recipient,
                "amountNQT": self.config.minimum_funder_balance,
                "feeNQT": self.config.fee_nqt,
                "deadline": self.config.deadline,
            },
        ))
        try:
            receipt = check_write_response(data)
        except LedgerOperationError as exc:
            logger.warning("sendMoney to %s rejected (errorCode=%s)", recipient, exc.error_code)
            self.audit.log_ledger_event(
                EventType.TRANSFER_FAILED,
                f"Transfer to {recipient} rejected",
                details={"recipient": recipient, "error_code": exc.error_code},
                failed=True,
            )
            raise

        self.audit.log_ledger_event(
            EventType.TRANSFER_SENT,
            f"Transfer to {recipient}",
            details={
                "recipient": recipient,
                "amount_nqt": self.config.minimum_funder_balance,
                "transaction": receipt.transaction,
            },
        )
        return receipt

    async def store_record(self, record: Mapping[str, Any]) -> TransactionReceipt:
        """Encrypt ``record`` and send it as a message to our own account."""
        message = await self.codec.encode_record(record)
        data = await self.transport.send(RequestDescriptor(
            Verb.POST,
            "sendMessage",
            {
                "secretPhrase": self.config.passphrase,
                "recipient": self.config.address,
                "recipientPublicKey": self.config.public_key,
                "messageToEncrypt": message,
                "feeNQT": self.config.fee_nqt,
                "deadline": self.config.deadline,
                "compressMessageToEncrypt": True,
            },
        ))
        try:
            receipt = check_write_response(data)
        except LedgerOperationError as exc:
            logger.warning("sendMessage rejected (errorCode=%s)", exc.error_code)
            self.audit.log_vault_event(
                EventType.RECORD_FAILED,
                "Record rejected by node",
                details={"error_code": exc.error_code},
                failed=True,
            )
            raise

        self.audit.log_vault_event(
            EventType.RECORD_STORED,
            "Record stored",
            details={
                "transaction": receipt.transaction,
                "fields": sorted(str(k) for k in record if k != self.record_key),
            },
        )
        return receipt

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_decrypted_message(self, attachment: Any) -> str:
        """Ask the node to decrypt a message addressed to our account.

        ``attachment`` is an EncryptedMessage or a mapping with ``data`` and
        ``nonce``.  Returns the raw decrypted string.
        """
        if isinstance(attachment, EncryptedMessage):
            data_field, nonce = attachment.data, attachment.nonce
        else:
            data_field, nonce = attachment["data"], attachment["nonce"]

        data = await self.transport.send(RequestDescriptor(
            Verb.GET,
            "decryptFrom",
            {
                "secretPhrase": self.config.passphrase,
                "account": self.config.address,
                "data": data_field,
                "nonce": nonce,
            },
        ))
        return check_read_response(data, "decryptedMessage")

    async def list_transactions(
        self,
        with_message: bool = True,
        type: int = MESSAGE_TRANSACTION_TYPE,
    ) -> List[Transaction]:
        """Merged history: pending (newest first) then confirmed."""
        return await self.aggregator.list_transactions(with_message, type)

    async def parse_encrypted_record(self, ciphertext: str) -> Dict[str, Any]:
        """Decrypt and parse a record payload produced by ``store_record``."""
        return await self.codec.decode_record(ciphertext)
