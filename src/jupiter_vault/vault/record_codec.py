# Vault - Record Codec
#
# record (mapping) -> JSON + discriminator -> encrypted ledger message
# encrypted ledger message -> decrypted JSON -> record (mapping)
#
# The discriminator key marks a payload as one of our password records, as
# opposed to any other message somebody sent to the same account.  It is
# embedded in every stored record, so it must never change.

import json
from typing import Any, Dict, Mapping

from ..core.errors import EncryptionError, RecordFormatError
from .encryption import EncryptionAdapter

RECORD_KEY = "__jupiter-password-manager"


class RecordCodec:
    """Serialize records into encrypted payloads and back.

    The codec does not filter by discriminator; use ``is_record`` on the
    decoded mapping when scanning arbitrary messages.
    """

    record_key = RECORD_KEY

    def __init__(self, encryption: EncryptionAdapter):
        self.encryption = encryption

    async def encode_record(self, record: Mapping[str, Any]) -> str:
        """Tag ``record`` with the discriminator and encrypt it."""
        if not isinstance(record, Mapping):
            raise RecordFormatError(
                f"record must be a mapping, got {type(record).__name__}"
            )
        payload = dict(record)
        payload[RECORD_KEY] = True
        try:
            plaintext = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise RecordFormatError(f"record is not JSON-serialisable: {exc}") from exc
        return await self.encryption.encrypt(plaintext)

    async def decode_record(self, ciphertext: str) -> Dict[str, Any]:
        """Decrypt and parse a payload.

        Raises:
            EncryptionError: wrong secret or malformed ciphertext.
            RecordFormatError: decrypted text is not a JSON object.
        """
        plaintext = await self.encryption.decrypt(ciphertext)
        if not isinstance(plaintext, str):
            raise EncryptionError("decryption returned a non-text payload")
        return self.parse_record(plaintext)

    @staticmethod
    def parse_record(plaintext: str) -> Dict[str, Any]:
        """Parse decrypted text as a record mapping."""
        try:
            data = json.loads(plaintext)
        except (TypeError, ValueError) as exc:
            raise RecordFormatError("decrypted content is not valid JSON") from exc
        if not isinstance(data, dict):
            raise RecordFormatError(
                f"decrypted content is a JSON {type(data).__name__}, not an object"
            )
        return data

    @staticmethod
    def is_record(data: Mapping[str, Any]) -> bool:
        """True when ``data`` carries our discriminator set to true."""
        return data.get(RECORD_KEY) is True

    @staticmethod
    def strip_marker(data: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the record fields without the discriminator."""
        return {k: v for k, v in data.items() if k != RECORD_KEY}
