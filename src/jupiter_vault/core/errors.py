# Core - Error Taxonomy
#
# Every failure surfaced by the client maps to one of these classes:
#   TransportError       - network / HTTP failure talking to the node
#   LedgerOperationError - node answered, but reported a business-level error
#   EncryptionError      - wrong secret or malformed ciphertext
#   RecordFormatError    - decrypted content is not a structured record
#
# Nothing in the core catches these and carries on; callers decide.

import json
from typing import Any, Mapping, Optional


class JupiterVaultError(Exception):
    """Base class for all jupiter_vault errors."""


class ConfigError(JupiterVaultError):
    """Raised when client configuration is missing or invalid."""


class AmountError(JupiterVaultError, ValueError):
    """Raised when an amount cannot be converted exactly."""


class TransportError(JupiterVaultError):
    """Raised when a request to the ledger node fails at the HTTP level.

    Carries the verb and path of the failed call plus the underlying
    cause (an ``httpx`` exception or a decoding error).
    """

    def __init__(self, verb: str, path: str, cause: BaseException):
        self.verb = verb
        self.path = path
        self.cause = cause
        super().__init__(f"{verb.upper()} {path} failed: {cause}")


class LedgerOperationError(JupiterVaultError):
    """Raised when the node accepts a call but reports an error.

    The message is the full raw response serialised as JSON so operators
    can see exactly what the node said.
    """

    def __init__(self, response: Mapping[str, Any], message: Optional[str] = None):
        self.response = dict(response)
        if message is None:
            message = json.dumps(self.response, sort_keys=True, default=str)
        super().__init__(message)

    @property
    def error_code(self) -> Optional[int]:
        return self.response.get("errorCode")


class EncryptionError(JupiterVaultError):
    """Raised when encryption or decryption fails.

    Never includes plaintext in its message.
    """


class RecordFormatError(JupiterVaultError):
    """Raised when decrypted content is not a valid structured record."""
