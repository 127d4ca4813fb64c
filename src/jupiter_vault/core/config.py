# Core - Client Configuration
#
# Process-wide settings fixed at construction time:
#   node endpoint, account address + passphrase, optional encryption secret,
#   optional public key, fee, deadline, minimum balances, NQT precision.
#
# Values can be given explicitly or loaded from the environment (and an
# optional .env file via python-dotenv).

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_FEE_NQT = 150
DEFAULT_DEADLINE_MINUTES = 60
DEFAULT_MINIMUM_FUNDER_BALANCE = 50000
DEFAULT_MINIMUM_USER_BALANCE = 100000
DEFAULT_NQT_DECIMALS = 8
DEFAULT_TIMEOUT_SEC = 30.0

# Keys never echoed back by to_dict()
_SECRET_FIELDS = ("passphrase", "encrypt_secret")


@dataclass(frozen=True)
class ClientConfig:
    """Read-only configuration for a ledger client.

    Amounts (fee, minimum balances) are in NQT, the ledger's minor unit.
    ``deadline`` is in minutes.
    """

    server: str
    address: str
    passphrase: str
    encrypt_secret: Optional[str] = None
    public_key: Optional[str] = None
    fee_nqt: int = DEFAULT_FEE_NQT
    deadline: int = DEFAULT_DEADLINE_MINUTES
    minimum_funder_balance: int = DEFAULT_MINIMUM_FUNDER_BALANCE
    minimum_user_balance: int = DEFAULT_MINIMUM_USER_BALANCE
    nqt_decimals: int = DEFAULT_NQT_DECIMALS
    timeout: Optional[float] = DEFAULT_TIMEOUT_SEC

    def __post_init__(self):
        for name in ("server", "address", "passphrase"):
            if not getattr(self, name):
                raise ConfigError(f"{name} is required")
        if self.fee_nqt < 0:
            raise ConfigError(f"fee_nqt must be >= 0, got {self.fee_nqt}")
        if self.deadline < 1:
            raise ConfigError(f"deadline must be >= 1 minute, got {self.deadline}")
        if self.minimum_funder_balance < 0 or self.minimum_user_balance < 0:
            raise ConfigError("minimum balances must be >= 0")
        if not 0 <= self.nqt_decimals <= 18:
            raise ConfigError(
                f"nqt_decimals must be between 0 and 18, got {self.nqt_decimals}"
            )

    @property
    def encryption_secret(self) -> str:
        """Secret used for record encryption (explicit secret wins)."""
        return self.encrypt_secret or self.passphrase

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the config with secrets redacted."""
        data = asdict(self)
        for name in _SECRET_FIELDS:
            if data.get(name):
                data[name] = "***"
        return data

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        **overrides: Any,
    ) -> "ClientConfig":
        """Build a config from ``JUPITER_*`` environment variables.

        Args:
            env_file: Optional .env file loaded first (existing environment
                      variables take precedence).
            **overrides: Explicit values that win over the environment.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)

        values: Dict[str, Any] = {
            "server": os.environ.get("JUPITER_SERVER", ""),
            "address": os.environ.get("JUPITER_ADDRESS", ""),
            "passphrase": os.environ.get("JUPITER_PASSPHRASE", ""),
            "encrypt_secret": os.environ.get("JUPITER_ENCRYPT_SECRET") or None,
            "public_key": os.environ.get("JUPITER_PUBLIC_KEY") or None,
            "fee_nqt": _env_int("JUPITER_FEE_NQT", DEFAULT_FEE_NQT),
            "deadline": _env_int("JUPITER_DEADLINE", DEFAULT_DEADLINE_MINUTES),
            "minimum_funder_balance": _env_int(
                "JUPITER_MIN_FUNDER_BALANCE", DEFAULT_MINIMUM_FUNDER_BALANCE
            ),
            "minimum_user_balance": _env_int(
                "JUPITER_MIN_USER_BALANCE", DEFAULT_MINIMUM_USER_BALANCE
            ),
            "nqt_decimals": _env_int("JUPITER_NQT_DECIMALS", DEFAULT_NQT_DECIMALS),
            "timeout": _env_float("JUPITER_TIMEOUT", DEFAULT_TIMEOUT_SEC),
        }
        values.update(overrides)
        return cls(**values)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
