# Ledger - Amount Converter
#
# Balances from the node come back as NQT, the ledger's smallest unit.
# 1 JUP = 10^decimals NQT (decimals = 8 by default).
#
# All arithmetic is done with decimal.Decimal in a local context wide enough
# for the operand, so conversions are exact in both directions.  Amounts
# that would need rounding are rejected rather than truncated.

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from ..core.config import DEFAULT_NQT_DECIMALS
from ..core.errors import AmountError

AmountInput = Union[str, int, Decimal]


def _to_decimal(value: AmountInput, what: str) -> Decimal:
    # bool is an int subclass; floats have already lost precision
    if isinstance(value, (bool, float)):
        raise AmountError(f"{what} must be a decimal string, got {type(value).__name__}")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise AmountError(f"{what} is not a number: {value!r}") from None
    if not amount.is_finite():
        raise AmountError(f"{what} must be finite: {value!r}")
    if amount < 0:
        raise AmountError(f"{what} must be non-negative: {value!r}")
    return amount


def format_amount(amount: Decimal) -> str:
    """Render a Decimal in plain notation without trailing zeros.

    ``Decimal("1.50")`` -> ``"1.5"``, ``Decimal("1E+3")`` -> ``"1000"``.
    """
    with localcontext() as ctx:
        ctx.prec = max(len(amount.as_tuple().digits), 1) + 2
        normalized = amount.normalize()
        if normalized.is_zero():
            return "0"
        return format(normalized, "f")


class AmountConverter:
    """Exact NQT <-> JUP conversion.

    Usage::

        converter = AmountConverter(decimals=8)
        converter.to_major("150000000")   # "1.5"
        converter.to_minor("1.5")         # "150000000"
    """

    def __init__(self, decimals: int = DEFAULT_NQT_DECIMALS):
        if decimals < 0:
            raise AmountError(f"decimals must be >= 0, got {decimals}")
        self.decimals = decimals

    def _precision_for(self, amount: Decimal) -> int:
        digits = len(amount.as_tuple().digits)
        return digits + self.decimals + abs(amount.as_tuple().exponent) + 2

    def to_major(self, minor: AmountInput) -> str:
        """Convert NQT (integer string) to JUP (decimal string)."""
        amount = _to_decimal(minor, "minor amount")
        if amount != amount.to_integral_value():
            raise AmountError(f"minor amount must be a whole number: {minor!r}")
        with localcontext() as ctx:
            ctx.prec = self._precision_for(amount)
            return format_amount(amount.scaleb(-self.decimals))

    def to_minor(self, major: AmountInput) -> str:
        """Convert JUP (decimal string) to NQT (integer string).

        Raises:
            AmountError: if the result would contain fractional NQT.
        """
        amount = _to_decimal(major, "major amount")
        with localcontext() as ctx:
            ctx.prec = self._precision_for(amount)
            scaled = amount.scaleb(self.decimals)
            if scaled != scaled.to_integral_value():
                raise AmountError(
                    f"{major!r} has more than {self.decimals} decimal places"
                )
            return format_amount(scaled)

    def minor_as_int(self, minor: AmountInput) -> int:
        """Parse an NQT amount into an int (exact)."""
        amount = _to_decimal(minor, "minor amount")
        if amount != amount.to_integral_value():
            raise AmountError(f"minor amount must be a whole number: {minor!r}")
        return int(amount)
