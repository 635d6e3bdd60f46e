"""
Fixed-point to decimal conversion.

On-chain values are integers scaled by a power of ten (a "mantissa"). Conversion is done with
integer arithmetic and the result is built from a string, so no decimal context rounding is ever
applied. Values that do not fit in the requested precision are truncated toward zero, matching the
EVM's integer division.
"""

from decimal import Decimal

from venus_indexer.exceptions import VenusIndexerValueError
from venus_indexer.functions import evm_divide


def _scaled_decimal(value: int, exponent: int) -> Decimal:
    """
    Build the exact decimal `value * 10**-exponent`.
    """

    return Decimal(f"{value}E-{exponent}")


def exponent_to_decimal(decimals: int) -> Decimal:
    """
    Return 10**decimals as an exact Decimal.
    """

    if decimals < 0:
        raise VenusIndexerValueError(message=f"Invalid decimals {decimals}")
    return Decimal(f"1E{decimals}")


def normalize_mantissa(mantissa: int, decimals: int, precision: int | None = None) -> Decimal:
    """
    Convert an integer scaled by 10**decimals to a Decimal, truncated toward zero at `precision`
    fractional digits. The precision defaults to the number of decimals, which is always exact.
    """

    if precision is None:
        precision = decimals

    if decimals < 0 or precision < 0:
        raise VenusIndexerValueError(
            message=f"Invalid decimals ({decimals}) or precision ({precision})"
        )

    if precision >= decimals:
        return _scaled_decimal(mantissa, decimals)

    return _scaled_decimal(
        evm_divide(mantissa, 10 ** (decimals - precision)),
        precision,
    )


def format_decimal(value: Decimal) -> str:
    """
    Format a decimal in plain notation without trailing zeros, e.g. '300' or '0.00003650458235'.
    """

    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"", "-0"}:
        text = "0"
    return text
