from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from venus_indexer.constants import MAX_UINT256
from venus_indexer.exceptions import VenusIndexerValueError
from venus_indexer.numeric import exponent_to_decimal, format_decimal, normalize_mantissa


def test_exponent_to_decimal():
    assert exponent_to_decimal(0) == Decimal(1)
    assert exponent_to_decimal(18) == Decimal(10**18)
    with pytest.raises(VenusIndexerValueError):
        exponent_to_decimal(-1)


@pytest.mark.parametrize(
    ("mantissa", "decimals", "precision", "expected"),
    [
        (0, 18, None, "0"),
        (300 * 10**18, 18, None, "300"),
        (1418171344423412457, 18, None, "1.418171344423412457"),
        (12678493, 18, None, "0.000000000012678493"),
        (36504567163409, 8, None, "365045.67163409"),
        (37035970026454, 8, None, "370359.70026454"),
        (124620530798726345, 18, 8, "0.12462053"),
        # exchange rate for an 18 decimal underlying and an 8 decimal vToken
        (365045823500000000000000, 28, 18, "0.00003650458235"),
        # digits beyond the precision are truncated, not rounded
        (19999, 4, 2, "1.99"),
        (5, 1, 0, "0"),
    ],
)
def test_normalize_mantissa(mantissa: int, decimals: int, precision: int | None, expected: str):
    assert format_decimal(normalize_mantissa(mantissa, decimals, precision)) == expected


def test_normalize_max_uint256_is_exact():
    value = normalize_mantissa(MAX_UINT256, 18)
    assert format_decimal(value) == f"{str(MAX_UINT256)[:-18]}.{str(MAX_UINT256)[-18:]}"


def test_normalize_rejects_negative_decimals():
    with pytest.raises(VenusIndexerValueError):
        normalize_mantissa(1, -1)
    with pytest.raises(VenusIndexerValueError):
        normalize_mantissa(1, 18, precision=-1)


@given(
    mantissa=st.integers(min_value=0, max_value=MAX_UINT256),
    decimals=st.integers(min_value=0, max_value=36),
)
def test_normalize_is_exact_at_full_precision(mantissa: int, decimals: int):
    sign, digits, exponent = normalize_mantissa(mantissa, decimals).as_tuple()
    assert sign == 0
    assert exponent == -decimals
    assert int("".join(map(str, digits))) == mantissa


@given(
    mantissa=st.integers(min_value=0, max_value=10**24),
    decimals=st.integers(min_value=1, max_value=36),
    precision=st.integers(min_value=0, max_value=36),
)
def test_normalize_truncates_toward_zero(mantissa: int, decimals: int, precision: int):
    exact = normalize_mantissa(mantissa, decimals)
    truncated = normalize_mantissa(mantissa, decimals, precision)
    assert truncated <= exact
    assert exact - truncated < Decimal(f"1E-{precision}")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("300.000"), "300"),
        (Decimal("1E+2"), "100"),
        (Decimal("0E-18"), "0"),
        (Decimal("0.000036504582350000"), "0.00003650458235"),
    ],
)
def test_format_decimal(value: Decimal, expected: str):
    assert format_decimal(value) == expected
