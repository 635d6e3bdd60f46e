__all__ = (
    "AUCTION_TYPES",
    "MANTISSA_FACTOR",
    "MAX_UINT256",
    "MIN_UINT256",
    "PRICE_MANTISSA_FACTOR",
    "RISK_RATINGS",
    "VTOKEN_DECIMALS",
    "ZERO_ADDRESS",
    "AuctionStatus",
    "AuctionType",
    "TransactionType",
)

import typing
from enum import Enum

from eth_typing import ChecksumAddress

from venus_indexer.checksum_cache import get_checksum_address


def _max_uint(bits: int) -> int:
    return typing.cast("int", 2**bits - 1)


MIN_UINT256 = 0
MAX_UINT256 = _max_uint(256)

ZERO_ADDRESS: ChecksumAddress = get_checksum_address("0x0000000000000000000000000000000000000000")

# Rates, indices and exchange rates are scaled by 1e18
MANTISSA_FACTOR = 18

# Oracle prices are scaled by 1e(36 - underlying decimals)
PRICE_MANTISSA_FACTOR = 36

# Default precision for vTokens, used until the contract has been read
VTOKEN_DECIMALS = 8


class TransactionType(Enum):
    MINT = "MINT"
    REDEEM = "REDEEM"
    BORROW = "BORROW"
    REPAY = "REPAY"
    LIQUIDATE = "LIQUIDATE"
    TRANSFER = "TRANSFER"


class AuctionStatus(Enum):
    NOT_STARTED = "NOT_STARTED"
    STARTED = "STARTED"
    ENDED = "ENDED"


class AuctionType(Enum):
    LARGE_POOL_DEBT = "LARGE_POOL_DEBT"
    LARGE_RISK_FUND = "LARGE_RISK_FUND"


# Ordered by the on-chain enum value
AUCTION_TYPES: tuple[AuctionType, ...] = (
    AuctionType.LARGE_POOL_DEBT,
    AuctionType.LARGE_RISK_FUND,
)
RISK_RATINGS: tuple[str, ...] = (
    "VERY_HIGH_RISK",
    "HIGH_RISK",
    "MEDIUM_RISK",
    "LOW_RISK",
    "MINIMAL_RISK",
)
