from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venus_indexer.constants import AuctionStatus, AuctionType, TransactionType

from .base import Address, Base, BigDecimal, BigInteger
from .types import (
    ForeignKeyAccountId,
    ForeignKeyAccountVTokenId,
    ForeignKeyMarketId,
    ForeignKeyPoolId,
    ForeignKeyRewardsDistributorId,
    PrimaryKeyEntityId,
    TransactionHash,
)


class PoolTable(Base):
    """
    An isolated lending pool, identified by its comptroller.
    """

    __tablename__ = "pools"

    id: Mapped[PrimaryKeyEntityId]
    address: Mapped[Address]

    name: Mapped[str]
    creator: Mapped[Address | None]
    block_posted: Mapped[int | None]
    timestamp_posted: Mapped[int | None]
    risk_rating: Mapped[str | None]
    category: Mapped[str | None]
    logo_url: Mapped[str | None]
    description: Mapped[str | None]

    price_oracle_address: Mapped[Address | None]
    close_factor_mantissa: Mapped[BigInteger]
    liquidation_incentive_mantissa: Mapped[BigInteger]
    min_liquidatable_collateral_mantissa: Mapped[BigInteger]

    # Relationships
    markets: Mapped[list["MarketTable"]] = relationship(
        "MarketTable",
        back_populates="pool",
    )
    rewards_distributors: Mapped[list["RewardsDistributorTable"]] = relationship(
        "RewardsDistributorTable",
        back_populates="pool",
    )


class MarketTable(Base):
    """
    A vToken market. Raw on-chain values are stored in the `*_mantissa` columns; normalized decimal
    values are derived from them at write time.
    """

    __tablename__ = "markets"

    id: Mapped[PrimaryKeyEntityId]
    pool_id: Mapped[ForeignKeyPoolId]
    address: Mapped[Address]

    name: Mapped[str]
    symbol: Mapped[str]
    vtoken_decimals: Mapped[int]
    underlying_address: Mapped[Address]
    underlying_name: Mapped[str]
    underlying_symbol: Mapped[str]
    underlying_decimals: Mapped[int]
    interest_rate_model_address: Mapped[Address]
    access_control_manager_address: Mapped[Address | None]

    accrual_block_number: Mapped[int]
    block_timestamp: Mapped[int]

    borrow_rate_mantissa: Mapped[BigInteger]
    borrow_rate: Mapped[BigDecimal]
    supply_rate_mantissa: Mapped[BigInteger]
    supply_rate: Mapped[BigDecimal]
    cash_mantissa: Mapped[BigInteger]
    cash: Mapped[BigDecimal]
    exchange_rate_mantissa: Mapped[BigInteger]
    exchange_rate: Mapped[BigDecimal]
    borrow_index_mantissa: Mapped[BigInteger]
    borrow_index: Mapped[BigDecimal]
    underlying_price_mantissa: Mapped[BigInteger]
    underlying_price: Mapped[BigDecimal]

    reserves_mantissa: Mapped[BigInteger]
    reserve_factor_mantissa: Mapped[BigInteger]
    treasury_total_supply_mantissa: Mapped[BigInteger]
    treasury_total_borrows_mantissa: Mapped[BigInteger]
    bad_debt_mantissa: Mapped[BigInteger]
    collateral_factor_mantissa: Mapped[BigInteger]
    liquidation_threshold_mantissa: Mapped[BigInteger]
    supply_cap_mantissa: Mapped[BigInteger]
    borrow_cap_mantissa: Mapped[BigInteger]

    supplier_count: Mapped[int]
    borrower_count: Mapped[int]

    # Relationships
    pool: Mapped["PoolTable"] = relationship(
        "PoolTable",
        back_populates="markets",
    )
    positions: Mapped[list["AccountVTokenTable"]] = relationship(
        "AccountVTokenTable",
        back_populates="market",
    )


class AccountTable(Base):
    __tablename__ = "accounts"

    id: Mapped[PrimaryKeyEntityId]
    address: Mapped[Address]

    count_liquidated: Mapped[int]
    count_liquidator: Mapped[int]
    has_borrowed: Mapped[bool]

    # Relationships
    positions: Mapped[list["AccountVTokenTable"]] = relationship(
        "AccountVTokenTable",
        back_populates="account",
    )


class AccountVTokenTable(Base):
    """
    An account's position in a single market.
    """

    __tablename__ = "account_vtokens"

    id: Mapped[PrimaryKeyEntityId]
    market_id: Mapped[ForeignKeyMarketId]
    account_id: Mapped[ForeignKeyAccountId]

    symbol: Mapped[str]
    entered_market: Mapped[bool]
    accrual_block_number: Mapped[int]

    supply_balance_mantissa: Mapped[BigInteger]
    supply_balance: Mapped[BigDecimal]
    borrow_balance_mantissa: Mapped[BigInteger]
    borrow_balance: Mapped[BigDecimal]
    borrow_index_mantissa: Mapped[BigInteger]
    total_underlying_redeemed_mantissa: Mapped[BigInteger]
    total_underlying_repaid_mantissa: Mapped[BigInteger]

    # Relationships
    market: Mapped["MarketTable"] = relationship(
        "MarketTable",
        back_populates="positions",
    )
    account: Mapped["AccountTable"] = relationship(
        "AccountTable",
        back_populates="positions",
    )
    transactions: Mapped[list["AccountVTokenTransactionTable"]] = relationship(
        "AccountVTokenTransactionTable",
        back_populates="account_vtoken",
    )
    bad_debts: Mapped[list["AccountVTokenBadDebtTable"]] = relationship(
        "AccountVTokenBadDebtTable",
        back_populates="account_vtoken",
    )


class AccountVTokenTransactionTable(Base):
    __tablename__ = "account_vtoken_transactions"

    id: Mapped[PrimaryKeyEntityId]
    account_vtoken_id: Mapped[ForeignKeyAccountVTokenId]

    tx_hash: Mapped[TransactionHash]
    timestamp: Mapped[int]
    block: Mapped[int]
    log_index: Mapped[int]

    # Relationships
    account_vtoken: Mapped["AccountVTokenTable"] = relationship(
        "AccountVTokenTable",
        back_populates="transactions",
    )


class TransactionTable(Base):
    """
    An immutable record of a single market action.
    """

    __tablename__ = "transactions"

    id: Mapped[PrimaryKeyEntityId]
    market_id: Mapped[ForeignKeyMarketId]

    type: Mapped[TransactionType]
    from_address: Mapped[Address]
    to_address: Mapped[Address]

    amount_mantissa: Mapped[BigInteger]
    amount: Mapped[BigDecimal]
    underlying_amount_mantissa: Mapped[BigInteger | None]
    underlying_amount: Mapped[BigDecimal | None]
    underlying_repay_amount_mantissa: Mapped[BigInteger | None]
    underlying_repay_amount: Mapped[BigDecimal | None]

    tx_hash: Mapped[TransactionHash]
    log_index: Mapped[int]
    block_number: Mapped[int]
    block_time: Mapped[int]


class AccountVTokenBadDebtTable(Base):
    __tablename__ = "account_vtoken_bad_debts"

    id: Mapped[PrimaryKeyEntityId]
    account_vtoken_id: Mapped[ForeignKeyAccountVTokenId]

    amount_mantissa: Mapped[BigInteger]
    block: Mapped[int]
    timestamp: Mapped[int]

    # Relationships
    account_vtoken: Mapped["AccountVTokenTable"] = relationship(
        "AccountVTokenTable",
        back_populates="bad_debts",
    )


class RewardsDistributorTable(Base):
    __tablename__ = "rewards_distributors"

    id: Mapped[PrimaryKeyEntityId]
    pool_id: Mapped[ForeignKeyPoolId]
    address: Mapped[Address]
    reward_token_address: Mapped[Address]

    # Relationships
    pool: Mapped["PoolTable"] = relationship(
        "PoolTable",
        back_populates="rewards_distributors",
    )
    reward_speeds: Mapped[list["RewardSpeedTable"]] = relationship(
        "RewardSpeedTable",
        back_populates="rewards_distributor",
    )


class RewardSpeedTable(Base):
    __tablename__ = "reward_speeds"

    id: Mapped[PrimaryKeyEntityId]
    rewards_distributor_id: Mapped[ForeignKeyRewardsDistributorId]
    market_id: Mapped[ForeignKeyMarketId]

    supply_speed_per_block_mantissa: Mapped[BigInteger]
    borrow_speed_per_block_mantissa: Mapped[BigInteger]

    # Relationships
    rewards_distributor: Mapped["RewardsDistributorTable"] = relationship(
        "RewardsDistributorTable",
        back_populates="reward_speeds",
    )
    market: Mapped["MarketTable"] = relationship("MarketTable")


class AuctionTable(Base):
    """
    Shortfall auction state for a pool. There is at most one live auction per comptroller, so the
    record is reused across auction rounds.
    """

    __tablename__ = "auctions"

    id: Mapped[PrimaryKeyEntityId]
    comptroller_address: Mapped[Address]

    status: Mapped[AuctionStatus]
    type: Mapped[AuctionType]
    start_block: Mapped[int]
    seized_risk_fund_mantissa: Mapped[BigInteger]
    start_bid_bps: Mapped[int]

    # vToken addresses and the matching debt amounts, as decimal strings
    markets: Mapped[list[str]] = mapped_column(JSON)
    markets_debt: Mapped[list[str]] = mapped_column(JSON)

    highest_bidder: Mapped[Address | None]
    highest_bid_bps: Mapped[int | None]
    highest_bid_block: Mapped[int | None]


__all__ = (
    "AccountTable",
    "AccountVTokenBadDebtTable",
    "AccountVTokenTable",
    "AccountVTokenTransactionTable",
    "AuctionTable",
    "MarketTable",
    "PoolTable",
    "RewardSpeedTable",
    "RewardsDistributorTable",
    "TransactionTable",
)
