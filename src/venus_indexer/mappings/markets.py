from sqlalchemy import select
from sqlalchemy.orm import Session

from venus_indexer.chain import ChainReader
from venus_indexer.constants import (
    MANTISSA_FACTOR,
    PRICE_MANTISSA_FACTOR,
    ZERO_ADDRESS,
    TransactionType,
)
from venus_indexer.database.models import MarketTable, PoolTable, TransactionTable
from venus_indexer.events import DecodedEvent
from venus_indexer.ids import get_transaction_event_id
from venus_indexer.logging import logger
from venus_indexer.numeric import normalize_mantissa

from .accessors import get_or_create_market


def update_market(
    session: Session,
    reader: ChainReader,
    vtoken: str,
    block_timestamp: int,
) -> MarketTable:
    """
    Refresh the interest accrual state of a market from live contract reads.
    """

    market = get_or_create_market(session, reader, vtoken, block_timestamp=block_timestamp)
    address = market.address

    market.accrual_block_number = reader.accrual_block_number(address)
    market.block_timestamp = block_timestamp
    market.treasury_total_supply_mantissa = reader.total_supply(address)
    market.treasury_total_borrows_mantissa = reader.total_borrows(address)
    market.reserves_mantissa = reader.total_reserves(address)

    # The exchange rate is scaled by 1e(18 + underlying decimals - vToken decimals)
    market.exchange_rate_mantissa = reader.exchange_rate_stored(address)
    market.exchange_rate = normalize_mantissa(
        market.exchange_rate_mantissa,
        MANTISSA_FACTOR + market.underlying_decimals - market.vtoken_decimals,
        precision=MANTISSA_FACTOR,
    )

    market.borrow_index_mantissa = reader.borrow_index(address)
    market.borrow_index = normalize_mantissa(market.borrow_index_mantissa, MANTISSA_FACTOR)

    market.cash_mantissa = reader.get_cash(address)
    market.cash = normalize_mantissa(market.cash_mantissa, market.underlying_decimals)

    market.borrow_rate_mantissa = reader.borrow_rate_per_block(address)
    market.borrow_rate = normalize_mantissa(market.borrow_rate_mantissa, MANTISSA_FACTOR)
    market.supply_rate_mantissa = reader.supply_rate_per_block(address)
    market.supply_rate = normalize_mantissa(market.supply_rate_mantissa, MANTISSA_FACTOR)

    oracle = session.scalar(
        select(PoolTable.price_oracle_address).where(PoolTable.id == market.pool_id)
    )
    if oracle is not None and oracle != ZERO_ADDRESS:
        market.underlying_price_mantissa = reader.get_underlying_price(oracle, address)
        market.underlying_price = normalize_mantissa(
            market.underlying_price_mantissa,
            PRICE_MANTISSA_FACTOR - market.underlying_decimals,
            precision=MANTISSA_FACTOR,
        )

    logger.debug(
        f"Updated market {market.symbol} at accrual block {market.accrual_block_number}: "
        f"exchange rate {market.exchange_rate}, borrow index {market.borrow_index}"
    )
    return market


def create_transaction(
    session: Session,
    event: DecodedEvent,
    market: MarketTable,
    transaction_type: TransactionType,
    from_address: str,
    to_address: str,
    amount_mantissa: int,
    amount_decimals: int,
    underlying_amount_mantissa: int | None = None,
    underlying_repay_amount_mantissa: int | None = None,
) -> TransactionTable:
    """
    Record a market action. Amounts are stored raw and normalized: `amount` with the given decimals,
    underlying amounts with the decimals of the market's underlying token.
    """

    underlying_decimals = market.underlying_decimals
    transaction = TransactionTable(
        id=get_transaction_event_id(event.transaction_hash, event.log_index),
        market_id=market.id,
        type=transaction_type,
        from_address=from_address,
        to_address=to_address,
        amount_mantissa=amount_mantissa,
        amount=normalize_mantissa(amount_mantissa, amount_decimals),
        underlying_amount_mantissa=underlying_amount_mantissa,
        underlying_amount=(
            None
            if underlying_amount_mantissa is None
            else normalize_mantissa(underlying_amount_mantissa, underlying_decimals)
        ),
        underlying_repay_amount_mantissa=underlying_repay_amount_mantissa,
        underlying_repay_amount=(
            None
            if underlying_repay_amount_mantissa is None
            else normalize_mantissa(underlying_repay_amount_mantissa, underlying_decimals)
        ),
        tx_hash=event.transaction_hash.to_0x_hex(),
        log_index=event.log_index,
        block_number=event.block_number,
        block_time=event.block_timestamp,
    )
    # Replays of the same log overwrite the existing record
    return session.merge(transaction)
