"""
Handlers for vToken events.

Supply balances are taken from a live account snapshot after each balance-changing event, and
overwrite the stored value. Borrow balances are taken from the `accountBorrows` value emitted by the
contract. Supplier and borrower counts are inferred from the balance after the event: an account
whose post-event balance equals the amount just added held nothing before, and an account left with
a zero balance after a non-zero removal has exited.
"""

from venus_indexer.constants import MANTISSA_FACTOR, ZERO_ADDRESS, TransactionType
from venus_indexer.database.models import AccountVTokenBadDebtTable, AccountVTokenTable, MarketTable
from venus_indexer.events import DecodedEvent
from venus_indexer.ids import get_bad_debt_event_id
from venus_indexer.logging import logger
from venus_indexer.numeric import normalize_mantissa

from .accessors import (
    get_or_create_account,
    get_or_create_account_vtoken,
    get_or_create_account_vtoken_transaction,
    get_or_create_market,
)
from .context import EventHandlerContext
from .markets import create_transaction, update_market


def _get_market(context: EventHandlerContext) -> MarketTable:
    return get_or_create_market(
        context.session,
        context.reader,
        context.event.address,
        block_timestamp=context.event.block_timestamp,
    )


def _record_position_transaction(
    context: EventHandlerContext,
    position: AccountVTokenTable,
    account: str,
) -> None:
    event = context.event
    get_or_create_account_vtoken_transaction(
        context.session,
        position=position,
        account=account,
        tx_hash=event.transaction_hash,
        timestamp=event.block_timestamp,
        block=event.block_number,
        log_index=event.log_index,
    )


def _refresh_supply_balance(
    context: EventHandlerContext,
    market: MarketTable,
    account: str,
) -> AccountVTokenTable:
    """
    Overwrite the stored supply balance of a position with the live snapshot value.
    """

    position = get_or_create_account_vtoken(context.session, context.reader, market, account)
    snapshot = context.reader.get_account_snapshot(market.address, account)
    position.supply_balance_mantissa = snapshot.vtoken_balance
    position.supply_balance = normalize_mantissa(snapshot.vtoken_balance, market.vtoken_decimals)
    position.accrual_block_number = context.event.block_number
    _record_position_transaction(context, position, account)
    return position


def _set_borrow_balance(
    context: EventHandlerContext,
    market: MarketTable,
    position: AccountVTokenTable,
    account_borrows: int,
) -> None:
    position.borrow_balance_mantissa = account_borrows
    position.borrow_balance = normalize_mantissa(account_borrows, market.underlying_decimals)
    position.borrow_index_mantissa = market.borrow_index_mantissa
    position.accrual_block_number = context.event.block_number


def _log_event(event: DecodedEvent, market: MarketTable) -> None:
    logger.debug(
        f"{event.name} on {market.symbol} at block {event.block_number} "
        f"(log {event.log_index}): {event.params}"
    )


def handle_mint(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    minter: str = event.params["minter"]
    mint_tokens: int = event.params["mintTokens"]
    _log_event(event, market)

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.MINT,
        from_address=market.address,
        to_address=minter,
        amount_mantissa=mint_tokens,
        amount_decimals=market.vtoken_decimals,
        underlying_amount_mantissa=event.params["mintAmount"],
    )

    position = _refresh_supply_balance(context, market, minter)
    if mint_tokens > 0 and position.supply_balance_mantissa == mint_tokens:
        market.supplier_count += 1


def handle_redeem(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    redeemer: str = event.params["redeemer"]
    redeem_tokens: int = event.params["redeemTokens"]
    redeem_amount: int = event.params["redeemAmount"]
    _log_event(event, market)

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.REDEEM,
        from_address=market.address,
        to_address=redeemer,
        amount_mantissa=redeem_tokens,
        amount_decimals=market.vtoken_decimals,
        underlying_amount_mantissa=redeem_amount,
    )

    position = _refresh_supply_balance(context, market, redeemer)
    position.total_underlying_redeemed_mantissa += redeem_amount
    if redeem_tokens > 0 and position.supply_balance_mantissa == 0:
        market.supplier_count -= 1


def handle_borrow(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    borrower: str = event.params["borrower"]
    borrow_amount: int = event.params["borrowAmount"]
    account_borrows: int = event.params["accountBorrows"]
    _log_event(event, market)

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.BORROW,
        from_address=market.address,
        to_address=borrower,
        amount_mantissa=borrow_amount,
        amount_decimals=market.underlying_decimals,
    )

    get_or_create_account(context.session, borrower).has_borrowed = True
    position = get_or_create_account_vtoken(context.session, context.reader, market, borrower)
    _set_borrow_balance(context, market, position, account_borrows)
    _record_position_transaction(context, position, borrower)

    if borrow_amount > 0 and account_borrows == borrow_amount:
        market.borrower_count += 1


def handle_repay_borrow(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    borrower: str = event.params["borrower"]
    repay_amount: int = event.params["repayAmount"]
    account_borrows: int = event.params["accountBorrows"]
    _log_event(event, market)

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.REPAY,
        from_address=market.address,
        to_address=borrower,
        amount_mantissa=repay_amount,
        amount_decimals=market.underlying_decimals,
    )

    position = get_or_create_account_vtoken(context.session, context.reader, market, borrower)
    _set_borrow_balance(context, market, position, account_borrows)
    position.total_underlying_repaid_mantissa += repay_amount
    _record_position_transaction(context, position, borrower)

    if repay_amount > 0 and account_borrows == 0:
        market.borrower_count -= 1


def handle_liquidate_borrow(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    liquidator: str = event.params["liquidator"]
    borrower: str = event.params["borrower"]
    _log_event(event, market)

    get_or_create_account(context.session, borrower).count_liquidated += 1
    get_or_create_account(context.session, liquidator).count_liquidator += 1

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.LIQUIDATE,
        from_address=market.address,
        to_address=borrower,
        amount_mantissa=event.params["seizeTokens"],
        amount_decimals=market.vtoken_decimals,
        underlying_repay_amount_mantissa=event.params["repayAmount"],
    )


def handle_transfer(context: EventHandlerContext) -> None:
    """
    Process a vToken transfer.

    Mints and redeems emit a transfer from or to the market itself. The market side has no position
    and is skipped, and the supplier count for those transfers is maintained by the mint and redeem
    handlers. Wallet-to-wallet transfers update the supplier count on both sides.
    """

    event = context.event
    market = _get_market(context)
    from_address: str = event.params["from"]
    to_address: str = event.params["to"]
    amount: int = event.params["amount"]
    _log_event(event, market)

    if market.accrual_block_number != event.block_number:
        update_market(
            context.session,
            context.reader,
            market.address,
            block_timestamp=event.block_timestamp,
        )

    create_transaction(
        context.session,
        event=event,
        market=market,
        transaction_type=TransactionType.TRANSFER,
        from_address=from_address,
        to_address=to_address,
        amount_mantissa=amount,
        amount_decimals=market.vtoken_decimals,
    )

    non_wallet_addresses = {market.address, ZERO_ADDRESS}

    # A transfer to self moves no tokens, so presence and redeemed totals are unchanged
    if from_address == to_address:
        if from_address not in non_wallet_addresses:
            _refresh_supply_balance(context, market, from_address)
        return

    wallet_to_wallet = (
        from_address not in non_wallet_addresses and to_address not in non_wallet_addresses
    )

    if from_address not in non_wallet_addresses:
        sender = _refresh_supply_balance(context, market, from_address)
        if wallet_to_wallet:
            sender.total_underlying_redeemed_mantissa += (
                amount * market.exchange_rate_mantissa // 10**MANTISSA_FACTOR
            )
            if amount > 0 and sender.supply_balance_mantissa == 0:
                market.supplier_count -= 1

    if to_address not in non_wallet_addresses:
        receiver = _refresh_supply_balance(context, market, to_address)
        if wallet_to_wallet and amount > 0 and receiver.supply_balance_mantissa == amount:
            market.supplier_count += 1


def handle_accrue_interest(context: EventHandlerContext) -> None:
    update_market(
        context.session,
        context.reader,
        context.event.address,
        block_timestamp=context.event.block_timestamp,
    )


def handle_new_reserve_factor(context: EventHandlerContext) -> None:
    market = _get_market(context)
    market.reserve_factor_mantissa = context.event.params["newReserveFactorMantissa"]


def handle_reserves_added(context: EventHandlerContext) -> None:
    market = _get_market(context)
    market.reserves_mantissa = context.event.params["newTotalReserves"]


def handle_reserves_reduced(context: EventHandlerContext) -> None:
    market = _get_market(context)
    market.reserves_mantissa = context.event.params["newTotalReserves"]


def handle_new_market_interest_rate_model(context: EventHandlerContext) -> None:
    market = _get_market(context)
    market.interest_rate_model_address = context.event.params["newInterestRateModel"]


def handle_new_access_control_manager(context: EventHandlerContext) -> None:
    market = _get_market(context)
    market.access_control_manager_address = context.event.params["newAccessControlManager"]


def handle_bad_debt_increased(context: EventHandlerContext) -> None:
    event = context.event
    market = _get_market(context)
    borrower: str = event.params["borrower"]
    _log_event(event, market)

    market.bad_debt_mantissa = event.params["badDebtNew"]

    position = get_or_create_account_vtoken(context.session, context.reader, market, borrower)
    context.session.merge(
        AccountVTokenBadDebtTable(
            id=get_bad_debt_event_id(event.transaction_hash, event.log_index),
            account_vtoken_id=position.id,
            amount_mantissa=event.params["badDebtDelta"],
            block=event.block_number,
            timestamp=event.block_timestamp,
        )
    )
