from decimal import Decimal

import pytest
from hexbytes import HexBytes
from sqlalchemy import select
from sqlalchemy.orm import Session

from venus_indexer import events
from venus_indexer.constants import ZERO_ADDRESS, TransactionType
from venus_indexer.database.models import (
    AccountTable,
    AccountVTokenBadDebtTable,
    AccountVTokenTable,
    AccountVTokenTransactionTable,
    MarketTable,
    TransactionTable,
)
from venus_indexer.ids import get_account_vtoken_id, get_transaction_event_id

from ..conftest import (
    ACCRUAL_BLOCK_NUMBER,
    BLOCK_NUMBER,
    BLOCK_TIMESTAMP,
    BORROW_INDEX,
    CASH,
    EXCHANGE_RATE,
    RATE_PER_BLOCK,
    TOTAL_BORROWS,
    TOTAL_RESERVES,
    TOTAL_SUPPLY,
    TX_HASH,
    USER_1,
    USER_2,
    VTOKEN,
    FakeChainReader,
    handle,
    make_event,
)

ONE_VTOKEN = 10**8
ONE_UNDERLYING = 10**18


class EventSequence:
    """
    Processes events for the test market with increasing log indices.
    """

    def __init__(self, session: Session, reader: FakeChainReader) -> None:
        self.session = session
        self.reader = reader
        self.log_index = 0

    def __call__(self, definition: events.EventDefinition, params: dict) -> None:
        handle(
            self.session,
            self.reader,
            make_event(definition, VTOKEN, params, log_index=self.log_index),
        )
        self.log_index += 1

    def mint(self, minter: str, mint_tokens: int, balance_after: int) -> None:
        self.reader.mock_snapshot(VTOKEN, minter, vtoken_balance=balance_after)
        self(
            events.MINT,
            {
                "minter": minter,
                "mintAmount": mint_tokens * 10**10,
                "mintTokens": mint_tokens,
                "accountBalance": balance_after,
            },
        )

    def redeem(self, redeemer: str, redeem_tokens: int, balance_after: int) -> None:
        self.reader.mock_snapshot(VTOKEN, redeemer, vtoken_balance=balance_after)
        self(
            events.REDEEM,
            {
                "redeemer": redeemer,
                "redeemAmount": redeem_tokens * 10**10,
                "redeemTokens": redeem_tokens,
                "accountBalance": balance_after,
            },
        )

    def borrow(self, borrower: str, borrow_amount: int, account_borrows: int) -> None:
        self(
            events.BORROW,
            {
                "borrower": borrower,
                "borrowAmount": borrow_amount,
                "accountBorrows": account_borrows,
                "totalBorrows": account_borrows,
            },
        )

    def repay(self, borrower: str, repay_amount: int, account_borrows: int) -> None:
        self(
            events.REPAY_BORROW,
            {
                "payer": borrower,
                "borrower": borrower,
                "repayAmount": repay_amount,
                "accountBorrows": account_borrows,
                "totalBorrows": account_borrows,
            },
        )


@pytest.fixture
def sequence(session: Session, reader: FakeChainReader, market: MarketTable) -> EventSequence:
    return EventSequence(session, reader)


def _position(session: Session, account: str) -> AccountVTokenTable:
    position = session.scalar(
        select(AccountVTokenTable).where(
            AccountVTokenTable.id == get_account_vtoken_id(VTOKEN, account)
        )
    )
    assert position is not None
    return position


def _transaction(session: Session, log_index: int) -> TransactionTable:
    transaction = session.get(TransactionTable, get_transaction_event_id(TX_HASH, log_index))
    assert transaction is not None
    return transaction


def test_supplier_count_follows_mints_and_redeems(
    session: Session, market: MarketTable, sequence: EventSequence
):
    supplier_counts = [market.supplier_count]

    sequence.mint(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)

    sequence.mint(USER_2, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)

    # Partial redeem leaves the supplier in the market
    sequence.redeem(USER_1, ONE_VTOKEN // 2, balance_after=ONE_VTOKEN // 2)
    supplier_counts.append(market.supplier_count)

    sequence.redeem(USER_1, ONE_VTOKEN // 2, balance_after=0)
    supplier_counts.append(market.supplier_count)

    # A repeat mint by an existing supplier does not increment the count
    sequence.mint(USER_2, ONE_VTOKEN, balance_after=2 * ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)

    sequence.redeem(USER_2, 2 * ONE_VTOKEN, balance_after=0)
    supplier_counts.append(market.supplier_count)

    assert supplier_counts == [0, 1, 2, 2, 1, 1, 0]


def test_supplier_count_with_partial_redeem(market: MarketTable, sequence: EventSequence):
    supplier_counts = [market.supplier_count]

    sequence.mint(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)
    sequence.mint(USER_2, 2 * ONE_VTOKEN, balance_after=2 * ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)
    sequence.redeem(USER_1, ONE_VTOKEN, balance_after=0)
    supplier_counts.append(market.supplier_count)
    sequence.redeem(USER_2, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    supplier_counts.append(market.supplier_count)
    sequence.redeem(USER_2, ONE_VTOKEN, balance_after=0)
    supplier_counts.append(market.supplier_count)

    assert supplier_counts == [0, 1, 2, 1, 1, 0]


def test_zero_amount_mint_and_redeem_leave_count_unchanged(
    market: MarketTable, sequence: EventSequence
):
    sequence.mint(USER_1, 0, balance_after=0)
    assert market.supplier_count == 0

    sequence.mint(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    sequence.redeem(USER_2, 0, balance_after=0)
    assert market.supplier_count == 1


def test_mint_records_transaction_and_balance(
    session: Session, market: MarketTable, sequence: EventSequence
):
    sequence.mint(USER_1, 5 * ONE_VTOKEN, balance_after=5 * ONE_VTOKEN)

    transaction = _transaction(session, 0)
    assert transaction.type is TransactionType.MINT
    assert transaction.from_address == market.address
    assert transaction.to_address == USER_1
    assert transaction.amount_mantissa == 5 * ONE_VTOKEN
    assert transaction.amount == Decimal(5)
    assert transaction.underlying_amount == Decimal(5)
    assert transaction.block_number == BLOCK_NUMBER
    assert transaction.block_time == BLOCK_TIMESTAMP

    position = _position(session, USER_1)
    assert position.supply_balance_mantissa == 5 * ONE_VTOKEN
    assert position.supply_balance == Decimal(5)
    assert position.accrual_block_number == BLOCK_NUMBER

    assert session.scalar(
        select(AccountVTokenTransactionTable).where(
            AccountVTokenTransactionTable.account_vtoken_id == position.id
        )
    )


def test_redeem_accumulates_underlying_redeemed(session: Session, sequence: EventSequence):
    sequence.mint(USER_1, 2 * ONE_VTOKEN, balance_after=2 * ONE_VTOKEN)
    sequence.redeem(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    sequence.redeem(USER_1, ONE_VTOKEN, balance_after=0)

    position = _position(session, USER_1)
    assert position.total_underlying_redeemed_mantissa == 2 * ONE_VTOKEN * 10**10
    assert position.supply_balance_mantissa == 0


def test_borrower_count_follows_borrows_and_repays(
    session: Session, market: MarketTable, sequence: EventSequence
):
    borrower_counts = [market.borrower_count]

    sequence.borrow(USER_1, ONE_UNDERLYING, account_borrows=ONE_UNDERLYING)
    borrower_counts.append(market.borrower_count)

    sequence.borrow(USER_2, ONE_UNDERLYING, account_borrows=ONE_UNDERLYING)
    borrower_counts.append(market.borrower_count)

    # A second borrow from an existing borrower does not increment the count
    sequence.borrow(USER_1, ONE_UNDERLYING, account_borrows=2 * ONE_UNDERLYING)
    borrower_counts.append(market.borrower_count)

    sequence.repay(USER_1, ONE_UNDERLYING, account_borrows=ONE_UNDERLYING)
    borrower_counts.append(market.borrower_count)

    sequence.repay(USER_1, ONE_UNDERLYING, account_borrows=0)
    borrower_counts.append(market.borrower_count)

    sequence.repay(USER_2, ONE_UNDERLYING, account_borrows=0)
    borrower_counts.append(market.borrower_count)

    assert borrower_counts == [0, 1, 2, 2, 2, 1, 0]

    position = _position(session, USER_1)
    assert position.borrow_balance_mantissa == 0
    assert position.total_underlying_repaid_mantissa == 2 * ONE_UNDERLYING

    account = session.get(AccountTable, USER_1.lower())
    assert account is not None
    assert account.has_borrowed is True


def test_borrow_records_transaction(
    session: Session, market: MarketTable, sequence: EventSequence
):
    sequence.borrow(USER_1, 3 * ONE_UNDERLYING, account_borrows=3 * ONE_UNDERLYING)

    transaction = _transaction(session, 0)
    assert transaction.type is TransactionType.BORROW
    assert transaction.from_address == market.address
    assert transaction.to_address == USER_1
    assert transaction.amount == Decimal(3)

    position = _position(session, USER_1)
    assert position.borrow_balance == Decimal(3)
    assert position.borrow_index_mantissa == market.borrow_index_mantissa


def test_liquidate_borrow(session: Session, market: MarketTable, sequence: EventSequence):
    sequence(
        events.LIQUIDATE_BORROW,
        {
            "liquidator": USER_2,
            "borrower": USER_1,
            "repayAmount": ONE_UNDERLYING,
            "vTokenCollateral": VTOKEN,
            "seizeTokens": 3 * ONE_VTOKEN,
        },
    )

    borrower = session.get(AccountTable, USER_1.lower())
    liquidator = session.get(AccountTable, USER_2.lower())
    assert borrower is not None
    assert liquidator is not None
    assert borrower.count_liquidated == 1
    assert borrower.count_liquidator == 0
    assert liquidator.count_liquidator == 1

    transaction = _transaction(session, 0)
    assert transaction.type is TransactionType.LIQUIDATE
    assert transaction.amount == Decimal(3)
    assert transaction.underlying_repay_amount_mantissa == ONE_UNDERLYING
    assert transaction.underlying_repay_amount == Decimal(1)


def test_accrue_interest_reads_market_state(
    session: Session, market: MarketTable, sequence: EventSequence
):
    sequence(
        events.ACCRUE_INTEREST,
        {
            "cashPrior": 0,
            "interestAccumulated": 0,
            "borrowIndex": BORROW_INDEX,
            "totalBorrows": TOTAL_BORROWS,
        },
    )

    assert market.accrual_block_number == ACCRUAL_BLOCK_NUMBER
    assert market.block_timestamp == BLOCK_TIMESTAMP
    assert market.treasury_total_supply_mantissa == TOTAL_SUPPLY
    assert market.exchange_rate_mantissa == EXCHANGE_RATE
    assert market.exchange_rate == Decimal("0.00003650458235")
    assert market.borrow_index_mantissa == BORROW_INDEX
    assert market.borrow_index == Decimal(300)
    assert market.reserves_mantissa == TOTAL_RESERVES
    assert market.treasury_total_borrows_mantissa == TOTAL_BORROWS
    assert market.cash_mantissa == CASH
    assert market.cash == Decimal("1.418171344423412457")
    assert market.borrow_rate_mantissa == RATE_PER_BLOCK
    assert market.borrow_rate == Decimal("0.000000000012678493")
    assert market.supply_rate == Decimal("0.000000000012678493")
    assert market.underlying_price == Decimal(2)


def test_transfer_between_wallets(
    session: Session, market: MarketTable, reader: FakeChainReader, sequence: EventSequence
):
    sequence.mint(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    assert market.supplier_count == 1

    reader.mock_snapshot(VTOKEN, USER_1, vtoken_balance=0)
    reader.mock_snapshot(VTOKEN, USER_2, vtoken_balance=ONE_VTOKEN)
    sequence(events.TRANSFER, {"from": USER_1, "to": USER_2, "amount": ONE_VTOKEN})

    # The sender left and the receiver joined
    assert market.supplier_count == 1
    # Accrual state is refreshed before the transfer is applied
    assert market.accrual_block_number == ACCRUAL_BLOCK_NUMBER

    sender = _position(session, USER_1)
    receiver = _position(session, USER_2)
    assert sender.supply_balance_mantissa == 0
    assert receiver.supply_balance_mantissa == ONE_VTOKEN
    assert sender.total_underlying_redeemed_mantissa == ONE_VTOKEN * EXCHANGE_RATE // 10**18

    transaction = _transaction(session, 1)
    assert transaction.type is TransactionType.TRANSFER
    assert transaction.from_address == USER_1
    assert transaction.to_address == USER_2


def test_transfer_to_self_keeps_counts(
    session: Session, market: MarketTable, sequence: EventSequence
):
    sequence.mint(USER_1, ONE_VTOKEN, balance_after=ONE_VTOKEN)
    assert market.supplier_count == 1

    sequence(events.TRANSFER, {"from": USER_1, "to": USER_1, "amount": ONE_VTOKEN})

    assert market.supplier_count == 1
    position = _position(session, USER_1)
    assert position.supply_balance_mantissa == ONE_VTOKEN
    assert position.total_underlying_redeemed_mantissa == 0
    assert _transaction(session, 1).type is TransactionType.TRANSFER


def test_mint_transfer_skips_market_side(
    session: Session, market: MarketTable, reader: FakeChainReader, sequence: EventSequence
):
    reader.mock_snapshot(VTOKEN, USER_1, vtoken_balance=ONE_VTOKEN)
    sequence(events.TRANSFER, {"from": VTOKEN, "to": USER_1, "amount": ONE_VTOKEN})
    sequence(events.TRANSFER, {"from": ZERO_ADDRESS, "to": USER_1, "amount": ONE_VTOKEN})

    # Supplier counts for mints are maintained by the mint handler
    assert market.supplier_count == 0
    assert _position(session, USER_1).supply_balance_mantissa == ONE_VTOKEN
    assert (
        session.scalar(
            select(AccountVTokenTable).where(
                AccountVTokenTable.id == get_account_vtoken_id(VTOKEN, VTOKEN)
            )
        )
        is None
    )


def test_bad_debt_increased(session: Session, market: MarketTable, sequence: EventSequence):
    sequence(
        events.BAD_DEBT_INCREASED,
        {"borrower": USER_1, "badDebtDelta": 100, "badDebtOld": 50, "badDebtNew": 150},
    )
    sequence(
        events.BAD_DEBT_INCREASED,
        {"borrower": USER_1, "badDebtDelta": 10, "badDebtOld": 150, "badDebtNew": 160},
    )

    assert market.bad_debt_mantissa == 160

    bad_debts = session.scalars(
        select(AccountVTokenBadDebtTable).order_by(AccountVTokenBadDebtTable.amount_mantissa)
    ).all()
    assert [bad_debt.amount_mantissa for bad_debt in bad_debts] == [10, 100]
    assert {bad_debt.id for bad_debt in bad_debts} == {
        f"{TX_HASH.to_0x_hex()}-0",
        f"{TX_HASH.to_0x_hex()}-1",
    }
    assert all(bad_debt.account_vtoken_id == _position(session, USER_1).id for bad_debt in bad_debts)


def test_market_parameter_events(market: MarketTable, sequence: EventSequence):
    new_model = "0x0000000000000000000000000000000000000F0f"
    new_manager = "0x0000000000000000000000000000000000000123"

    sequence(
        events.NEW_RESERVE_FACTOR,
        {"oldReserveFactorMantissa": 100, "newReserveFactorMantissa": 200},
    )
    sequence(
        events.RESERVES_ADDED,
        {"benefactor": USER_1, "addAmount": 5, "newTotalReserves": 1_005},
    )
    assert market.reserves_mantissa == 1_005
    sequence(
        events.RESERVES_REDUCED,
        {"admin": USER_1, "reduceAmount": 5, "newTotalReserves": 1_000},
    )
    sequence(
        events.NEW_MARKET_INTEREST_RATE_MODEL,
        {"oldInterestRateModel": ZERO_ADDRESS, "newInterestRateModel": new_model.lower()},
    )
    sequence(
        events.NEW_ACCESS_CONTROL_MANAGER,
        {"oldAccessControlManager": ZERO_ADDRESS, "newAccessControlManager": new_manager},
    )

    assert market.reserve_factor_mantissa == 200
    assert market.reserves_mantissa == 1_000
    assert market.interest_rate_model_address.lower() == new_model.lower()
    assert market.access_control_manager_address == new_manager


def test_replayed_event_does_not_duplicate_transaction(
    session: Session, reader: FakeChainReader, market: MarketTable
):
    reader.mock_snapshot(VTOKEN, USER_1, vtoken_balance=ONE_VTOKEN)
    event = make_event(
        events.MINT,
        VTOKEN,
        {
            "minter": USER_1,
            "mintAmount": ONE_UNDERLYING,
            "mintTokens": ONE_VTOKEN,
            "accountBalance": ONE_VTOKEN,
        },
        tx_hash=HexBytes("0x" + "cd" * 32),
    )
    handle(session, reader, event)
    handle(session, reader, event)

    assert len(session.scalars(select(TransactionTable)).all()) == 1
    assert len(session.scalars(select(AccountVTokenTransactionTable)).all()) == 1
