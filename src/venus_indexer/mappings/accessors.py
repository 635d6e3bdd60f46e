"""
Get-or-create accessors for indexed entities.

Each accessor looks up a record by its deterministic id and creates it with default values if it is
missing. An existing record is returned unchanged. New records are added to the session, and are
written to the database by the next flush.
"""

from decimal import Decimal

import eth_abi.abi
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from sqlalchemy import select
from sqlalchemy.orm import Session

from venus_indexer.chain import ChainReader
from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.constants import AuctionStatus, AuctionType
from venus_indexer.database.models import (
    AccountTable,
    AccountVTokenTable,
    AccountVTokenTransactionTable,
    AuctionTable,
    MarketTable,
    PoolTable,
    RemoteProposalTable,
    RewardSpeedTable,
    RewardsDistributorTable,
    TrustedRemoteTable,
)
from venus_indexer.ids import (
    get_account_id,
    get_account_vtoken_id,
    get_account_vtoken_transaction_id,
    get_auction_id,
    get_market_id,
    get_pool_id,
    get_remote_proposal_id,
    get_reward_speed_id,
    get_rewards_distributor_id,
    get_trusted_remote_id,
)
from venus_indexer.logging import logger
from venus_indexer.numeric import normalize_mantissa


def get_pool(session: Session, comptroller: str) -> PoolTable | None:
    return session.scalar(select(PoolTable).where(PoolTable.id == get_pool_id(comptroller)))


def get_market(session: Session, vtoken: str) -> MarketTable | None:
    return session.scalar(select(MarketTable).where(MarketTable.id == get_market_id(vtoken)))


def get_rewards_distributor(
    session: Session, rewards_distributor: str
) -> RewardsDistributorTable | None:
    return session.scalar(
        select(RewardsDistributorTable).where(
            RewardsDistributorTable.id == get_rewards_distributor_id(rewards_distributor)
        )
    )


def get_or_create_pool(session: Session, reader: ChainReader, comptroller: str) -> PoolTable:
    """
    Get the pool controlled by the given comptroller. A new pool is created with the risk parameters
    read from the comptroller and an empty name, which is filled in when the pool is registered.
    """

    if (pool := get_pool(session, comptroller)) is None:
        comptroller = get_checksum_address(comptroller)
        pool = PoolTable(
            id=get_pool_id(comptroller),
            address=comptroller,
            name="",
            price_oracle_address=reader.oracle(comptroller),
            close_factor_mantissa=reader.close_factor_mantissa(comptroller),
            liquidation_incentive_mantissa=reader.liquidation_incentive_mantissa(comptroller),
            min_liquidatable_collateral_mantissa=reader.min_liquidatable_collateral(comptroller),
        )
        session.add(pool)
        logger.info(f"Created pool for comptroller {comptroller}")

    return pool


def get_or_create_market(
    session: Session,
    reader: ChainReader,
    vtoken: str,
    comptroller: str | None = None,
    block_timestamp: int = 0,
) -> MarketTable:
    """
    Get the market for the given vToken.

    A new market reads the immutable metadata of the vToken and its underlying token. The
    comptroller is read from the vToken only if it is not provided. The pool is created if
    necessary.
    """

    if (market := get_market(session, vtoken)) is not None:
        return market

    vtoken = get_checksum_address(vtoken)
    if comptroller is None:
        comptroller = reader.comptroller(vtoken)
    pool = get_or_create_pool(session, reader, comptroller)

    underlying = reader.underlying(vtoken)
    zero = Decimal(0)
    market = MarketTable(
        id=get_market_id(vtoken),
        pool_id=pool.id,
        address=vtoken,
        name=reader.name(vtoken),
        symbol=reader.symbol(vtoken),
        vtoken_decimals=reader.decimals(vtoken),
        underlying_address=underlying,
        underlying_name=reader.name(underlying),
        underlying_symbol=reader.symbol(underlying),
        underlying_decimals=reader.decimals(underlying),
        interest_rate_model_address=reader.interest_rate_model(vtoken),
        access_control_manager_address=None,
        accrual_block_number=0,
        block_timestamp=block_timestamp,
        borrow_rate_mantissa=0,
        borrow_rate=zero,
        supply_rate_mantissa=0,
        supply_rate=zero,
        cash_mantissa=0,
        cash=zero,
        exchange_rate_mantissa=0,
        exchange_rate=zero,
        borrow_index_mantissa=0,
        borrow_index=zero,
        underlying_price_mantissa=0,
        underlying_price=zero,
        reserves_mantissa=0,
        reserve_factor_mantissa=reader.reserve_factor_mantissa(vtoken),
        treasury_total_supply_mantissa=0,
        treasury_total_borrows_mantissa=0,
        bad_debt_mantissa=0,
        collateral_factor_mantissa=0,
        liquidation_threshold_mantissa=0,
        supply_cap_mantissa=0,
        borrow_cap_mantissa=0,
        supplier_count=0,
        borrower_count=0,
    )
    session.add(market)
    logger.info(f"Created market {market.symbol} ({vtoken}) in pool {pool.address}")

    return market


def get_or_create_account(session: Session, account: str) -> AccountTable:
    if (
        account_record := session.scalar(
            select(AccountTable).where(AccountTable.id == get_account_id(account))
        )
    ) is None:
        account_record = AccountTable(
            id=get_account_id(account),
            address=get_checksum_address(account),
            count_liquidated=0,
            count_liquidator=0,
            has_borrowed=False,
        )
        session.add(account_record)

    return account_record


def get_or_create_account_vtoken(
    session: Session,
    reader: ChainReader,
    market: MarketTable,
    account: str,
    *,
    entered_market: bool = False,
) -> AccountVTokenTable:
    """
    Get an account's position in a market. A new position is seeded with the balances from a live
    account snapshot, since the position may predate the first indexed event.
    """

    account_vtoken_id = get_account_vtoken_id(market.address, account)
    if (
        position := session.scalar(
            select(AccountVTokenTable).where(AccountVTokenTable.id == account_vtoken_id)
        )
    ) is None:
        account_record = get_or_create_account(session, account)
        snapshot = reader.get_account_snapshot(market.address, account)
        position = AccountVTokenTable(
            id=account_vtoken_id,
            market_id=market.id,
            account_id=account_record.id,
            symbol=market.symbol,
            entered_market=entered_market,
            accrual_block_number=0,
            supply_balance_mantissa=snapshot.vtoken_balance,
            supply_balance=normalize_mantissa(snapshot.vtoken_balance, market.vtoken_decimals),
            borrow_balance_mantissa=snapshot.borrow_balance,
            borrow_balance=normalize_mantissa(snapshot.borrow_balance, market.underlying_decimals),
            borrow_index_mantissa=0,
            total_underlying_redeemed_mantissa=0,
            total_underlying_repaid_mantissa=0,
        )
        session.add(position)

    return position


def get_or_create_account_vtoken_transaction(
    session: Session,
    position: AccountVTokenTable,
    account: str,
    tx_hash: HexBytes,
    timestamp: int,
    block: int,
    log_index: int,
) -> AccountVTokenTransactionTable:
    transaction_id = get_account_vtoken_transaction_id(account, tx_hash, log_index)
    if (
        transaction := session.scalar(
            select(AccountVTokenTransactionTable).where(
                AccountVTokenTransactionTable.id == transaction_id
            )
        )
    ) is None:
        transaction = AccountVTokenTransactionTable(
            id=transaction_id,
            account_vtoken_id=position.id,
            tx_hash=tx_hash.to_0x_hex(),
            timestamp=timestamp,
            block=block,
            log_index=log_index,
        )
        session.add(transaction)

    return transaction


def get_or_create_rewards_distributor(
    session: Session,
    rewards_distributor: str,
    pool: PoolTable,
    reward_token: ChecksumAddress,
) -> RewardsDistributorTable:
    if (distributor := get_rewards_distributor(session, rewards_distributor)) is None:
        distributor = RewardsDistributorTable(
            id=get_rewards_distributor_id(rewards_distributor),
            pool_id=pool.id,
            address=get_checksum_address(rewards_distributor),
            reward_token_address=reward_token,
        )
        session.add(distributor)
        logger.info(f"Created rewards distributor {distributor.address} for pool {pool.address}")

    return distributor


def get_or_create_reward_speed(
    session: Session,
    rewards_distributor: RewardsDistributorTable,
    market: MarketTable,
) -> RewardSpeedTable:
    reward_speed_id = get_reward_speed_id(rewards_distributor.address, market.address)
    if (
        reward_speed := session.scalar(
            select(RewardSpeedTable).where(RewardSpeedTable.id == reward_speed_id)
        )
    ) is None:
        reward_speed = RewardSpeedTable(
            id=reward_speed_id,
            rewards_distributor_id=rewards_distributor.id,
            market_id=market.id,
            supply_speed_per_block_mantissa=0,
            borrow_speed_per_block_mantissa=0,
        )
        session.add(reward_speed)

    return reward_speed


def get_or_create_auction(session: Session, comptroller: str) -> AuctionTable:
    auction_id = get_auction_id(comptroller)
    if (
        auction := session.scalar(select(AuctionTable).where(AuctionTable.id == auction_id))
    ) is None:
        auction = AuctionTable(
            id=auction_id,
            comptroller_address=get_checksum_address(comptroller),
            status=AuctionStatus.NOT_STARTED,
            type=AuctionType.LARGE_POOL_DEBT,
            start_block=0,
            seized_risk_fund_mantissa=0,
            start_bid_bps=0,
            markets=[],
            markets_debt=[],
            highest_bidder=None,
            highest_bid_bps=None,
            highest_bid_block=None,
        )
        session.add(auction)

    return auction


def get_or_create_trusted_remote(
    session: Session,
    remote_chain_id: int,
    address: ChecksumAddress,
) -> TrustedRemoteTable:
    trusted_remote_id = get_trusted_remote_id(remote_chain_id)
    if (
        trusted_remote := session.scalar(
            select(TrustedRemoteTable).where(TrustedRemoteTable.id == trusted_remote_id)
        )
    ) is None:
        trusted_remote = TrustedRemoteTable(
            id=trusted_remote_id,
            address=address,
            active=True,
        )
        session.add(trusted_remote)

    return trusted_remote


def get_remote_proposal(session: Session, proposal_id: int) -> RemoteProposalTable | None:
    return session.scalar(
        select(RemoteProposalTable).where(
            RemoteProposalTable.id == get_remote_proposal_id(proposal_id)
        )
    )


def get_or_create_remote_proposal(
    session: Session,
    proposal_id: int,
    remote_chain_id: int,
    payload: bytes,
) -> RemoteProposalTable:
    """
    Get the remote proposal, creating it with the actions decoded from the payload sent to the
    remote chain.

    The sent payload is `abi.encode(bytes proposal, uint256 proposalId)`, and the inner proposal
    is `abi.encode(address[] targets, uint256[] values, string[] signatures, bytes[] calldatas,
    uint8 proposalType)`.
    """

    if (remote_proposal := get_remote_proposal(session, proposal_id)) is None:
        proposal, _ = eth_abi.abi.decode(types=["bytes", "uint256"], data=payload)
        targets, values, signatures, calldatas, proposal_type = eth_abi.abi.decode(
            types=["address[]", "uint256[]", "string[]", "bytes[]", "uint8"],
            data=proposal,
        )

        trusted_remote = session.scalar(
            select(TrustedRemoteTable).where(
                TrustedRemoteTable.id == get_trusted_remote_id(remote_chain_id)
            )
        )
        remote_proposal = RemoteProposalTable(
            id=get_remote_proposal_id(proposal_id),
            proposal_id=proposal_id,
            layer_zero_chain_id=remote_chain_id,
            trusted_remote=trusted_remote,
            targets=[get_checksum_address(target) for target in targets],
            values=[str(value) for value in values],
            signatures=list(signatures),
            calldatas=[HexBytes(calldata).to_0x_hex() for calldata in calldatas],
            proposal_type=proposal_type,
        )
        session.add(remote_proposal)
        logger.info(f"Created remote proposal {proposal_id} for chain {remote_chain_id}")

    return remote_proposal
