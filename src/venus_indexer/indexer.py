"""
Block range processing for a single network.

Contracts are discovered before the remaining logs are fetched, so contracts created within the
range are included in the log filters:

1. pool registry events register pools and their markets
2. `NewRewardsDistributor` events from the comptrollers of all known pools add rewards distributors

All other events from the comptrollers, markets, rewards distributors, and the shortfall and
governance contracts are then merged and handled in a single (blockNumber, logIndex) order.
Contract reads for an event are made at the block of that event.
"""

import operator
from collections.abc import Iterable

import tqdm
from eth_typing import ChecksumAddress
from sqlalchemy import select
from sqlalchemy.orm import Session
from web3 import Web3
from web3.types import LogReceipt

from venus_indexer import events
from venus_indexer.chain import Web3ChainReader
from venus_indexer.database.models import MarketTable, PoolTable, RewardsDistributorTable
from venus_indexer.deployments import NetworkDeployment
from venus_indexer.events import EventDefinition, decode_log, get_topics
from venus_indexer.functions import fetch_logs_retrying
from venus_indexer.logging import logger
from venus_indexer.mappings import EventHandlerContext, dispatch_event


class BlockTimestamps:
    """
    Block timestamps, fetched once per block.
    """

    def __init__(self, w3: Web3) -> None:
        self.w3 = w3
        self._timestamps: dict[int, int] = {}

    def __getitem__(self, block_number: int) -> int:
        if block_number not in self._timestamps:
            self._timestamps[block_number] = self.w3.eth.get_block(block_number)["timestamp"]
        return self._timestamps[block_number]


def _fetch_logs(
    w3: Web3,
    start_block: int,
    end_block: int,
    addresses: Iterable[ChecksumAddress],
    definitions: tuple[EventDefinition, ...],
) -> list[LogReceipt]:
    # An empty address filter would match every contract on the chain
    if not (address_list := sorted(set(addresses))):
        return []

    return fetch_logs_retrying(
        w3=w3,
        start_block=start_block,
        end_block=end_block,
        address=address_list,
        topic_signature=[get_topics(definitions)],
    )


def _process_logs(
    w3: Web3,
    session: Session,
    logs: list[LogReceipt],
    timestamps: BlockTimestamps,
    description: str,
    no_progress: bool,
) -> int:
    for log in tqdm.tqdm(
        sorted(logs, key=operator.itemgetter("blockNumber", "logIndex")),
        desc=description,
        leave=False,
        disable=no_progress,
    ):
        event = decode_log(log, block_timestamp=timestamps[log["blockNumber"]])
        dispatch_event(
            EventHandlerContext(
                session=session,
                reader=Web3ChainReader(w3=w3, block_identifier=event.block_number),
                event=event,
            )
        )
    return len(logs)


def update_network(
    *,
    w3: Web3,
    session: Session,
    deployment: NetworkDeployment,
    start_block: int,
    end_block: int,
    no_progress: bool = False,
) -> int:
    """
    Process all indexed events for the deployment in the inclusive block range. Changes are flushed
    to the session but not committed.

    Returns the number of events processed.
    """

    timestamps = BlockTimestamps(w3)
    processed = 0

    # Register new pools and markets
    processed += _process_logs(
        w3=w3,
        session=session,
        logs=_fetch_logs(
            w3,
            start_block,
            end_block,
            addresses=[deployment.require_pool_registry()],
            definitions=events.POOL_REGISTRY_EVENTS,
        ),
        timestamps=timestamps,
        description="Processing pool registry events",
        no_progress=no_progress,
    )

    known_comptrollers = session.scalars(select(PoolTable.address)).all()

    # Register new rewards distributors
    processed += _process_logs(
        w3=w3,
        session=session,
        logs=_fetch_logs(
            w3,
            start_block,
            end_block,
            addresses=known_comptrollers,
            definitions=(events.NEW_REWARDS_DISTRIBUTOR,),
        ),
        timestamps=timestamps,
        description="Processing rewards distributor events",
        no_progress=no_progress,
    )

    all_logs: list[LogReceipt] = []
    all_logs.extend(
        _fetch_logs(
            w3,
            start_block,
            end_block,
            addresses=known_comptrollers,
            definitions=tuple(
                definition
                for definition in events.COMPTROLLER_EVENTS
                if definition is not events.NEW_REWARDS_DISTRIBUTOR
            ),
        )
    )
    all_logs.extend(
        _fetch_logs(
            w3,
            start_block,
            end_block,
            addresses=session.scalars(select(MarketTable.address)).all(),
            definitions=events.VTOKEN_EVENTS,
        )
    )
    all_logs.extend(
        _fetch_logs(
            w3,
            start_block,
            end_block,
            addresses=session.scalars(select(RewardsDistributorTable.address)).all(),
            definitions=events.REWARDS_DISTRIBUTOR_EVENTS,
        )
    )
    if deployment.shortfall is not None:
        all_logs.extend(
            _fetch_logs(
                w3,
                start_block,
                end_block,
                addresses=[deployment.shortfall],
                definitions=events.SHORTFALL_EVENTS,
            )
        )
    if deployment.omnichain_proposal_sender is not None:
        all_logs.extend(
            _fetch_logs(
                w3,
                start_block,
                end_block,
                addresses=[deployment.omnichain_proposal_sender],
                definitions=events.OMNICHAIN_PROPOSAL_SENDER_EVENTS,
            )
        )

    processed += _process_logs(
        w3=w3,
        session=session,
        logs=all_logs,
        timestamps=timestamps,
        description="Processing events",
        no_progress=no_progress,
    )

    logger.debug(
        f"Processed {processed} events for {deployment.name} in blocks {start_block}-{end_block}"
    )
    return processed
