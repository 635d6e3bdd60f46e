import logging
import os
import tempfile
from collections.abc import Generator, Sequence
from typing import Any

# Keep the config file and database created on first import out of the user's home directory
os.environ.setdefault("VENUS_INDEXER_CONFIG_DIR", tempfile.mkdtemp(prefix="venus_indexer_tests_"))

import eth_abi.abi
import pytest
from hexbytes import HexBytes
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from venus_indexer.chain import ChainReader
from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.database.models import Base, MarketTable, PoolTable
from venus_indexer.events import DecodedEvent, EventDefinition, decode_log
from venus_indexer.logging import logger
from venus_indexer.mappings import EventHandlerContext, dispatch_event
from venus_indexer.mappings.accessors import get_or_create_market

COMPTROLLER = get_checksum_address("0x0000000000000000000000000000000000000c0c")
VTOKEN = get_checksum_address("0x0000000000000000000000000000000000000aaa")
UNDERLYING = get_checksum_address("0x0000000000000000000000000000000000000b0b")
ORACLE = get_checksum_address("0x0000000000000000000000000000000000000d0d")
INTEREST_RATE_MODEL = get_checksum_address("0x0000000000000000000000000000000000000e0e")
USER_1 = get_checksum_address("0x0000000000000000000000000000000000000101")
USER_2 = get_checksum_address("0x0000000000000000000000000000000000000202")

TX_HASH = HexBytes("0x" + "ab" * 32)
BLOCK_NUMBER = 1_000
BLOCK_TIMESTAMP = 1_700_000_000

# Contract state returned by the mocked reads
ACCRUAL_BLOCK_NUMBER = 999
TOTAL_SUPPLY = 36504567163409
EXCHANGE_RATE = 365045823500000000000000
BORROW_INDEX = 300 * 10**18
TOTAL_RESERVES = 5128924555022289393
TOTAL_BORROWS = 2641234234636158123
CASH = 1418171344423412457
RATE_PER_BLOCK = 12678493
UNDERLYING_PRICE = 2 * 10**18
RESERVE_FACTOR = 100
CLOSE_FACTOR = 5 * 10**17
LIQUIDATION_INCENTIVE = 11 * 10**17
MIN_LIQUIDATABLE_COLLATERAL = 100 * 10**18


class FakeChainReader(ChainReader):
    """
    A contract reader that returns preset results, keyed by contract, function and arguments.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str, tuple[str, ...]], tuple[Any, ...]] = {}
        self.calls: list[tuple[str, str, tuple[str, ...]]] = []

    @staticmethod
    def _key(
        address: str, function_prototype: str, arguments: Sequence[Any]
    ) -> tuple[str, str, tuple[str, ...]]:
        return (
            address.lower(),
            function_prototype,
            tuple(str(argument).lower() for argument in arguments),
        )

    def mock(
        self,
        address: str,
        function_prototype: str,
        returns: Sequence[Any],
        arguments: Sequence[Any] = (),
    ) -> None:
        self.responses[self._key(address, function_prototype, arguments)] = tuple(returns)

    def mock_snapshot(
        self, vtoken: str, account: str, vtoken_balance: int, borrow_balance: int = 0
    ) -> None:
        self.mock(
            vtoken,
            "getAccountSnapshot(address)",
            (0, vtoken_balance, borrow_balance, EXCHANGE_RATE),
            arguments=[account],
        )

    def call(
        self,
        address: str,
        function_prototype: str,
        arguments: Sequence[Any] = (),
        return_types: Sequence[str] = (),
    ) -> tuple[Any, ...]:
        key = self._key(address, function_prototype, arguments)
        self.calls.append(key)
        try:
            return self.responses[key]
        except KeyError:
            msg = f"Unexpected call to {function_prototype} on {address} with {arguments}"
            raise AssertionError(msg) from None


def mock_pool(reader: FakeChainReader, comptroller: str = COMPTROLLER) -> None:
    reader.mock(comptroller, "oracle()", [ORACLE])
    reader.mock(comptroller, "closeFactorMantissa()", [CLOSE_FACTOR])
    reader.mock(comptroller, "liquidationIncentiveMantissa()", [LIQUIDATION_INCENTIVE])
    reader.mock(comptroller, "minLiquidatableCollateral()", [MIN_LIQUIDATABLE_COLLATERAL])


def mock_market(
    reader: FakeChainReader,
    vtoken: str = VTOKEN,
    comptroller: str = COMPTROLLER,
    underlying: str = UNDERLYING,
) -> None:
    reader.mock(vtoken, "comptroller()", [comptroller])
    reader.mock(vtoken, "underlying()", [underlying])
    reader.mock(vtoken, "name()", ["Venus BTCB (Stablecoins)"])
    reader.mock(vtoken, "symbol()", ["vBTCB_Stablecoins"])
    reader.mock(vtoken, "decimals()", [8])
    reader.mock(underlying, "name()", ["BTCB Token"])
    reader.mock(underlying, "symbol()", ["BTCB"])
    reader.mock(underlying, "decimals()", [18])
    reader.mock(vtoken, "interestRateModel()", [INTEREST_RATE_MODEL])
    reader.mock(vtoken, "reserveFactorMantissa()", [RESERVE_FACTOR])

    reader.mock(vtoken, "accrualBlockNumber()", [ACCRUAL_BLOCK_NUMBER])
    reader.mock(vtoken, "totalSupply()", [TOTAL_SUPPLY])
    reader.mock(vtoken, "exchangeRateStored()", [EXCHANGE_RATE])
    reader.mock(vtoken, "borrowIndex()", [BORROW_INDEX])
    reader.mock(vtoken, "totalReserves()", [TOTAL_RESERVES])
    reader.mock(vtoken, "totalBorrows()", [TOTAL_BORROWS])
    reader.mock(vtoken, "getCash()", [CASH])
    reader.mock(vtoken, "borrowRatePerBlock()", [RATE_PER_BLOCK])
    reader.mock(vtoken, "supplyRatePerBlock()", [RATE_PER_BLOCK])
    reader.mock(ORACLE, "getUnderlyingPrice(address)", [UNDERLYING_PRICE], arguments=[vtoken])

    for account in (USER_1, USER_2):
        reader.mock_snapshot(vtoken, account, vtoken_balance=0)


def make_log(
    definition: EventDefinition,
    address: str,
    params: dict[str, Any],
    *,
    block_number: int = BLOCK_NUMBER,
    log_index: int = 0,
    tx_hash: HexBytes = TX_HASH,
) -> dict[str, Any]:
    """
    Build a raw log for the event, ABI-encoding the indexed params into topics and the rest into
    the data field.
    """

    topics = [definition.topic]
    data_types: list[str] = []
    data_values: list[Any] = []
    for event_input in definition.inputs:
        value = params[event_input.name]
        if event_input.indexed:
            topics.append(HexBytes(eth_abi.abi.encode([event_input.type], [value])))
        else:
            data_types.append(event_input.type)
            data_values.append(value)

    return {
        "address": address,
        "topics": topics,
        "data": HexBytes(eth_abi.abi.encode(data_types, data_values)),
        "blockNumber": block_number,
        "blockHash": HexBytes("0x" + "00" * 32),
        "transactionHash": tx_hash,
        "transactionIndex": 0,
        "logIndex": log_index,
        "removed": False,
    }


def make_event(
    definition: EventDefinition,
    address: str,
    params: dict[str, Any],
    *,
    block_number: int = BLOCK_NUMBER,
    log_index: int = 0,
    tx_hash: HexBytes = TX_HASH,
) -> DecodedEvent:
    return decode_log(
        make_log(
            definition,
            address,
            params,
            block_number=block_number,
            log_index=log_index,
            tx_hash=tx_hash,
        ),
        block_timestamp=BLOCK_TIMESTAMP,
    )


def handle(session: Session, reader: ChainReader, event: DecodedEvent) -> None:
    dispatch_event(EventHandlerContext(session=session, reader=reader, event=event))


@pytest.fixture(scope="session", autouse=True)
def _set_venus_indexer_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    with Session(engine) as db_session:
        yield db_session
    engine.dispose()


@pytest.fixture
def reader() -> FakeChainReader:
    reader = FakeChainReader()
    mock_pool(reader)
    mock_market(reader)
    return reader


@pytest.fixture
def market(session: Session, reader: FakeChainReader) -> MarketTable:
    market = get_or_create_market(session, reader, VTOKEN, comptroller=COMPTROLLER)
    session.flush()
    return market


@pytest.fixture
def pool(market: MarketTable) -> PoolTable:
    return market.pool
