"""
Event definitions and log decoding.

Every indexed event is described by an `EventDefinition`. The definition provides the topic used to
filter and dispatch logs, and decodes a raw log into a `DecodedEvent` with named, typed parameters.
Addresses are returned in checksummed form, including addresses nested inside arrays and tuples.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import eth_abi.abi
from eth_abi.grammar import ABIType, BasicType, TupleType, parse
from eth_typing import ChecksumAddress
from eth_utils.crypto import keccak
from hexbytes import HexBytes

from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.exceptions import UnknownEventTopic


@dataclass(slots=True, frozen=True)
class EventInput:
    name: str
    type: str
    indexed: bool = False
    # Field names for tuple inputs, in order. Decoded tuples are returned as dicts
    components: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class EventDefinition:
    name: str
    inputs: tuple[EventInput, ...]
    topic: HexBytes = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "topic", HexBytes(keccak(text=self.signature)))

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(event_input.type for event_input in self.inputs)})"

    def decode(self, log: Mapping[str, Any], block_timestamp: int) -> "DecodedEvent":
        topics = [HexBytes(topic) for topic in log["topics"]]
        if not topics or topics[0] != self.topic:
            raise UnknownEventTopic(topic=topics[0] if topics else HexBytes(b""))

        indexed_inputs = [event_input for event_input in self.inputs if event_input.indexed]
        data_inputs = [event_input for event_input in self.inputs if not event_input.indexed]

        if len(topics) - 1 != len(indexed_inputs):
            msg = (
                f"{self.name} log has {len(topics) - 1} indexed topics, expected "
                f"{len(indexed_inputs)}"
            )
            raise ValueError(msg)

        values: dict[str, Any] = {}
        for event_input, topic in zip(indexed_inputs, topics[1:], strict=True):
            (values[event_input.name],) = eth_abi.abi.decode(types=[event_input.type], data=topic)
        values.update(
            zip(
                [event_input.name for event_input in data_inputs],
                eth_abi.abi.decode(
                    types=[event_input.type for event_input in data_inputs],
                    data=HexBytes(log["data"]),
                ),
                strict=True,
            )
        )

        params = {
            event_input.name: _normalize_value(
                abi_type=parse(event_input.type),
                value=values[event_input.name],
                components=event_input.components,
            )
            for event_input in self.inputs
        }

        return DecodedEvent(
            name=self.name,
            topic=self.topic,
            address=get_checksum_address(log["address"]),
            params=params,
            block_number=log["blockNumber"],
            block_timestamp=block_timestamp,
            transaction_hash=HexBytes(log["transactionHash"]),
            transaction_index=log["transactionIndex"],
            log_index=log["logIndex"],
        )


@dataclass(slots=True, frozen=True)
class DecodedEvent:
    name: str
    topic: HexBytes
    address: ChecksumAddress
    params: dict[str, Any]
    block_number: int
    block_timestamp: int
    transaction_hash: HexBytes
    transaction_index: int
    log_index: int


def _normalize_value(abi_type: ABIType, value: Any, components: tuple[str, ...] = ()) -> Any:
    if abi_type.is_array:
        return [_normalize_value(abi_type.item_type, item) for item in value]

    match abi_type:
        case TupleType():
            normalized = tuple(
                _normalize_value(component_type, item)
                for component_type, item in zip(abi_type.components, value, strict=True)
            )
            if components:
                return dict(zip(components, normalized, strict=True))
            return normalized
        case BasicType(base="address"):
            return get_checksum_address(value)
        case BasicType(base="bytes"):
            return HexBytes(value)
        case _:
            return value


def _event(name: str, *inputs: EventInput) -> EventDefinition:
    return EventDefinition(name=name, inputs=inputs)


def _indexed(name: str, type_: str) -> EventInput:
    return EventInput(name=name, type=type_, indexed=True)


def _input(name: str, type_: str) -> EventInput:
    return EventInput(name=name, type=type_)


# Pool registry
POOL_REGISTERED = _event(
    "PoolRegistered",
    _indexed("comptroller", "address"),
    EventInput(
        name="pool",
        type="(string,address,address,uint256,uint256)",
        components=("name", "creator", "comptroller", "blockPosted", "timestampPosted"),
    ),
)
POOL_NAME_SET = _event(
    "PoolNameSet",
    _indexed("comptroller", "address"),
    _input("oldName", "string"),
    _input("newName", "string"),
)
POOL_METADATA_UPDATED = _event(
    "PoolMetadataUpdated",
    _indexed("comptroller", "address"),
    EventInput(
        name="oldMetadata",
        type="(uint8,string,string,string)",
        components=("riskRating", "category", "logoURL", "description"),
    ),
    EventInput(
        name="newMetadata",
        type="(uint8,string,string,string)",
        components=("riskRating", "category", "logoURL", "description"),
    ),
)
MARKET_ADDED = _event(
    "MarketAdded",
    _indexed("comptroller", "address"),
    _indexed("vTokenAddress", "address"),
)

# Comptroller
MARKET_ENTERED = _event(
    "MarketEntered",
    _indexed("vToken", "address"),
    _indexed("account", "address"),
)
MARKET_EXITED = _event(
    "MarketExited",
    _indexed("vToken", "address"),
    _indexed("account", "address"),
)
NEW_CLOSE_FACTOR = _event(
    "NewCloseFactor",
    _input("oldCloseFactorMantissa", "uint256"),
    _input("newCloseFactorMantissa", "uint256"),
)
NEW_COLLATERAL_FACTOR = _event(
    "NewCollateralFactor",
    _input("vToken", "address"),
    _input("oldCollateralFactorMantissa", "uint256"),
    _input("newCollateralFactorMantissa", "uint256"),
)
NEW_LIQUIDATION_THRESHOLD = _event(
    "NewLiquidationThreshold",
    _input("vToken", "address"),
    _input("oldLiquidationThresholdMantissa", "uint256"),
    _input("newLiquidationThresholdMantissa", "uint256"),
)
NEW_LIQUIDATION_INCENTIVE = _event(
    "NewLiquidationIncentive",
    _input("oldLiquidationIncentiveMantissa", "uint256"),
    _input("newLiquidationIncentiveMantissa", "uint256"),
)
NEW_PRICE_ORACLE = _event(
    "NewPriceOracle",
    _input("oldPriceOracle", "address"),
    _input("newPriceOracle", "address"),
)
NEW_BORROW_CAP = _event(
    "NewBorrowCap",
    _indexed("vToken", "address"),
    _input("newBorrowCap", "uint256"),
)
NEW_SUPPLY_CAP = _event(
    "NewSupplyCap",
    _indexed("vToken", "address"),
    _input("newSupplyCap", "uint256"),
)
NEW_MIN_LIQUIDATABLE_COLLATERAL = _event(
    "NewMinLiquidatableCollateral",
    _input("oldMinLiquidatableCollateral", "uint256"),
    _input("newMinLiquidatableCollateral", "uint256"),
)
NEW_REWARDS_DISTRIBUTOR = _event(
    "NewRewardsDistributor",
    _indexed("rewardsDistributor", "address"),
    _indexed("rewardToken", "address"),
)

# vToken
MINT = _event(
    "Mint",
    _indexed("minter", "address"),
    _input("mintAmount", "uint256"),
    _input("mintTokens", "uint256"),
    _input("accountBalance", "uint256"),
)
REDEEM = _event(
    "Redeem",
    _indexed("redeemer", "address"),
    _input("redeemAmount", "uint256"),
    _input("redeemTokens", "uint256"),
    _input("accountBalance", "uint256"),
)
BORROW = _event(
    "Borrow",
    _indexed("borrower", "address"),
    _input("borrowAmount", "uint256"),
    _input("accountBorrows", "uint256"),
    _input("totalBorrows", "uint256"),
)
REPAY_BORROW = _event(
    "RepayBorrow",
    _indexed("payer", "address"),
    _indexed("borrower", "address"),
    _input("repayAmount", "uint256"),
    _input("accountBorrows", "uint256"),
    _input("totalBorrows", "uint256"),
)
LIQUIDATE_BORROW = _event(
    "LiquidateBorrow",
    _indexed("liquidator", "address"),
    _indexed("borrower", "address"),
    _input("repayAmount", "uint256"),
    _indexed("vTokenCollateral", "address"),
    _input("seizeTokens", "uint256"),
)
TRANSFER = _event(
    "Transfer",
    _indexed("from", "address"),
    _indexed("to", "address"),
    _input("amount", "uint256"),
)
ACCRUE_INTEREST = _event(
    "AccrueInterest",
    _input("cashPrior", "uint256"),
    _input("interestAccumulated", "uint256"),
    _input("borrowIndex", "uint256"),
    _input("totalBorrows", "uint256"),
)
NEW_RESERVE_FACTOR = _event(
    "NewReserveFactor",
    _input("oldReserveFactorMantissa", "uint256"),
    _input("newReserveFactorMantissa", "uint256"),
)
RESERVES_ADDED = _event(
    "ReservesAdded",
    _indexed("benefactor", "address"),
    _input("addAmount", "uint256"),
    _input("newTotalReserves", "uint256"),
)
RESERVES_REDUCED = _event(
    "ReservesReduced",
    _indexed("admin", "address"),
    _input("reduceAmount", "uint256"),
    _input("newTotalReserves", "uint256"),
)
NEW_MARKET_INTEREST_RATE_MODEL = _event(
    "NewMarketInterestRateModel",
    _indexed("oldInterestRateModel", "address"),
    _indexed("newInterestRateModel", "address"),
)
NEW_ACCESS_CONTROL_MANAGER = _event(
    "NewAccessControlManager",
    _input("oldAccessControlManager", "address"),
    _input("newAccessControlManager", "address"),
)
BAD_DEBT_INCREASED = _event(
    "BadDebtIncreased",
    _indexed("borrower", "address"),
    _input("badDebtDelta", "uint256"),
    _input("badDebtOld", "uint256"),
    _input("badDebtNew", "uint256"),
)

# Rewards distributor
REWARD_TOKEN_SUPPLY_SPEED_UPDATED = _event(
    "RewardTokenSupplySpeedUpdated",
    _indexed("vToken", "address"),
    _input("newSpeed", "uint256"),
)
REWARD_TOKEN_BORROW_SPEED_UPDATED = _event(
    "RewardTokenBorrowSpeedUpdated",
    _indexed("vToken", "address"),
    _input("newSpeed", "uint256"),
)

# Shortfall
AUCTION_STARTED = _event(
    "AuctionStarted",
    _indexed("comptroller", "address"),
    _input("auctionStartBlock", "uint256"),
    _input("auctionType", "uint8"),
    _input("markets", "address[]"),
    _input("marketsDebt", "uint256[]"),
    _input("seizedRiskFund", "uint256"),
    _input("startBidBps", "uint256"),
)
BID_PLACED = _event(
    "BidPlaced",
    _indexed("comptroller", "address"),
    _input("auctionStartBlock", "uint256"),
    _input("bidBps", "uint256"),
    _indexed("bidder", "address"),
)
AUCTION_CLOSED = _event(
    "AuctionClosed",
    _indexed("comptroller", "address"),
    _input("auctionStartBlock", "uint256"),
    _indexed("highestBidder", "address"),
    _input("highestBidBps", "uint256"),
    _input("seizedRiskFind", "uint256"),
    _input("markets", "address[]"),
    _input("marketDebt", "uint256[]"),
)
AUCTION_RESTARTED = _event(
    "AuctionRestarted",
    _indexed("comptroller", "address"),
    _input("auctionStartBlock", "uint256"),
)

# Omnichain proposal sender
SET_TRUSTED_REMOTE_ADDRESS = _event(
    "SetTrustedRemoteAddress",
    _indexed("remoteChainId", "uint16"),
    _input("oldRemoteAddress", "bytes"),
    _input("newRemoteAddress", "bytes"),
)
TRUSTED_REMOTE_REMOVED = _event(
    "TrustedRemoteRemoved",
    _indexed("chainId", "uint16"),
)
EXECUTE_REMOTE_PROPOSAL = _event(
    "ExecuteRemoteProposal",
    _indexed("remoteChainId", "uint16"),
    _input("proposalId", "uint256"),
    _input("payload", "bytes"),
)
STORE_PAYLOAD = _event(
    "StorePayload",
    _indexed("proposalId", "uint256"),
    _indexed("remoteChainId", "uint16"),
    _input("payload", "bytes"),
    _input("adapterParams", "bytes"),
    _input("value", "uint256"),
    _input("reason", "bytes"),
)
CLEAR_PAYLOAD = _event(
    "ClearPayload",
    _indexed("proposalId", "uint256"),
    _input("executionHash", "bytes32"),
)


# Events grouped by the contract that emits them. Logs are fetched per group, so an event signature
# shared by several contracts is only delivered from the group that lists it.
POOL_REGISTRY_EVENTS: tuple[EventDefinition, ...] = (
    POOL_REGISTERED,
    POOL_NAME_SET,
    POOL_METADATA_UPDATED,
    MARKET_ADDED,
)
COMPTROLLER_EVENTS: tuple[EventDefinition, ...] = (
    MARKET_ENTERED,
    MARKET_EXITED,
    NEW_CLOSE_FACTOR,
    NEW_COLLATERAL_FACTOR,
    NEW_LIQUIDATION_THRESHOLD,
    NEW_LIQUIDATION_INCENTIVE,
    NEW_PRICE_ORACLE,
    NEW_BORROW_CAP,
    NEW_SUPPLY_CAP,
    NEW_MIN_LIQUIDATABLE_COLLATERAL,
    NEW_REWARDS_DISTRIBUTOR,
)
VTOKEN_EVENTS: tuple[EventDefinition, ...] = (
    MINT,
    REDEEM,
    BORROW,
    REPAY_BORROW,
    LIQUIDATE_BORROW,
    TRANSFER,
    ACCRUE_INTEREST,
    NEW_RESERVE_FACTOR,
    RESERVES_ADDED,
    RESERVES_REDUCED,
    NEW_MARKET_INTEREST_RATE_MODEL,
    NEW_ACCESS_CONTROL_MANAGER,
    BAD_DEBT_INCREASED,
)
REWARDS_DISTRIBUTOR_EVENTS: tuple[EventDefinition, ...] = (
    REWARD_TOKEN_SUPPLY_SPEED_UPDATED,
    REWARD_TOKEN_BORROW_SPEED_UPDATED,
)
SHORTFALL_EVENTS: tuple[EventDefinition, ...] = (
    AUCTION_STARTED,
    BID_PLACED,
    AUCTION_CLOSED,
    AUCTION_RESTARTED,
)
OMNICHAIN_PROPOSAL_SENDER_EVENTS: tuple[EventDefinition, ...] = (
    SET_TRUSTED_REMOTE_ADDRESS,
    TRUSTED_REMOTE_REMOVED,
    EXECUTE_REMOTE_PROPOSAL,
    STORE_PAYLOAD,
    CLEAR_PAYLOAD,
)

EVENT_DEFINITIONS: dict[HexBytes, EventDefinition] = {
    definition.topic: definition
    for group in (
        POOL_REGISTRY_EVENTS,
        COMPTROLLER_EVENTS,
        VTOKEN_EVENTS,
        REWARDS_DISTRIBUTOR_EVENTS,
        SHORTFALL_EVENTS,
        OMNICHAIN_PROPOSAL_SENDER_EVENTS,
    )
    for definition in group
}


def get_topics(definitions: tuple[EventDefinition, ...]) -> list[HexBytes]:
    return [definition.topic for definition in definitions]


def decode_log(log: Mapping[str, Any], block_timestamp: int) -> DecodedEvent:
    """
    Decode a log using the definition matching its first topic.
    """

    if not log["topics"]:
        raise UnknownEventTopic(topic=HexBytes(b""))

    topic = HexBytes(log["topics"][0])
    if (definition := EVENT_DEFINITIONS.get(topic)) is None:
        raise UnknownEventTopic(topic=topic)
    return definition.decode(log=log, block_timestamp=block_timestamp)
