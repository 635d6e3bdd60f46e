"""
Event handlers, dispatched by the first topic of each log.

Handlers mutate entities through the session passed in the context. The dispatcher flushes after
each handler so the next event sees every record created by the previous one; committing is left to
the caller.
"""

from collections.abc import Callable

from hexbytes import HexBytes

from venus_indexer import events
from venus_indexer.exceptions import UnknownEventTopic

from . import comptroller, governance, pool_registry, rewards, shortfall, vtoken
from .context import EventHandlerContext

EVENT_HANDLERS: dict[HexBytes, Callable[[EventHandlerContext], None]] = {
    # Pool registry
    events.POOL_REGISTERED.topic: pool_registry.handle_pool_registered,
    events.POOL_NAME_SET.topic: pool_registry.handle_pool_name_set,
    events.POOL_METADATA_UPDATED.topic: pool_registry.handle_pool_metadata_updated,
    events.MARKET_ADDED.topic: pool_registry.handle_market_added,
    # Comptroller
    events.MARKET_ENTERED.topic: comptroller.handle_market_entered,
    events.MARKET_EXITED.topic: comptroller.handle_market_exited,
    events.NEW_CLOSE_FACTOR.topic: comptroller.handle_new_close_factor,
    events.NEW_COLLATERAL_FACTOR.topic: comptroller.handle_new_collateral_factor,
    events.NEW_LIQUIDATION_THRESHOLD.topic: comptroller.handle_new_liquidation_threshold,
    events.NEW_LIQUIDATION_INCENTIVE.topic: comptroller.handle_new_liquidation_incentive,
    events.NEW_PRICE_ORACLE.topic: comptroller.handle_new_price_oracle,
    events.NEW_BORROW_CAP.topic: comptroller.handle_new_borrow_cap,
    events.NEW_SUPPLY_CAP.topic: comptroller.handle_new_supply_cap,
    events.NEW_MIN_LIQUIDATABLE_COLLATERAL.topic: (
        comptroller.handle_new_min_liquidatable_collateral
    ),
    events.NEW_REWARDS_DISTRIBUTOR.topic: comptroller.handle_new_rewards_distributor,
    # vToken
    events.MINT.topic: vtoken.handle_mint,
    events.REDEEM.topic: vtoken.handle_redeem,
    events.BORROW.topic: vtoken.handle_borrow,
    events.REPAY_BORROW.topic: vtoken.handle_repay_borrow,
    events.LIQUIDATE_BORROW.topic: vtoken.handle_liquidate_borrow,
    events.TRANSFER.topic: vtoken.handle_transfer,
    events.ACCRUE_INTEREST.topic: vtoken.handle_accrue_interest,
    events.NEW_RESERVE_FACTOR.topic: vtoken.handle_new_reserve_factor,
    events.RESERVES_ADDED.topic: vtoken.handle_reserves_added,
    events.RESERVES_REDUCED.topic: vtoken.handle_reserves_reduced,
    events.NEW_MARKET_INTEREST_RATE_MODEL.topic: vtoken.handle_new_market_interest_rate_model,
    events.NEW_ACCESS_CONTROL_MANAGER.topic: vtoken.handle_new_access_control_manager,
    events.BAD_DEBT_INCREASED.topic: vtoken.handle_bad_debt_increased,
    # Rewards distributor
    events.REWARD_TOKEN_SUPPLY_SPEED_UPDATED.topic: (
        rewards.handle_reward_token_supply_speed_updated
    ),
    events.REWARD_TOKEN_BORROW_SPEED_UPDATED.topic: (
        rewards.handle_reward_token_borrow_speed_updated
    ),
    # Shortfall
    events.AUCTION_STARTED.topic: shortfall.handle_auction_started,
    events.BID_PLACED.topic: shortfall.handle_bid_placed,
    events.AUCTION_CLOSED.topic: shortfall.handle_auction_closed,
    events.AUCTION_RESTARTED.topic: shortfall.handle_auction_restarted,
    # Omnichain proposal sender
    events.SET_TRUSTED_REMOTE_ADDRESS.topic: governance.handle_set_trusted_remote_address,
    events.TRUSTED_REMOTE_REMOVED.topic: governance.handle_trusted_remote_removed,
    events.EXECUTE_REMOTE_PROPOSAL.topic: governance.handle_execute_remote_proposal,
    events.STORE_PAYLOAD.topic: governance.handle_store_payload,
    events.CLEAR_PAYLOAD.topic: governance.handle_clear_payload,
}


def dispatch_event(context: EventHandlerContext) -> None:
    """
    Dispatch event to appropriate handler based on event topic.
    """

    topic = context.event.topic
    if topic not in EVENT_HANDLERS:
        raise UnknownEventTopic(topic=topic)

    handler = EVENT_HANDLERS[topic]
    handler(context)
    context.session.flush()


__all__ = (
    "EVENT_HANDLERS",
    "EventHandlerContext",
    "dispatch_event",
)
