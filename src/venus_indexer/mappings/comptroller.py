"""
Handlers for comptroller events. The emitting contract is the comptroller, so the pool is resolved
from the event address.
"""

from venus_indexer.database.models import MarketTable, PoolTable

from .accessors import (
    get_or_create_account_vtoken,
    get_or_create_market,
    get_or_create_pool,
    get_or_create_rewards_distributor,
)
from .context import EventHandlerContext


def _get_pool(context: EventHandlerContext) -> PoolTable:
    return get_or_create_pool(context.session, context.reader, context.event.address)


def _get_market(context: EventHandlerContext) -> MarketTable:
    return get_or_create_market(
        context.session,
        context.reader,
        context.event.params["vToken"],
        comptroller=context.event.address,
        block_timestamp=context.event.block_timestamp,
    )


def _set_entered_market(context: EventHandlerContext, *, entered: bool) -> None:
    market = _get_market(context)
    position = get_or_create_account_vtoken(
        context.session,
        context.reader,
        market,
        context.event.params["account"],
        entered_market=entered,
    )
    position.entered_market = entered
    position.accrual_block_number = context.event.block_number


def handle_market_entered(context: EventHandlerContext) -> None:
    _set_entered_market(context, entered=True)


def handle_market_exited(context: EventHandlerContext) -> None:
    _set_entered_market(context, entered=False)


def handle_new_close_factor(context: EventHandlerContext) -> None:
    _get_pool(context).close_factor_mantissa = context.event.params["newCloseFactorMantissa"]


def handle_new_liquidation_incentive(context: EventHandlerContext) -> None:
    _get_pool(context).liquidation_incentive_mantissa = context.event.params[
        "newLiquidationIncentiveMantissa"
    ]


def handle_new_price_oracle(context: EventHandlerContext) -> None:
    _get_pool(context).price_oracle_address = context.event.params["newPriceOracle"]


def handle_new_min_liquidatable_collateral(context: EventHandlerContext) -> None:
    _get_pool(context).min_liquidatable_collateral_mantissa = context.event.params[
        "newMinLiquidatableCollateral"
    ]


def handle_new_collateral_factor(context: EventHandlerContext) -> None:
    _get_market(context).collateral_factor_mantissa = context.event.params[
        "newCollateralFactorMantissa"
    ]


def handle_new_liquidation_threshold(context: EventHandlerContext) -> None:
    _get_market(context).liquidation_threshold_mantissa = context.event.params[
        "newLiquidationThresholdMantissa"
    ]


def handle_new_borrow_cap(context: EventHandlerContext) -> None:
    _get_market(context).borrow_cap_mantissa = context.event.params["newBorrowCap"]


def handle_new_supply_cap(context: EventHandlerContext) -> None:
    _get_market(context).supply_cap_mantissa = context.event.params["newSupplyCap"]


def handle_new_rewards_distributor(context: EventHandlerContext) -> None:
    get_or_create_rewards_distributor(
        context.session,
        rewards_distributor=context.event.params["rewardsDistributor"],
        pool=_get_pool(context),
        reward_token=context.event.params["rewardToken"],
    )
