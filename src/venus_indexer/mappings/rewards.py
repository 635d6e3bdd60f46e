from venus_indexer.database.models import RewardSpeedTable
from venus_indexer.exceptions import VenusIndexerValueError

from .accessors import get_or_create_market, get_or_create_reward_speed, get_rewards_distributor
from .context import EventHandlerContext


def _get_reward_speed(context: EventHandlerContext) -> RewardSpeedTable:
    event = context.event

    if (distributor := get_rewards_distributor(context.session, event.address)) is None:
        raise VenusIndexerValueError(message=f"Unknown rewards distributor {event.address}")

    market = get_or_create_market(
        context.session,
        context.reader,
        event.params["vToken"],
        block_timestamp=event.block_timestamp,
    )
    return get_or_create_reward_speed(context.session, distributor, market)


def handle_reward_token_supply_speed_updated(context: EventHandlerContext) -> None:
    _get_reward_speed(context).supply_speed_per_block_mantissa = context.event.params["newSpeed"]


def handle_reward_token_borrow_speed_updated(context: EventHandlerContext) -> None:
    _get_reward_speed(context).borrow_speed_per_block_mantissa = context.event.params["newSpeed"]
