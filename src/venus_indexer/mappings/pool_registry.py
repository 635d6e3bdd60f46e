from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.constants import RISK_RATINGS
from venus_indexer.logging import logger

from .accessors import get_or_create_market, get_or_create_pool
from .context import EventHandlerContext


def handle_pool_registered(context: EventHandlerContext) -> None:
    """
    Create the pool for a newly registered comptroller, with the name, creator and registration
    block taken from the registry's pool record.
    """

    event = context.event
    pool_record = event.params["pool"]

    pool = get_or_create_pool(context.session, context.reader, event.params["comptroller"])
    pool.name = pool_record["name"]
    pool.creator = get_checksum_address(pool_record["creator"])
    pool.block_posted = pool_record["blockPosted"]
    pool.timestamp_posted = pool_record["timestampPosted"]

    logger.info(f"Registered pool {pool.name!r} ({pool.address}) at block {event.block_number}")


def handle_pool_name_set(context: EventHandlerContext) -> None:
    pool = get_or_create_pool(context.session, context.reader, context.event.params["comptroller"])
    pool.name = context.event.params["newName"]


def handle_pool_metadata_updated(context: EventHandlerContext) -> None:
    metadata = context.event.params["newMetadata"]

    pool = get_or_create_pool(context.session, context.reader, context.event.params["comptroller"])
    pool.risk_rating = RISK_RATINGS[metadata["riskRating"]]
    pool.category = metadata["category"]
    pool.logo_url = metadata["logoURL"]
    pool.description = metadata["description"]


def handle_market_added(context: EventHandlerContext) -> None:
    event = context.event
    get_or_create_market(
        context.session,
        context.reader,
        event.params["vTokenAddress"],
        comptroller=event.params["comptroller"],
        block_timestamp=event.block_timestamp,
    )
