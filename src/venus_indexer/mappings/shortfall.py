"""
Handlers for shortfall auction events. There is one auction record per comptroller, which is reset
each time a new auction starts for that pool.
"""

from venus_indexer.constants import AUCTION_TYPES, AuctionStatus
from venus_indexer.logging import logger

from .accessors import get_or_create_auction
from .context import EventHandlerContext


def handle_auction_started(context: EventHandlerContext) -> None:
    params = context.event.params

    auction = get_or_create_auction(context.session, params["comptroller"])
    auction.status = AuctionStatus.STARTED
    auction.type = AUCTION_TYPES[params["auctionType"]]
    auction.start_block = params["auctionStartBlock"]
    auction.markets = list(params["markets"])
    auction.markets_debt = [str(debt) for debt in params["marketsDebt"]]
    auction.seized_risk_fund_mantissa = params["seizedRiskFund"]
    auction.start_bid_bps = params["startBidBps"]
    auction.highest_bidder = None
    auction.highest_bid_bps = None
    auction.highest_bid_block = None

    logger.info(
        f"Auction started for pool {auction.comptroller_address} at block {auction.start_block} "
        f"({auction.type.value})"
    )


def handle_bid_placed(context: EventHandlerContext) -> None:
    params = context.event.params

    auction = get_or_create_auction(context.session, params["comptroller"])
    auction.highest_bidder = params["bidder"]
    auction.highest_bid_bps = params["bidBps"]
    auction.highest_bid_block = context.event.block_number


def handle_auction_closed(context: EventHandlerContext) -> None:
    params = context.event.params

    auction = get_or_create_auction(context.session, params["comptroller"])
    auction.status = AuctionStatus.ENDED
    auction.highest_bidder = params["highestBidder"]
    auction.highest_bid_bps = params["highestBidBps"]

    logger.info(
        f"Auction closed for pool {auction.comptroller_address}, winning bidder "
        f"{auction.highest_bidder} at {auction.highest_bid_bps} bps"
    )


def handle_auction_restarted(context: EventHandlerContext) -> None:
    params = context.event.params

    auction = get_or_create_auction(context.session, params["comptroller"])
    auction.status = AuctionStatus.STARTED
    auction.start_block = params["auctionStartBlock"]
    auction.highest_bidder = None
    auction.highest_bid_bps = None
    auction.highest_bid_block = None
