from sqlalchemy.orm import Session

from venus_indexer import events
from venus_indexer.constants import AuctionStatus, AuctionType
from venus_indexer.database.models import AuctionTable

from ..conftest import COMPTROLLER, USER_1, USER_2, VTOKEN, FakeChainReader, handle, make_event

SHORTFALL = "0x0000000000000000000000000000000000005555"


def _handle_shortfall_event(
    session: Session,
    reader: FakeChainReader,
    definition: events.EventDefinition,
    params: dict,
    block_number: int,
) -> AuctionTable:
    handle(
        session,
        reader,
        make_event(
            definition,
            SHORTFALL,
            {"comptroller": COMPTROLLER, **params},
            block_number=block_number,
        ),
    )
    auction = session.get(AuctionTable, COMPTROLLER.lower())
    assert auction is not None
    return auction


def _start_auction(session: Session, reader: FakeChainReader) -> AuctionTable:
    return _handle_shortfall_event(
        session,
        reader,
        events.AUCTION_STARTED,
        {
            "auctionStartBlock": 1_000,
            "auctionType": 1,
            "markets": [VTOKEN],
            "marketsDebt": [2**200],
            "seizedRiskFund": 10**18,
            "startBidBps": 9_500,
        },
        block_number=1_000,
    )


def test_auction_lifecycle(session: Session, reader: FakeChainReader):
    auction = _start_auction(session, reader)
    assert auction.status is AuctionStatus.STARTED
    assert auction.type is AuctionType.LARGE_RISK_FUND
    assert auction.start_block == 1_000
    assert auction.markets == [VTOKEN]
    # Debt values can exceed the range of a JSON number
    assert auction.markets_debt == [str(2**200)]
    assert auction.seized_risk_fund_mantissa == 10**18
    assert auction.start_bid_bps == 9_500
    assert auction.highest_bidder is None

    auction = _handle_shortfall_event(
        session,
        reader,
        events.BID_PLACED,
        {"auctionStartBlock": 1_000, "bidBps": 9_600, "bidder": USER_1},
        block_number=1_010,
    )
    assert auction.highest_bidder == USER_1
    assert auction.highest_bid_bps == 9_600
    assert auction.highest_bid_block == 1_010

    auction = _handle_shortfall_event(
        session,
        reader,
        events.AUCTION_CLOSED,
        {
            "auctionStartBlock": 1_000,
            "highestBidder": USER_1,
            "highestBidBps": 9_600,
            "seizedRiskFind": 10**18,
            "markets": [VTOKEN],
            "marketDebt": [2**200],
        },
        block_number=1_100,
    )
    assert auction.status is AuctionStatus.ENDED
    assert auction.highest_bidder == USER_1
    assert auction.highest_bid_bps == 9_600


def test_auction_restarted_clears_bids(session: Session, reader: FakeChainReader):
    _start_auction(session, reader)
    _handle_shortfall_event(
        session,
        reader,
        events.BID_PLACED,
        {"auctionStartBlock": 1_000, "bidBps": 9_600, "bidder": USER_2},
        block_number=1_010,
    )

    auction = _handle_shortfall_event(
        session,
        reader,
        events.AUCTION_RESTARTED,
        {"auctionStartBlock": 1_200},
        block_number=1_200,
    )
    assert auction.status is AuctionStatus.STARTED
    assert auction.start_block == 1_200
    assert auction.highest_bidder is None
    assert auction.highest_bid_bps is None
    assert auction.highest_bid_block is None
