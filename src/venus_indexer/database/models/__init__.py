from .base import Base
from .governance import RemoteProposalTable, TrustedRemoteTable
from .indexer import IndexedNetworkTable
from .venus import (
    AccountTable,
    AccountVTokenBadDebtTable,
    AccountVTokenTable,
    AccountVTokenTransactionTable,
    AuctionTable,
    MarketTable,
    PoolTable,
    RewardSpeedTable,
    RewardsDistributorTable,
    TransactionTable,
)

__all__ = (
    "AccountTable",
    "AccountVTokenBadDebtTable",
    "AccountVTokenTable",
    "AccountVTokenTransactionTable",
    "AuctionTable",
    "Base",
    "IndexedNetworkTable",
    "MarketTable",
    "PoolTable",
    "RemoteProposalTable",
    "RewardSpeedTable",
    "RewardsDistributorTable",
    "TransactionTable",
    "TrustedRemoteTable",
)
