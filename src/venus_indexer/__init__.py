from venus_indexer import (
    chain,
    constants,
    deployments,
    events,
    exceptions,
    ids,
    indexer,
    mappings,
    numeric,
)
from venus_indexer.chain import AccountSnapshot, ChainReader, Web3ChainReader
from venus_indexer.deployments import NETWORKS, NetworkDeployment, get_network_deployment
from venus_indexer.logging import logger
from venus_indexer.mappings import EVENT_HANDLERS, EventHandlerContext, dispatch_event
from venus_indexer.version import __version__

__all__ = (
    "EVENT_HANDLERS",
    "NETWORKS",
    "AccountSnapshot",
    "ChainReader",
    "EventHandlerContext",
    "NetworkDeployment",
    "Web3ChainReader",
    "__version__",
    "chain",
    "constants",
    "deployments",
    "dispatch_event",
    "events",
    "exceptions",
    "get_network_deployment",
    "ids",
    "indexer",
    "logger",
    "mappings",
    "numeric",
)
