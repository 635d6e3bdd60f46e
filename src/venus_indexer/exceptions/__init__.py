from venus_indexer.exceptions.base import (
    VenusIndexerError,
    VenusIndexerTypeError,
    VenusIndexerValueError,
)
from venus_indexer.exceptions.database import BackupExists
from venus_indexer.exceptions.events import UnknownEventTopic
from venus_indexer.exceptions.fetching import FetchingError, LogFetchingTimeout
from venus_indexer.exceptions.network import (
    MissingDeploymentAddress,
    NetworkError,
    UnsupportedNetwork,
)

from . import base, database, events, fetching, network

__all__ = (
    "BackupExists",
    "FetchingError",
    "LogFetchingTimeout",
    "MissingDeploymentAddress",
    "NetworkError",
    "UnknownEventTopic",
    "UnsupportedNetwork",
    "VenusIndexerError",
    "VenusIndexerTypeError",
    "VenusIndexerValueError",
    "base",
    "database",
    "events",
    "fetching",
    "network",
)
