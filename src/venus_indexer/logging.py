"""
The package logger. Messages are written to stderr and are not propagated to the root logger.

The level defaults to INFO and can be set with the VENUS_INDEXER_LOG_LEVEL environment variable,
e.g. VENUS_INDEXER_LOG_LEVEL=DEBUG to log every processed event.
"""

import logging
import os

logger = logging.getLogger("venus_indexer")
logger.propagate = False
logger.setLevel(os.environ.get("VENUS_INDEXER_LOG_LEVEL", "INFO").upper())

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
logger.addHandler(_handler)
