"""
Data fetching exceptions for the venus_indexer package.
"""

from venus_indexer.exceptions.base import VenusIndexerError


class FetchingError(VenusIndexerError):
    """
    Base exception for data fetching errors.
    """


class LogFetchingTimeout(FetchingError):
    """
    Raised when log fetching operations timeout after multiple retry attempts.
    """

    def __init__(self, max_retries: int) -> None:
        self.max_retries = max_retries
        super().__init__(message=f"Timed out fetching logs after {max_retries} tries.")
