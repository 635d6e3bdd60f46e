import pathlib

from venus_indexer.exceptions.base import VenusIndexerError


class BackupExists(VenusIndexerError):
    """
    Raised by `venus-indexer database backup` if a file exists at the target path.
    """

    def __init__(self, path: pathlib.Path) -> None:
        self.path = path
        super().__init__(message=f"A backup at {path} already exists.")
