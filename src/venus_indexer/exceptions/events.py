from hexbytes import HexBytes

from venus_indexer.exceptions.base import VenusIndexerValueError


class UnknownEventTopic(VenusIndexerValueError):
    """
    Raised when a log carries a topic that does not match any known event definition.
    """

    def __init__(self, topic: HexBytes) -> None:
        self.topic = topic
        super().__init__(message=f"Unknown event topic: {topic.to_0x_hex()}")
