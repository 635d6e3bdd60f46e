from dataclasses import dataclass

from sqlalchemy.orm import Session

from venus_indexer.chain import ChainReader
from venus_indexer.events import DecodedEvent


@dataclass
class EventHandlerContext:
    """Context object passed to event handlers containing all necessary state."""

    session: Session
    reader: ChainReader
    event: DecodedEvent
