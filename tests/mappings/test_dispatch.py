import dataclasses

import pytest
from hexbytes import HexBytes
from sqlalchemy.orm import Session

from venus_indexer import events
from venus_indexer.events import EVENT_DEFINITIONS
from venus_indexer.exceptions import UnknownEventTopic
from venus_indexer.mappings import EVENT_HANDLERS

from ..conftest import USER_1, USER_2, VTOKEN, FakeChainReader, handle, make_event


def test_every_event_has_a_handler():
    assert set(EVENT_HANDLERS) == set(EVENT_DEFINITIONS)


def test_unknown_topic_is_rejected(session: Session, reader: FakeChainReader):
    event = make_event(events.TRANSFER, VTOKEN, {"from": USER_1, "to": USER_2, "amount": 1})
    event = dataclasses.replace(event, topic=HexBytes("0x" + "11" * 32))

    with pytest.raises(UnknownEventTopic):
        handle(session, reader, event)
