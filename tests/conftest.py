import itertools

import pytest

from padel_counter.match_session import MatchSession
from padel_counter.storage import MemoryStore

NAMES = ["A", "B", "C", "D"]


@pytest.fixture
def clock():
    counter = itertools.count(1000)
    return lambda: next(counter)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session(store, clock):
    return MatchSession(store, clock=clock)


@pytest.fixture
def started_session(session):
    session.start_match(NAMES)
    return session
