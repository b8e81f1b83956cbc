import random

import pytest

from services.ledger import MemoryScoreStore, ScoreLedger
from utils.file_handler import TextSource


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.t = start

    def now(self) -> float:
        return self.t

    def advance(self, seconds: float) -> float:
        self.t += seconds
        return self.t


class FakeTicker:
    def __init__(self):
        self.active = False
        self.starts = 0
        self.stops = 0

    def start(self):
        self.active = True
        self.starts += 1

    def stop(self):
        self.active = False
        self.stops += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ticker():
    return FakeTicker()


@pytest.fixture
def store():
    return MemoryScoreStore()


@pytest.fixture
def ledger(store, clock):
    return ScoreLedger(store, clock)


@pytest.fixture
def text_source():
    return TextSource(
        sentences=["the cat sat"],
        words=["alpha", "beta", "gamma"],
        rng=random.Random(7),
        timed_word_count=400,
    )
