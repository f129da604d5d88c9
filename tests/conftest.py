import random

import pytest

from game.survival.scheduler import FrameScheduler
from game.survival.session import Session


@pytest.fixture
def scheduler():
    # 10 ms frames keep the virtual clock exact
    return FrameScheduler(frame_ms=10)


@pytest.fixture
def session(scheduler):
    return Session(scheduler, rng=random.Random(1234))


@pytest.fixture
def running(session):
    session.start("easy")
    return session
