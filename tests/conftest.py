"""
Pytest fixtures for Lane Rush tests.

Play area used throughout: 400 x 800.
  road_x = 16, road_width = 368, lane_width ~122.7
  car (lane 1) = Rect(177, 692, 46, 72)
An obstacle or item in the car's lane with y = 700 overlaps the car.
"""
import random

import pytest

from lane_rush.gameplay.facts import FactProvider, FALLBACK_FACTS
from lane_rush.gameplay.geometry import RoadLayout
from lane_rush.gameplay.session import Session

PLAY_WIDTH = 400.0
PLAY_HEIGHT = 800.0


class LaneZeroRandom(random.Random):
    """Seeded random whose lane picks always land in lane 0."""

    def randrange(self, start, stop=None, step=1):
        if stop is None:
            return 0
        return super().randrange(start, stop, step)


@pytest.fixture
def layout() -> RoadLayout:
    return RoadLayout(PLAY_WIDTH, PLAY_HEIGHT)


@pytest.fixture
def provider() -> FactProvider:
    return FactProvider.static(FALLBACK_FACTS)


@pytest.fixture
def session(provider) -> Session:
    """A started session on the standard play area."""
    s = Session(provider, width=PLAY_WIDTH, height=PLAY_HEIGHT, rng=random.Random(1234))
    s.start()
    return s


@pytest.fixture
def lane_zero_rng() -> random.Random:
    return LaneZeroRandom(99)
