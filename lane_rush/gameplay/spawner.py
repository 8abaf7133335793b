"""
Spawn scheduling under the difficulty ramp.
NO UI DEPENDENCIES.
"""
import math
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .entities import EntityStore, Obstacle, Item, ITEM_KINDS
from .facts import Fact
from .constants import (
    LANES, OBSTACLE_SIZE, ITEM_SIZE,
    OBSTACLE_SPAWN_MS_START, OBSTACLE_SPAWN_MS_MIN, DIFFICULTY_RAMP_SECONDS,
    ITEM_SPAWN_MS_MIN, ITEM_SPAWN_MS_MAX,
    FIRST_ITEM_DELAY_MS_MIN, FIRST_ITEM_DELAY_MS_MAX,
)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def ramp_fraction(elapsed: float) -> float:
    """Progress through the difficulty ramp, 0.0 to 1.0."""
    return min(1.0, max(0.0, elapsed / DIFFICULTY_RAMP_SECONDS))


def obstacle_interval_ms(elapsed: float) -> int:
    """Milliseconds between obstacle spawns after `elapsed` seconds."""
    return math.floor(lerp(OBSTACLE_SPAWN_MS_START, OBSTACLE_SPAWN_MS_MIN, ramp_fraction(elapsed)))


@dataclass
class SpawnResult:
    """What a single scheduler pass produced."""
    obstacle: Optional[Obstacle] = None
    item: Optional[Item] = None


@dataclass
class SpawnScheduler:
    """
    Decides when obstacles and items appear.

    Obstacles and items run on independent timers. Both timers start unset;
    the first pass seeds them from the current time instead of spawning, so
    a round never opens with a burst.

    All randomness goes through `rng`, which tests can seed or script.
    """
    rng: random.Random = field(default_factory=random.Random)
    last_obstacle_ms: Optional[float] = None
    next_item_ms: Optional[float] = None

    def reset(self) -> None:
        """Forget both timers (new round)."""
        self.last_obstacle_ms = None
        self.next_item_ms = None

    def update(self, store: EntityStore, elapsed: float, now_ms: float,
               facts: Sequence[Fact]) -> SpawnResult:
        """
        Possibly spawn one obstacle and/or one item into the store.
        Returns what was spawned.
        """
        return SpawnResult(
            obstacle=self._maybe_spawn_obstacle(store, elapsed, now_ms),
            item=self._maybe_spawn_item(store, now_ms, facts),
        )

    def _maybe_spawn_obstacle(self, store: EntityStore, elapsed: float,
                              now_ms: float) -> Optional[Obstacle]:
        if self.last_obstacle_ms is None:
            self.last_obstacle_ms = now_ms

        if now_ms - self.last_obstacle_ms < obstacle_interval_ms(elapsed):
            return None

        self.last_obstacle_ms = now_ms
        obstacle = Obstacle(
            id=store.next_id(),
            lane=self.rng.randrange(LANES),
            y=-OBSTACLE_SIZE,
        )
        store.add_obstacle(obstacle)
        return obstacle

    def _maybe_spawn_item(self, store: EntityStore, now_ms: float,
                          facts: Sequence[Fact]) -> Optional[Item]:
        if self.next_item_ms is None:
            self.next_item_ms = now_ms + self.rng.randint(FIRST_ITEM_DELAY_MS_MIN, FIRST_ITEM_DELAY_MS_MAX)

        # An empty pool leaves the timer due, so the next pass retries
        if now_ms < self.next_item_ms or not facts:
            return None

        self.next_item_ms = now_ms + self.rng.randint(ITEM_SPAWN_MS_MIN, ITEM_SPAWN_MS_MAX)
        item = Item(
            id=store.next_id(),
            lane=self.rng.randrange(LANES),
            y=-ITEM_SIZE,
            kind=self.rng.choice(ITEM_KINDS),
            fact=self.rng.choice(list(facts)),
        )
        store.add_item(item)
        return item
