"""
The per-frame simulation step.
NO UI DEPENDENCIES.

One call to Simulation.step() advances a round by dt seconds: spawn, move,
cull, collide, score. It never raises and never blocks.
"""
import math
from dataclasses import dataclass
from typing import List, Optional

from .geometry import Rect, RoadLayout, intersects
from .entities import EntityStore, Obstacle, Item, ItemKind
from .spawner import SpawnScheduler
from .facts import FactProvider
from .constants import (
    CENTER_LANE, BASE_SPEED, SPEED_RAMP, SLOW_MO_FACTOR, ITEM_SPEED_FACTOR,
    SLOW_MO_DURATION_MS, TOAST_DURATION_MS, BOOST_BONUS, TRIVIA_BONUS,
    SURVIVAL_POINTS_PER_SECOND,
)


@dataclass
class Toast:
    """Transient notification about the last item collected."""
    title: str
    subtitle: str
    emoji: str


@dataclass
class RoundState:
    """
    Mutable state of one round.
    Owned by the Session; only Simulation.step() and explicit intents touch it.
    """
    lane: int = CENTER_LANE
    running: bool = False
    score: float = 0.0
    shield_active: bool = False
    slow_until_ms: float = 0.0
    toast: Optional[Toast] = None
    toast_until_ms: float = 0.0
    elapsed: float = 0.0

    def is_slow_mo(self, now_ms: float) -> bool:
        return now_ms < self.slow_until_ms


# =============================================================================
# EVENTS
# =============================================================================

@dataclass
class GameEvent:
    """Something that happened during a step (for UI to react to)."""
    pass


@dataclass
class ObstacleSpawnedEvent(GameEvent):
    obstacle: Obstacle


@dataclass
class ItemSpawnedEvent(GameEvent):
    item: Item


@dataclass
class ItemCollectedEvent(GameEvent):
    """The player drove through an item and its effect was applied."""
    item: Item


@dataclass
class ShieldConsumedEvent(GameEvent):
    """An obstacle hit was absorbed by the shield."""
    obstacle: Obstacle


@dataclass
class RoundEndedEvent(GameEvent):
    """An unshielded hit ended the round."""
    score: int
    obstacle: Optional[Obstacle] = None


# =============================================================================
# ITEM EFFECTS
# =============================================================================

TOAST_TITLES = {
    ItemKind.SHIELD: "Shield!",
    ItemKind.SLOW: "Slow-mo!",
    ItemKind.BOOST: "Score boost!",
    ItemKind.TRIVIA: "Trivia!",
}

KIND_EMOJI = {
    ItemKind.SHIELD: "🛡️",
    ItemKind.SLOW: "🐢",
    ItemKind.BOOST: "✨",
}


def item_emoji(item: Item) -> str:
    """Power-ups show their own icon; trivia shows the fact's."""
    return KIND_EMOJI.get(item.kind, item.fact.emoji)


def make_toast(item: Item) -> Toast:
    emoji = item_emoji(item)
    return Toast(
        title=TOAST_TITLES[item.kind],
        subtitle=f"{emoji} {item.fact.describe()}",
        emoji=emoji,
    )


def apply_item(state: RoundState, item: Item, now_ms: float) -> None:
    """Apply an item's effect and show its toast."""
    if item.kind == ItemKind.SHIELD:
        state.shield_active = True
    elif item.kind == ItemKind.SLOW:
        state.slow_until_ms = now_ms + SLOW_MO_DURATION_MS
    elif item.kind == ItemKind.BOOST:
        state.score += BOOST_BONUS
    elif item.kind == ItemKind.TRIVIA:
        state.score += TRIVIA_BONUS

    state.toast = make_toast(item)
    state.toast_until_ms = now_ms + TOAST_DURATION_MS


# =============================================================================
# SIMULATION
# =============================================================================

class Simulation:
    """
    Entities, spawning and collision for one road.

    Usage:
        sim = Simulation(RoadLayout(400, 800), FactProvider())
        state = RoundState(running=True)
        events = sim.step(state, dt_sec=0.016, now_ms=16.0)
    """

    def __init__(
        self,
        layout: RoadLayout,
        provider: FactProvider,
        scheduler: Optional[SpawnScheduler] = None,
    ):
        self.layout = layout
        self.provider = provider
        self.scheduler = scheduler if scheduler is not None else SpawnScheduler()
        self.store = EntityStore()

    def reset(self) -> None:
        """Clear entities and spawn timers for a new round."""
        self.store.clear()
        self.scheduler.reset()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def obstacle_speed(self, state: RoundState, now_ms: float) -> float:
        """Current hazard speed in units per second."""
        speed = BASE_SPEED + SPEED_RAMP * state.elapsed
        if state.is_slow_mo(now_ms):
            speed *= SLOW_MO_FACTOR
        return speed

    def player_rect(self, state: RoundState) -> Rect:
        return self.layout.player_rect(state.lane)

    def obstacle_rect(self, obstacle: Obstacle) -> Rect:
        return self.layout.lane_rect(obstacle.lane, obstacle.y, obstacle.size)

    def item_rect(self, item: Item) -> Rect:
        return self.layout.lane_rect(item.lane, item.y, item.size)

    # =========================================================================
    # STEP
    # =========================================================================

    def step(self, state: RoundState, dt_sec: float, now_ms: float) -> List[GameEvent]:
        """
        Advance the round by dt_sec.
        Returns events that occurred. Does nothing once the round has ended.
        """
        if not state.running:
            return []

        events: List[GameEvent] = []
        state.elapsed += dt_sec

        speed = self.obstacle_speed(state, now_ms)
        item_speed = speed * ITEM_SPEED_FACTOR

        # Spawn
        spawned = self.scheduler.update(self.store, state.elapsed, now_ms, self.provider.facts)
        if spawned.obstacle is not None:
            events.append(ObstacleSpawnedEvent(spawned.obstacle))
        if spawned.item is not None:
            events.append(ItemSpawnedEvent(spawned.item))

        # Move
        for obstacle in self.store.obstacles:
            obstacle.y += speed * dt_sec
        for item in self.store.items:
            item.y += item_speed * dt_sec

        # Cull whatever has left the bottom of the play area
        height = self.layout.height
        self.store.retain_obstacles(lambda o: o.y < height + o.size)
        self.store.retain_items(lambda i: i.y < height + i.size)

        if state.toast_until_ms and now_ms >= state.toast_until_ms:
            state.toast = None
            state.toast_until_ms = 0.0

        player = self.player_rect(state)

        # Items before obstacles, so a shield picked up this frame counts
        self._collide_items(state, player, now_ms, events)
        if not self._collide_obstacles(state, player, events):
            return events

        state.score += SURVIVAL_POINTS_PER_SECOND * dt_sec
        return events

    def _collide_items(self, state: RoundState, player: Rect, now_ms: float,
                       events: List[GameEvent]) -> None:
        collected: List[Item] = []
        for item in self.store.items:
            if intersects(player, self.item_rect(item)):
                apply_item(state, item, now_ms)
                collected.append(item)
                events.append(ItemCollectedEvent(item))

        if collected:
            collected_ids = {i.id for i in collected}
            self.store.retain_items(lambda i: i.id not in collected_ids)

    def _collide_obstacles(self, state: RoundState, player: Rect,
                           events: List[GameEvent]) -> bool:
        """
        Resolve at most one obstacle hit.
        Returns False if the round ended.
        """
        for obstacle in self.store.obstacles:
            if not intersects(player, self.obstacle_rect(obstacle)):
                continue

            if state.shield_active:
                state.shield_active = False
                hit_id = obstacle.id
                self.store.retain_obstacles(lambda o: o.id != hit_id)
                events.append(ShieldConsumedEvent(obstacle))
                return True

            state.running = False
            state.score = math.floor(state.score)
            events.append(RoundEndedEvent(int(state.score), obstacle))
            return False

        return True
