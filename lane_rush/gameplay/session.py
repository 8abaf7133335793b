"""
Session controller - owns a round and orchestrates all gameplay.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without any UI framework.
"""
import logging
import math
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

from .geometry import Rect, RoadLayout, clamp_lane
from .entities import ItemKind
from .facts import FactProvider
from .spawner import SpawnScheduler, ramp_fraction, obstacle_interval_ms
from .simulation import (
    Simulation, RoundState, Toast, GameEvent, RoundEndedEvent, item_emoji,
)
from .loop import GameLoop
from .constants import CENTER_LANE, PUBLISH_INTERVAL_MS

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Lifecycle of a round."""
    IDLE = auto()       # Not started yet
    RUNNING = auto()    # Simulation ticking
    ENDED = auto()      # Crashed or exited; terminal until start()


@dataclass
class PhaseChangedEvent(GameEvent):
    """Round phase changed."""
    old_phase: GamePhase
    new_phase: GamePhase


@dataclass(frozen=True)
class EntityView:
    """Read-only view of one obstacle or item for the renderer."""
    id: int
    lane: int
    rect: Rect
    kind: Optional[ItemKind] = None
    emoji: str = ""
    color: str = ""


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame. Never mutated."""
    phase: GamePhase
    lane: int
    player: Rect
    obstacles: Tuple[EntityView, ...]
    items: Tuple[EntityView, ...]
    score: int
    shield_active: bool
    slow_mo: bool
    toast: Optional[Toast]
    layout: RoadLayout
    hint: str = ""


class Session:
    """
    Owns one player's rounds: lane, phase, timers, score.

    Accepts intents as method calls, advances via tick(now_ms), and exposes
    state as plain data. A round ends exactly once; the final score goes to
    `on_game_over` and nowhere else.

    Usage:
        session = Session(FactProvider(), on_game_over=store.record)
        session.resize(400, 800)
        session.start()
        while session.phase == GamePhase.RUNNING:
            events = session.tick(clock_ms())
            # UI reads session.snapshot(now_ms) and renders
    """

    def __init__(
        self,
        provider: FactProvider,
        width: float = 0.0,
        height: float = 0.0,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
        on_publish: Optional[Callable[[Snapshot], None]] = None,
        publish_interval_ms: float = PUBLISH_INTERVAL_MS,
    ):
        self.provider = provider
        self.on_game_over = on_game_over
        self.on_publish = on_publish
        self.publish_interval_ms = publish_interval_ms

        scheduler = SpawnScheduler(rng=rng if rng is not None else random.Random())
        self.simulation = Simulation(RoadLayout(width, height), provider, scheduler)
        self.state = RoundState()
        self.phase = GamePhase.IDLE

        self.loop: GameLoop[List[GameEvent]] = GameLoop(
            on_frame=self._on_frame,
            is_active=self._can_tick,
        )

        self.final_score: Optional[int] = None
        self._last_publish_ms: Optional[float] = None

    # =========================================================================
    # INTENTS
    # =========================================================================

    def start(self) -> List[GameEvent]:
        """Begin a fresh round (from IDLE or ENDED). Ignored while running."""
        if self.phase == GamePhase.RUNNING:
            return []

        old_phase = self.phase
        self.state = RoundState(lane=CENTER_LANE, running=True)
        self.simulation.reset()
        self.loop.suspend()
        self.final_score = None
        self._last_publish_ms = None
        self.phase = GamePhase.RUNNING

        logger.info(f"Round started ({len(self.provider.facts)} facts in pool)")
        return [PhaseChangedEvent(old_phase, self.phase)]

    def request_lane_change(self, direction: int) -> bool:
        """
        Move one lane left (-1) or right (+1).
        Returns True if the lane changed. Boundaries and non-running phases are no-ops.
        """
        if self.phase != GamePhase.RUNNING or direction == 0:
            return False

        step = 1 if direction > 0 else -1
        new_lane = clamp_lane(self.state.lane + step)
        if new_lane == self.state.lane:
            return False
        self.state.lane = new_lane
        return True

    def exit(self) -> List[GameEvent]:
        """
        Abort the round without a collision.
        No score is reported: quitting is not a loss.
        """
        if self.phase != GamePhase.RUNNING:
            return []

        self.state.running = False
        self.loop.suspend()
        old_phase = self.phase
        self.phase = GamePhase.ENDED
        logger.info(f"Round exited at score {self.score}")
        return [PhaseChangedEvent(old_phase, self.phase)]

    def resize(self, width: float, height: float) -> None:
        """Set the play area. An empty area pauses ticking."""
        self.simulation.layout = RoadLayout(width, height)

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def tick(self, now_ms: float) -> List[GameEvent]:
        """
        Drive one frame from a monotonic timestamp.
        Returns events that occurred.
        """
        events = self.loop.tick(now_ms)
        return events if events is not None else []

    def _can_tick(self) -> bool:
        return self.phase == GamePhase.RUNNING and self.simulation.layout.is_valid

    def _on_frame(self, dt_sec: float, now_ms: float) -> List[GameEvent]:
        return self.step(dt_sec, now_ms)

    def step(self, dt_sec: float, now_ms: float) -> List[GameEvent]:
        """Run one simulation step with an explicit delta (bypasses the loop clamp)."""
        if self.phase != GamePhase.RUNNING:
            return []

        events = self.simulation.step(self.state, dt_sec, now_ms)

        for event in events:
            if isinstance(event, RoundEndedEvent):
                self._end_round(event.score, events)
                break

        self._maybe_publish(now_ms)
        return events

    def _end_round(self, score: int, events: List[GameEvent]) -> None:
        old_phase = self.phase
        self.phase = GamePhase.ENDED
        self.final_score = score
        self.loop.suspend()
        events.append(PhaseChangedEvent(old_phase, self.phase))

        logger.info(f"Round over: score {score} after {self.state.elapsed:.1f}s")
        if self.on_game_over is not None:
            self.on_game_over(score)

    def _maybe_publish(self, now_ms: float) -> None:
        """Hand a snapshot to the presentation layer, at most once per interval."""
        if self.on_publish is None:
            return
        if (
            self._last_publish_ms is not None
            and now_ms - self._last_publish_ms < self.publish_interval_ms
        ):
            return
        self._last_publish_ms = now_ms
        self.on_publish(self.snapshot(now_ms))

    # =========================================================================
    # STATE QUERIES (for UI to read)
    # =========================================================================

    @property
    def lane(self) -> int:
        return self.state.lane

    @property
    def score(self) -> int:
        """Score as displayed (floored)."""
        return math.floor(self.state.score)

    @property
    def shield_active(self) -> bool:
        return self.state.shield_active

    @property
    def elapsed(self) -> float:
        return self.state.elapsed

    @property
    def ramp(self) -> float:
        """Difficulty ramp fraction, 0.0 to 1.0."""
        return ramp_fraction(self.state.elapsed)

    @property
    def obstacle_interval_ms(self) -> int:
        """Current spacing between obstacle spawns."""
        return obstacle_interval_ms(self.state.elapsed)

    def is_slow_mo(self, now_ms: float) -> bool:
        return self.state.is_slow_mo(now_ms)

    def snapshot(self, now_ms: float) -> Snapshot:
        """Read-only copy of everything the renderer draws."""
        sim = self.simulation
        obstacles = tuple(
            EntityView(id=o.id, lane=o.lane, rect=sim.obstacle_rect(o))
            for o in sim.store.obstacles
        )
        items = tuple(
            EntityView(
                id=i.id,
                lane=i.lane,
                rect=sim.item_rect(i),
                kind=i.kind,
                emoji=item_emoji(i),
                color=i.fact.color,
            )
            for i in sim.store.items
        )
        return Snapshot(
            phase=self.phase,
            lane=self.state.lane,
            player=sim.player_rect(self.state),
            obstacles=obstacles,
            items=items,
            score=self.score,
            shield_active=self.state.shield_active,
            slow_mo=self.state.is_slow_mo(now_ms),
            toast=self.state.toast,
            layout=sim.layout,
            hint=self.provider.status_hint(),
        )

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, seconds: float, dt: float = 0.1, start_ms: float = 0.0) -> List[GameEvent]:
        """
        Step the round with a fixed dt for a number of seconds.
        The clock advances by dt per step starting after start_ms.
        Returns all events that occurred.
        """
        all_events: List[GameEvent] = []
        steps = int(round(seconds / dt))
        now_ms = start_ms
        for _ in range(steps):
            if self.phase != GamePhase.RUNNING:
                break
            now_ms += dt * 1000.0
            all_events.extend(self.step(dt, now_ms))
        return all_events
