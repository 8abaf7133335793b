"""
Lane Rush gameplay core.
NO UI DEPENDENCIES.
"""
from .geometry import Rect, RoadLayout, intersects
from .entities import Obstacle, Item, ItemKind, EntityStore
from .facts import Fact, FactProvider, Sport, FALLBACK_FACTS
from .spawner import SpawnScheduler
from .simulation import Simulation, RoundState, Toast
from .loop import GameLoop
from .session import Session, GamePhase, Snapshot

__all__ = [
    "Rect", "RoadLayout", "intersects",
    "Obstacle", "Item", "ItemKind", "EntityStore",
    "Fact", "FactProvider", "Sport", "FALLBACK_FACTS",
    "SpawnScheduler",
    "Simulation", "RoundState", "Toast",
    "GameLoop",
    "Session", "GamePhase", "Snapshot",
]
