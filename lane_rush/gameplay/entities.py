"""
Obstacles, items and the store that holds them while they are on the road.
NO UI DEPENDENCIES.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List

from .facts import Fact
from .constants import OBSTACLE_SIZE, ITEM_SIZE


class ItemKind(Enum):
    """Power-up types. Every item carries a fact regardless of kind."""
    SHIELD = "shield"
    SLOW = "slow"
    BOOST = "boost"
    TRIVIA = "trivia"


ITEM_KINDS = (ItemKind.SHIELD, ItemKind.SLOW, ItemKind.BOOST, ItemKind.TRIVIA)


@dataclass
class Obstacle:
    """A hazard falling down one lane."""
    id: int
    lane: int
    y: float

    size = OBSTACLE_SIZE


@dataclass
class Item:
    """A collectible falling down one lane."""
    id: int
    lane: int
    y: float
    kind: ItemKind
    fact: Fact

    size = ITEM_SIZE


class EntityStore:
    """
    Live obstacles and items for one round.

    Ids come from a single counter shared by both kinds, so they are unique
    and strictly increasing for the whole round.
    """

    def __init__(self):
        self.obstacles: List[Obstacle] = []
        self.items: List[Item] = []
        self._next_id: int = 1

    def next_id(self) -> int:
        """Allocate the next entity id."""
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add_obstacle(self, obstacle: Obstacle) -> None:
        self.obstacles.append(obstacle)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def retain_obstacles(self, keep: Callable[[Obstacle], bool]) -> None:
        """Drop every obstacle for which `keep` is False (in place)."""
        self.obstacles[:] = [o for o in self.obstacles if keep(o)]

    def retain_items(self, keep: Callable[[Item], bool]) -> None:
        """Drop every item for which `keep` is False (in place)."""
        self.items[:] = [i for i in self.items if keep(i)]

    def iter_entities(self) -> Iterator[object]:
        """Iterate over obstacles then items."""
        yield from self.obstacles
        yield from self.items

    def clear(self) -> None:
        """Empty the store and restart ids (new round)."""
        self.obstacles.clear()
        self.items.clear()
        self._next_id = 1

    def __len__(self) -> int:
        return len(self.obstacles) + len(self.items)
