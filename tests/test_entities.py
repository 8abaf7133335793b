"""
Tests for obstacles, items and the entity store.
"""
from lane_rush.gameplay.entities import EntityStore, Obstacle, Item, ItemKind, ITEM_KINDS
from lane_rush.gameplay.facts import FALLBACK_FACTS
from lane_rush.gameplay.constants import OBSTACLE_SIZE, ITEM_SIZE


def make_item(store, lane=0, y=0.0, kind=ItemKind.TRIVIA):
    return Item(id=store.next_id(), lane=lane, y=y, kind=kind, fact=FALLBACK_FACTS[0])


class TestEntityStore:
    """Tests for EntityStore."""

    def test_ids_start_at_one_and_increase(self):
        store = EntityStore()
        assert [store.next_id() for _ in range(4)] == [1, 2, 3, 4]

    def test_ids_shared_between_kinds(self):
        """Obstacles and items draw from the same counter."""
        store = EntityStore()
        store.add_obstacle(Obstacle(store.next_id(), 0, 0.0))
        store.add_item(make_item(store))
        store.add_obstacle(Obstacle(store.next_id(), 1, 0.0))

        assert [o.id for o in store.obstacles] == [1, 3]
        assert [i.id for i in store.items] == [2]

    def test_retain_filters_in_place(self):
        """Retain keeps only matching entities and the same list object."""
        store = EntityStore()
        obstacles = store.obstacles
        for y in (10.0, 500.0, 900.0):
            store.add_obstacle(Obstacle(store.next_id(), 0, y))

        store.retain_obstacles(lambda o: o.y < 800)

        assert store.obstacles is obstacles
        assert [o.y for o in store.obstacles] == [10.0, 500.0]

    def test_retain_items(self):
        store = EntityStore()
        store.add_item(make_item(store, kind=ItemKind.BOOST))
        store.add_item(make_item(store, kind=ItemKind.SHIELD))

        store.retain_items(lambda i: i.kind != ItemKind.BOOST)

        assert [i.kind for i in store.items] == [ItemKind.SHIELD]

    def test_iter_and_len(self):
        store = EntityStore()
        store.add_obstacle(Obstacle(store.next_id(), 0, 0.0))
        store.add_item(make_item(store))

        assert len(store) == 2
        assert len(list(store.iter_entities())) == 2

    def test_clear_restarts_ids(self):
        store = EntityStore()
        store.add_obstacle(Obstacle(store.next_id(), 0, 0.0))
        store.clear()

        assert len(store) == 0
        assert store.next_id() == 1


class TestEntityTypes:
    """Tests for entity dataclasses."""

    def test_sizes(self):
        assert Obstacle(1, 0, 0.0).size == OBSTACLE_SIZE
        assert make_item(EntityStore()).size == ITEM_SIZE

    def test_four_kinds(self):
        assert set(ITEM_KINDS) == set(ItemKind)
        assert len(ITEM_KINDS) == 4
