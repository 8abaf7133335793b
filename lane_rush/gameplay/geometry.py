"""
Rectangles, overlap testing and the road layout.
NO UI DEPENDENCIES.
"""
from dataclasses import dataclass

from .constants import (
    LANES, ROAD_MAX_WIDTH, ROAD_MIN_WIDTH, ROAD_SIDE_PADDING,
    CAR_WIDTH, CAR_HEIGHT, CAR_BOTTOM_MARGIN, CAR_MIN_Y,
)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in screen space (y grows downward)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def intersects(a: Rect, b: Rect) -> bool:
    """
    True if the rectangles overlap.
    Shared edges do not count as overlap.
    """
    return (
        a.x < b.x + b.width
        and b.x < a.x + a.width
        and a.y < b.y + b.height
        and b.y < a.y + a.height
    )


def clamp_lane(lane: int) -> int:
    """Clamp any integer onto a valid lane index."""
    return max(0, min(LANES - 1, lane))


@dataclass(frozen=True)
class RoadLayout:
    """
    Maps lanes onto screen space for a given play area.

    The road is centred horizontally and split into equal lanes.
    Entities are centred in their lane.
    """
    width: float
    height: float

    @property
    def is_valid(self) -> bool:
        """A layout is only usable once the play area has a size."""
        return self.width > 0 and self.height > 0

    @property
    def road_width(self) -> float:
        usable = self.width - ROAD_SIDE_PADDING * 2
        return max(ROAD_MIN_WIDTH, min(ROAD_MAX_WIDTH, usable))

    @property
    def road_x(self) -> float:
        return (self.width - self.road_width) / 2

    @property
    def lane_width(self) -> float:
        return self.road_width / LANES

    def lane_center(self, lane: int) -> float:
        """Horizontal centre of a lane."""
        return self.road_x + self.lane_width * (lane + 0.5)

    def lane_rect(self, lane: int, y: float, size: float) -> Rect:
        """Square of the given size centred in a lane, top edge at y."""
        return Rect(self.lane_center(lane) - size / 2, y, size, size)

    def player_rect(self, lane: int) -> Rect:
        """The car's rectangle when it sits in the given lane."""
        x = self.lane_center(lane) - CAR_WIDTH / 2
        y = max(self.height - CAR_HEIGHT - CAR_BOTTOM_MARGIN, CAR_MIN_Y)
        return Rect(x, y, CAR_WIDTH, CAR_HEIGHT)
