"""
Frame-timing harness around the simulation step.
NO UI DEPENDENCIES.
"""
import logging
from typing import Callable, Generic, List, Optional, TypeVar

from .constants import MAX_FRAME_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GameLoop(Generic[T]):
    """
    Turns monotonic frame timestamps into clamped deltas.

    The loop only ticks while `is_active()` is True. Whenever it is
    inactive the previous timestamp is dropped, so resuming starts from a
    fresh baseline instead of one huge catch-up step.

    Usage:
        loop = GameLoop(on_frame=lambda dt_sec, now_ms: sim.step(state, dt_sec, now_ms),
                        is_active=lambda: state.running)
        loop.tick(now_ms)
    """

    def __init__(
        self,
        on_frame: Callable[[float, float], T],
        is_active: Callable[[], bool] = lambda: True,
        max_frame_ms: float = MAX_FRAME_MS,
    ):
        self.on_frame = on_frame
        self.is_active = is_active
        self.max_frame_ms = max_frame_ms

        self._last_ms: Optional[float] = None
        self.frames: int = 0

    @property
    def last_ms(self) -> Optional[float]:
        """Timestamp of the previous tick, or None if there is no baseline."""
        return self._last_ms

    def clamp_delta(self, now_ms: float) -> float:
        """Milliseconds since the previous tick, clamped to [0, max_frame_ms]."""
        last = self._last_ms if self._last_ms is not None else now_ms
        return min(self.max_frame_ms, max(0.0, now_ms - last))

    def tick(self, now_ms: float) -> Optional[T]:
        """
        Run one frame at `now_ms`.
        Returns the frame callback's result, or None if the loop is inactive.
        """
        if not self.is_active():
            self.suspend()
            return None

        dt_ms = self.clamp_delta(now_ms)
        self._last_ms = now_ms
        self.frames += 1
        return self.on_frame(dt_ms / 1000.0, now_ms)

    def suspend(self) -> None:
        """Drop the timing baseline."""
        if self._last_ms is not None:
            logger.debug(f"Loop suspended after {self.frames} frames")
        self._last_ms = None

    def run_fixed(self, start_ms: float, frame_ms: float, count: int) -> List[T]:
        """
        Tick `count` frames spaced `frame_ms` apart, starting after `start_ms`.
        Stops early once the loop goes inactive. Useful for testing.
        """
        results: List[T] = []
        now_ms = start_ms
        if self._last_ms is None:
            self._last_ms = start_ms
        for _ in range(count):
            now_ms += frame_ms
            result = self.tick(now_ms)
            if result is None:
                break
            results.append(result)
        return results
