"""
Best-score persistence.

Receives the final score of each round and keeps the maximum in a small
JSON file. Read failures count as no previous score.
"""
import json
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "laneSwitchingHighScore:v1"


class HighScoreStore:
    """Stores the best score seen so far."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self.last_score: int = 0
        self.best: int = 0

    def load(self) -> int:
        """Read the stored best score (0 if missing or unreadable)."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            value = int(data.get(HIGH_SCORE_KEY, 0))
        except FileNotFoundError:
            value = 0
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable high score file {self.path}: {e}")
            value = 0
        self.best = max(0, value)
        return self.best

    def record(self, score: int) -> int:
        """
        Compare a final score against the stored best and save if higher.
        Returns the best score after recording.
        """
        score = max(0, int(score))
        self.last_score = score
        existing = self.load()
        best = max(existing, score)
        self.best = best

        if best != existing:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(json.dumps({HIGH_SCORE_KEY: best}), encoding="utf-8")
                logger.info(f"New high score: {best}")
            except OSError as e:
                logger.warning(f"Could not save high score to {self.path}: {e}")
        return best
