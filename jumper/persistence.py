"""Best-score storage collaborators."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ScoreStore(Protocol):
    def load_best_score(self) -> int:
        ...

    def save_best_score(self, score: int) -> None:
        ...


class NullScoreStore:
    """No storage at all: the best score starts at 0 every process."""

    def load_best_score(self) -> int:
        return 0

    def save_best_score(self, score: int) -> None:
        pass


class MemoryScoreStore:
    def __init__(self, best_score: int = 0):
        self.best_score = int(best_score)
        self.saves = 0

    def load_best_score(self) -> int:
        return self.best_score

    def save_best_score(self, score: int) -> None:
        self.best_score = int(score)
        self.saves += 1


class JsonScoreStore:
    """
    Keeps the best score in a small JSON document::

        {"best_score": 42}

    A missing file reads as 0. A corrupt or unreadable file also reads as 0,
    with a warning, so a damaged file never blocks a game from starting.
    """

    KEY = "best_score"

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_best_score(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data[self.KEY]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not read best score from {self.path}: {e}")
            return 0

    def save_best_score(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.KEY: int(score)}), encoding="utf-8")
        logger.debug(f"Best score {score} saved to {self.path}")
