from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumper.config import EngineSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyChange:
    interval_changed: bool = False
    speed_changed: bool = False

    def __bool__(self) -> bool:
        return self.interval_changed or self.speed_changed


class DifficultyController:
    """
    Derives the obstacle spawn interval and speed from the score.

    The score is only inspected every ``difficulty_check_every`` points. At a
    check, the interval candidate grows by ``interval_step_ms`` per
    ``interval_score_step`` points and the speed candidate by ``speed_step`` per
    ``speed_score_step`` points; each is adopted only when larger than the
    current value, so neither ever decreases during a run.
    """

    def __init__(self, settings: EngineSettings):
        self.settings = settings
        self.spawn_interval_ms: int = settings.base_spawn_interval_ms
        self.obstacle_speed: float = settings.base_obstacle_speed

    def reset(self) -> None:
        self.spawn_interval_ms = self.settings.base_spawn_interval_ms
        self.obstacle_speed = self.settings.base_obstacle_speed

    def interval_for(self, score: int) -> int:
        s = self.settings
        return s.base_spawn_interval_ms + (score // s.interval_score_step) * s.interval_step_ms

    def speed_for(self, score: int) -> float:
        s = self.settings
        return s.base_obstacle_speed + (score // s.speed_score_step) * s.speed_step

    def on_score(self, score: int) -> DifficultyChange:
        if score <= 0 or score % self.settings.difficulty_check_every != 0:
            return DifficultyChange()

        interval_changed = False
        candidate_interval = self.interval_for(score)
        if candidate_interval > self.spawn_interval_ms:
            self.spawn_interval_ms = candidate_interval
            interval_changed = True
            logger.info(
                f"Score reached {score}: obstacle interval now {self.spawn_interval_ms}ms"
            )

        speed_changed = False
        candidate_speed = self.speed_for(score)
        if candidate_speed > self.obstacle_speed:
            self.obstacle_speed = candidate_speed
            speed_changed = True
            logger.info(f"Score reached {score}: obstacle speed now {self.obstacle_speed}")

        return DifficultyChange(interval_changed, speed_changed)
