from __future__ import annotations

import logging
from typing import Callable, List, Optional

import numpy as np

from jumper.entities.obstacle import Obstacle
from jumper.entities.player import Player
from jumper.internal.math import Rect
from jumper.internal.physics import Physics
from jumper.world import World

logger = logging.getLogger(__name__)


class ObstacleManager:
    """
    Owns the live obstacles, in spawn order.

    ``on_retire`` is called for every obstacle that leaves the playfield on the
    left; the engine uses it to award a point.
    """

    def __init__(
        self,
        world: World,
        physics: Physics,
        width: float,
        min_height: float,
        max_height: float,
        on_retire: Callable[[Obstacle], None],
        rng: Optional[np.random.Generator] = None,
    ):
        self.world = world
        self.physics = physics
        self.width = width
        self.min_height = min_height
        self.max_height = max_height
        self.on_retire = on_retire
        if rng is None:
            rng = np.random.default_rng()
        self.rng = rng

        self.speed: float = 0.0
        self._obstacles: List[Obstacle] = []

    @property
    def obstacles(self) -> List[Obstacle]:
        return list(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    def set_speed(self, speed: float) -> None:
        self.speed = float(speed)

    def spawn(self) -> Obstacle:
        height = float(self.rng.uniform(self.min_height, self.max_height))
        obstacle = Obstacle(self.world.spawn_point, width=self.width, height=height)
        self._obstacles.append(obstacle)
        logger.debug(f"Spawned {obstacle} ({len(self._obstacles)} live)")
        return obstacle

    def advance(self, player: Player) -> Optional[Obstacle]:
        """
        Move every obstacle left by the current speed, testing each against the
        player right after it moves.

        Returns the first obstacle that hits the player, in which case the
        remaining obstacles are left where they are. Obstacles that end up fully
        past the left edge are removed and reported through ``on_retire``.
        """
        speed = self.speed
        for obstacle in list(self._obstacles):
            obstacle.advance(speed)

            if self.physics.collides(player.collider, obstacle.collider):
                return obstacle

            if self.world.is_past_left_edge(obstacle.bounds):
                self._obstacles.remove(obstacle)
                self.on_retire(obstacle)
        return None

    def clear(self) -> None:
        self._obstacles.clear()

    def boxes(self) -> List[Rect]:
        return [obstacle.bounds for obstacle in self._obstacles]
