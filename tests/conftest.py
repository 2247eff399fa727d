import numpy as np
import pytest

from jumper.config import EngineSettings
from jumper.internal.math import Vector2D
from jumper.persistence import MemoryScoreStore
from jumper.scheduling import ManualScheduler
from jumper.simulation import Simulation


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return MemoryScoreStore()


@pytest.fixture
def sim(settings, scheduler, store):
    return Simulation(
        settings=settings,
        scheduler=scheduler,
        store=store,
        rng=np.random.default_rng(7),
    )


def clear_obstacles(sim, count):
    """Place ``count`` obstacles just past the left edge and run one frame to retire them."""
    for _ in range(count):
        obstacle = sim.obstacles.spawn()
        obstacle.transform.set_position(Vector2D(-sim.settings.obstacle_width - 5.0, 0.0))
    sim.scheduler.run_frame()


@pytest.fixture
def score_points():
    return clear_obstacles
