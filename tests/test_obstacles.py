import numpy as np
import pytest

from jumper.entities.player import Player
from jumper.internal.math import Vector2D
from jumper.internal.physics import Physics
from jumper.logic.obstacles import ObstacleManager
from jumper.world import World


@pytest.fixture
def world():
    return World(800.0, 300.0)


@pytest.fixture
def player():
    return Player(x=100.0, size=Vector2D(40.0, 40.0), jump_strength=28.0)


@pytest.fixture
def retired():
    return []


@pytest.fixture
def manager(world, retired):
    manager = ObstacleManager(
        world=world,
        physics=Physics(gravity=0.9),
        width=20.0,
        min_height=30.0,
        max_height=150.0,
        on_retire=retired.append,
        rng=np.random.default_rng(1),
    )
    manager.set_speed(3.0)
    return manager


def test_spawn_at_right_edge_with_bounded_height(manager):
    for _ in range(200):
        obstacle = manager.spawn()
        assert obstacle.horizontal_position == 800.0
        assert obstacle.position.y == 0.0
        assert obstacle.width == 20.0
        assert 30.0 <= obstacle.height <= 150.0
    assert len(manager) == 200


def test_spawn_order_is_kept(manager):
    first = manager.spawn()
    second = manager.spawn()
    assert manager.obstacles == [first, second]


def test_advance_moves_every_obstacle_by_the_global_speed(manager, player):
    a = manager.spawn()
    b = manager.spawn()
    b.transform.set_position(Vector2D(500.0, 0.0))

    assert manager.advance(player) is None
    assert a.horizontal_position == 797.0
    assert b.horizontal_position == 497.0

    manager.set_speed(5.0)
    manager.advance(player)
    assert a.horizontal_position == 792.0
    assert b.horizontal_position == 492.0


def test_obstacle_is_retired_once_fully_off_screen(manager, player, retired):
    obstacle = manager.spawn()
    obstacle.transform.set_position(Vector2D(-14.0, 0.0))

    # Right edge at 3.0: still on screen
    manager.advance(player)
    assert len(manager) == 1
    assert retired == []

    # Right edge at 0.0: touching the border is not past it
    manager.advance(player)
    assert len(manager) == 1

    manager.advance(player)
    assert len(manager) == 0
    assert retired == [obstacle]


def test_advance_reports_first_collision_and_stops(manager, player):
    hitting = manager.spawn()
    hitting.transform.set_position(Vector2D(142.0, 0.0))
    behind = manager.spawn()
    behind.transform.set_position(Vector2D(600.0, 0.0))

    assert manager.advance(player) is hitting
    # Iteration stopped at the collision
    assert behind.horizontal_position == 600.0


def test_jumping_player_clears_obstacle(manager, player):
    obstacle = manager.spawn()
    obstacle.transform.set_position(Vector2D(142.0, 0.0))
    player.rigidbody.set_height(200.0)
    assert manager.advance(player) is None


def test_speed_change_during_advance_applies_next_tick(world, player):
    moved = []

    def speed_up(obstacle):
        manager.set_speed(10.0)

    manager = ObstacleManager(
        world=world,
        physics=Physics(gravity=0.9),
        width=20.0,
        min_height=30.0,
        max_height=150.0,
        on_retire=speed_up,
    )
    manager.set_speed(3.0)
    leaving = manager.spawn()
    leaving.transform.set_position(Vector2D(-22.0, 0.0))
    staying = manager.spawn()
    staying.transform.set_position(Vector2D(500.0, 0.0))

    manager.advance(player)
    moved.append(staying.horizontal_position)
    manager.advance(player)
    moved.append(staying.horizontal_position)
    assert moved == [497.0, 487.0]


def test_clear_and_boxes(manager):
    manager.spawn()
    manager.spawn()
    boxes = manager.boxes()
    assert len(boxes) == 2
    assert all(box.x == 800.0 and box.y == 0.0 for box in boxes)
    manager.clear()
    assert manager.boxes() == []
