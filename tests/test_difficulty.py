import pytest

from jumper.config import EngineSettings
from jumper.logic.difficulty import DifficultyController


@pytest.fixture
def controller():
    return DifficultyController(EngineSettings())


def test_base_values(controller):
    assert controller.spawn_interval_ms == 2100
    assert controller.obstacle_speed == 3


def test_ten_points_raise_speed_but_not_interval(controller):
    for score in range(1, 10):
        assert not controller.on_score(score)
        assert controller.obstacle_speed == 3

    change = controller.on_score(10)
    assert change.speed_changed and not change.interval_changed
    assert controller.obstacle_speed == 4
    assert controller.spawn_interval_ms == 2100


def test_twenty_points_raise_interval(controller):
    for score in range(1, 20):
        controller.on_score(score)
    assert controller.spawn_interval_ms == 2100

    change = controller.on_score(20)
    assert change.interval_changed and change.speed_changed
    assert controller.spawn_interval_ms == 2150
    assert controller.obstacle_speed == 5


def test_only_every_tenth_point_is_checked(controller):
    # Jumping straight to a non-multiple of ten changes nothing
    assert not controller.on_score(25)
    assert controller.obstacle_speed == 3
    assert controller.spawn_interval_ms == 2100

    # The next check catches up with the score so far
    controller.on_score(30)
    assert controller.obstacle_speed == 6
    assert controller.spawn_interval_ms == 2150


def test_values_never_decrease(controller):
    intervals, speeds = [], []
    for score in range(1, 101):
        controller.on_score(score)
        intervals.append(controller.spawn_interval_ms)
        speeds.append(controller.obstacle_speed)
    assert intervals == sorted(intervals)
    assert speeds == sorted(speeds)
    assert controller.spawn_interval_ms == 2100 + 5 * 50
    assert controller.obstacle_speed == 3 + 10

    # A lower score later in the run must not undo anything
    assert not controller.on_score(10)
    assert controller.obstacle_speed == 13


def test_reset_restores_base_values(controller):
    controller.on_score(40)
    controller.reset()
    assert controller.spawn_interval_ms == 2100
    assert controller.obstacle_speed == 3


def test_zero_score_is_not_a_checkpoint(controller):
    assert not controller.on_score(0)


def test_custom_steps():
    controller = DifficultyController(EngineSettings(
        base_obstacle_speed=2.0,
        speed_step=0.5,
        speed_score_step=5,
        difficulty_check_every=5,
    ))
    controller.on_score(5)
    assert controller.obstacle_speed == 2.5
