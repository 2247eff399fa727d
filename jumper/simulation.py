from __future__ import annotations

import itertools
import logging
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Optional

import numpy as np

from jumper.config import EngineSettings, get_settings
from jumper.entities.obstacle import Obstacle
from jumper.entities.player import Player
from jumper.fsm.core import EventData, Machine
from jumper.internal.math import Rect, Vector2D
from jumper.internal.physics import Physics
from jumper.logic.difficulty import DifficultyController
from jumper.logic.obstacles import ObstacleManager
from jumper.persistence import JsonScoreStore, NullScoreStore, ScoreStore
from jumper.scheduling import AsyncioScheduler, Scheduler
from jumper.world import World

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


class RunTrigger(Enum):
    START = "start"
    PAUSE = "pause"
    END = "end"


class Simulation:
    """
    The jumper game engine.

    Input collaborators call :meth:`start`, :meth:`stop` and
    :meth:`request_jump`; renderers read the ``get_*`` snapshots. Everything
    else is driven by the scheduler: one tick per frame advances the player and
    the obstacles, and a separate periodic timer spawns obstacles.
    """

    def __init__(
            self,
            settings: Optional[EngineSettings] = None,
            scheduler: Optional[Scheduler] = None,
            store: Optional[ScoreStore] = None,
            rng: Optional[np.random.Generator] = None,
        ):
        if settings is None:
            settings = get_settings()
        self.settings = settings

        if scheduler is None:
            scheduler = AsyncioScheduler(frame_rate=settings.frame_rate)
        self.scheduler = scheduler

        if store is None:
            store = (
                JsonScoreStore(settings.best_score_path)
                if settings.best_score_path is not None else NullScoreStore()
            )
        self.store = store

        self.world = World(settings.playfield_width, settings.playfield_height)
        self.physics = Physics(gravity=settings.gravity, ground=self.world.ground)
        self.player = Player(
            x=settings.player_x,
            size=Vector2D(settings.player_width, settings.player_height),
            jump_strength=settings.jump_strength,
            ground=self.world.ground,
        )
        self.difficulty = DifficultyController(settings)
        self.obstacles = ObstacleManager(
            world=self.world,
            physics=self.physics,
            width=settings.obstacle_width,
            min_height=settings.min_obstacle_height,
            max_height=settings.max_obstacle_height,
            on_retire=self._on_obstacle_retired,
            rng=rng,
        )
        self.obstacles.set_speed(self.difficulty.obstacle_speed)

        self.score = 0
        self._best_score = max(0, int(self.store.load_best_score()))
        self.current_step = 0

        # Each arming gets a fresh token; callbacks carrying an older token are stale
        self._tokens = itertools.count(1)
        self._tick_handle: Any = None
        self._tick_token = 0
        self._spawn_handle: Any = None
        self._spawn_token = 0

        self.machine = self._build_machine()

    def _build_machine(self) -> Machine:
        machine = Machine(states=list(RunState), initial_state=RunState.IDLE, name="run")
        machine.add_transition(
            [RunState.IDLE, RunState.PAUSED, RunState.ENDED],
            RunState.RUNNING,
            RunTrigger.START,
            before=self._begin_run,
        )
        machine.add_transition(
            RunState.RUNNING,
            RunState.PAUSED,
            RunTrigger.PAUSE,
            before=self._halt,
        )
        machine.add_transition(
            RunState.RUNNING,
            RunState.ENDED,
            RunTrigger.END,
            before=[self._record_best_score, self._halt],
        )
        return machine

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        if not self.machine.trigger(RunTrigger.START):
            logger.debug(f"start() ignored while {self.get_run_state().name}")

    def stop(self) -> None:
        if not self.machine.trigger(RunTrigger.PAUSE):
            logger.debug(f"stop() ignored while {self.get_run_state().name}")

    def toggle(self) -> None:
        """Start/stop button: pause a running game, otherwise start a new run."""
        if self.is_running:
            self.stop()
        else:
            self.start()

    def request_jump(self) -> None:
        if not self.is_running:
            logger.debug(f"Jump ignored while {self.get_run_state().name}")
            return
        if not self.player.jump():
            logger.debug("Jump ignored while airborne")

    def add_listener(self, callback: Callable[[RunState, RunState], None]) -> None:
        """Register ``callback(old_state, new_state)`` for run state changes."""
        self.machine.add_listener(callback)

    def remove_listener(self, callback: Callable[[RunState, RunState], None]) -> None:
        self.machine.remove_listener(callback)

    # ------------------------------------------------------------------ #
    # Observable state
    # ------------------------------------------------------------------ #
    @property
    def is_running(self) -> bool:
        return self.machine.is_state(RunState.RUNNING)

    def get_run_state(self) -> RunState:
        return self.machine.current_state.value

    def get_score(self) -> int:
        return self.score

    def get_best_score(self) -> int:
        return self._best_score

    def get_player_box(self) -> Rect:
        return self.player.bounds

    def get_obstacle_boxes(self) -> List[Rect]:
        return self.obstacles.boxes()

    def get_spawn_interval_ms(self) -> int:
        return self.difficulty.spawn_interval_ms

    def get_obstacle_speed(self) -> float:
        return self.difficulty.obstacle_speed

    # ------------------------------------------------------------------ #
    # Lifecycle callbacks
    # ------------------------------------------------------------------ #
    def _begin_run(self, data: Optional[EventData] = None) -> None:
        self.score = 0
        self.current_step = 0
        self.player.reset()
        self.difficulty.reset()
        self.obstacles.clear()
        self.obstacles.set_speed(self.difficulty.obstacle_speed)

        self._arm_spawn_timer()
        self._schedule_tick()
        logger.info(
            f"Run started (interval {self.difficulty.spawn_interval_ms}ms, "
            f"speed {self.difficulty.obstacle_speed})"
        )

    def _halt(self, data: Optional[EventData] = None) -> None:
        self.scheduler.cancel(self._tick_handle)
        self.scheduler.cancel(self._spawn_handle)
        self._tick_handle = None
        self._spawn_handle = None
        self._tick_token = 0
        self._spawn_token = 0

    def _record_best_score(self, data: Optional[EventData] = None) -> None:
        logger.info(f"Game over! Score: {self.score}")
        if self.score <= self._best_score:
            return

        self._best_score = self.score
        logger.info(f"New best score: {self._best_score}")
        try:
            self.store.save_best_score(self._best_score)
        except OSError as e:
            logger.error(f"Failed to save best score: {e}")

    # ------------------------------------------------------------------ #
    # Scheduling
    # ------------------------------------------------------------------ #
    def _schedule_tick(self) -> None:
        self._tick_token = next(self._tokens)
        self._tick_handle = self.scheduler.schedule_tick(partial(self._on_tick, self._tick_token))

    def _arm_spawn_timer(self) -> None:
        self.scheduler.cancel(self._spawn_handle)
        self._spawn_token = next(self._tokens)
        self._spawn_handle = self.scheduler.schedule_interval(
            partial(self._on_spawn_timer, self._spawn_token),
            self.difficulty.spawn_interval_ms,
        )

    def _on_tick(self, token: int) -> None:
        if token != self._tick_token or not self.is_running:
            return
        self._tick_handle = None
        self.current_step += 1

        self.physics.step(self.player.rigidbody)

        hit = self.obstacles.advance(self.player)
        if hit is not None:
            self._on_collision(hit)
            return

        self._schedule_tick()

    def _on_spawn_timer(self, token: int) -> None:
        if token != self._spawn_token or not self.is_running:
            return
        self.obstacles.spawn()

    # ------------------------------------------------------------------ #
    # Game rules
    # ------------------------------------------------------------------ #
    def _on_collision(self, obstacle: Obstacle) -> None:
        logger.info(f"Collision with {obstacle} at step {self.current_step}")
        self.machine.trigger(RunTrigger.END)

    def _on_obstacle_retired(self, obstacle: Obstacle) -> None:
        self.score += 1
        change = self.difficulty.on_score(self.score)
        if change.interval_changed:
            self._arm_spawn_timer()
        if change.speed_changed:
            self.obstacles.set_speed(self.difficulty.obstacle_speed)
