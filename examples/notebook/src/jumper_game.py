from __future__ import annotations

import asyncio
import os
import sys
from typing import Any, Dict, Optional

from ipycanvas import Canvas, hold_canvas
from ipyevents import Event

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from jumper.config import EngineSettings, configure_logging
from jumper.internal.math import Rect
from jumper.simulation import RunState, Simulation


class JumperGame:
    """
    Notebook front-end for the jumper engine.

    Draws a read-only projection of the simulation on an ``ipycanvas`` canvas
    and forwards keyboard input: Space jumps, Enter starts or pauses.

    Parameters
    ----------
    simulation: Simulation | None
        Engine to drive; a real-time one is created from ``settings`` if omitted.
    settings: EngineSettings | None
        Used only when ``simulation`` is omitted.
    """

    jump_key = " "
    toggle_key = "Enter"

    def __init__(
        self,
        simulation: Optional[Simulation] = None,
        *,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.simulation = simulation or Simulation(settings=settings)
        self.width = int(self.simulation.world.width)
        self.height = int(self.simulation.world.height)
        self.dt = 1 / 60.0

        self.canvas: Canvas = Canvas(width=self.width, height=self.height)
        self.canvas.layout.border = "2px solid #999"
        self.canvas.layout.width = f"{self.width}px"
        self.canvas.layout.height = f"{self.height}px"

        self._draw_task: Optional[asyncio.Task] = None
        self.message: str = "Press ENTER to start"

        self.simulation.add_listener(self._on_state_change)
        self._bind_events()
        self._draw()

    # ------------------------------------------------------------------ #
    # Input binding
    # ------------------------------------------------------------------ #
    def _bind_events(self) -> None:
        self._event = Event(
            source=self.canvas,
            watched_events=["keydown"],
            prevent_default_action=True,
            stop_propagation=True,
        )
        self._event.on_dom_event(self._handle_dom_event)

    def _handle_dom_event(self, event: Dict[str, Any]) -> None:
        if event.get("type") != "keydown" or event.get("repeat", False):
            return
        key = event.get("key")
        if key == self.jump_key:
            self.simulation.request_jump()
        elif key == self.toggle_key:
            self.simulation.toggle()

    def _on_state_change(self, old: RunState, new: RunState) -> None:
        if new is RunState.RUNNING:
            self.message = ""
        elif new is RunState.PAUSED:
            self.message = "Game Paused"
        elif new is RunState.ENDED:
            self.message = f"Game Over! Your score was: {self.simulation.get_score()}"

    # ------------------------------------------------------------------ #
    # Draw loop
    # ------------------------------------------------------------------ #
    def show(self) -> None:
        if self._draw_task is None or self._draw_task.done():
            self._draw_task = asyncio.create_task(self._draw_loop())
        try:
            self.canvas.focus()
        except Exception:
            pass

    def close(self) -> None:
        self.simulation.stop()
        if self._draw_task and not self._draw_task.done():
            self._draw_task.cancel()
        self._draw_task = None

    async def _draw_loop(self) -> None:
        try:
            while True:
                self._draw()
                await asyncio.sleep(self.dt)
        except asyncio.CancelledError:
            pass

    def _to_canvas(self, rect: Rect) -> tuple[float, float, float, float]:
        # Model y grows upwards from the ground, canvas y grows downwards
        return rect.x, self.height - rect.top, rect.width, rect.height

    def _draw(self) -> None:
        sim = self.simulation
        with hold_canvas(self.canvas):
            self.canvas.clear()
            self.canvas.fill_style = "#f7fafc"
            self.canvas.fill_rect(0, 0, self.width, self.height)

            self.canvas.fill_style = "#3ee5df"
            for box in sim.get_obstacle_boxes():
                self.canvas.fill_rect(*self._to_canvas(box))

            self.canvas.fill_style = "#4a5568"
            self.canvas.fill_rect(*self._to_canvas(sim.get_player_box()))

            self.canvas.fill_style = "#000"
            self.canvas.font = "14px monospace"
            self.canvas.fill_text(f"Score: {sim.get_score()}", 10, 18)
            self.canvas.fill_text(f"High Score: {sim.get_best_score()}", self.width - 150, 18)

            if self.message:
                self.canvas.fill_style = "rgba(0, 0, 0, 0.55)"
                self.canvas.fill_rect(0, self.height / 2 - 30, self.width, 60)
                self.canvas.fill_style = "#ffffff"
                self.canvas.font = "20px monospace"
                self.canvas.text_align = "center"
                self.canvas.fill_text(self.message, self.width / 2, self.height / 2 + 7)
                self.canvas.text_align = "left"


def create_game(settings: Optional[EngineSettings] = None, debug: bool = False) -> JumperGame:
    """Notebook entry point: set up logging, build the game and start drawing."""
    configure_logging(debug=debug)
    game = JumperGame(settings=settings)
    game.show()
    return game
