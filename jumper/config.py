"""
Engine settings using Pydantic.

Settings are loaded from ``JUMPER_``-prefixed environment variables with .env
file support, and validated on construction and on assignment. Anything that
would produce undefined motion fails fast with :class:`ConfigurationError`.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when engine settings are malformed or out of range."""


class EngineSettings(BaseSettings):
    """Playfield geometry, physics constants and difficulty policy."""

    model_config = SettingsConfigDict(
        env_prefix="JUMPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    # Playfield
    playfield_width: float = Field(default=800.0, gt=0)
    playfield_height: float = Field(default=300.0, gt=0)

    # Player box, anchored at its bottom-left corner
    player_x: float = Field(default=100.0, ge=0)
    player_width: float = Field(default=40.0, gt=0)
    player_height: float = Field(default=40.0, gt=0)

    # Physics, per tick
    gravity: float = Field(default=0.9, gt=0)
    jump_strength: float = Field(default=28.0, gt=0)

    # Obstacles
    obstacle_width: float = Field(default=20.0, gt=0)
    min_obstacle_height: float = Field(default=30.0, gt=0)

    # Difficulty
    base_obstacle_speed: float = Field(default=3.0, gt=0)
    speed_step: float = Field(default=1.0, ge=0)
    speed_score_step: int = Field(default=10, gt=0)
    base_spawn_interval_ms: int = Field(default=2100, gt=0)
    interval_step_ms: int = Field(default=50, ge=0)
    interval_score_step: int = Field(default=20, gt=0)
    difficulty_check_every: int = Field(default=10, gt=0)

    # Real-time scheduling
    frame_rate: float = Field(default=60.0, gt=0)

    # High score file, used by JsonScoreStore when set
    best_score_path: Optional[Path] = None

    def __init__(self, **values: Any) -> None:
        try:
            super().__init__(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid engine settings: {exc}") from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid value for {name}: {exc}") from exc

    @model_validator(mode="after")
    def _check_geometry(self) -> "EngineSettings":
        if self.min_obstacle_height > self.max_obstacle_height:
            raise ValueError(
                f"min_obstacle_height ({self.min_obstacle_height}) exceeds half the "
                f"playfield height ({self.max_obstacle_height})"
            )
        if self.player_x + self.player_width > self.playfield_width:
            raise ValueError("player box does not fit inside the playfield")
        if self.player_height > self.playfield_height:
            raise ValueError("player is taller than the playfield")
        return self

    @property
    def max_obstacle_height(self) -> float:
        """Obstacles are at most half as tall as the playfield."""
        return self.playfield_height / 2


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()


def configure_logging(debug: bool = False) -> None:
    """Configure logging for hosts that don't set it up themselves."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.debug(f"Logging configured at {logging.getLevelName(level)}")
