from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumper.internal.transform import Transform


class RigidBody:
    """
    Vertical-only body. Velocity is in units per tick, positive is up.

    The body only tracks whether it is airborne; integration and the ground
    clamp are done by :class:`jumper.internal.physics.Physics`.
    """

    def __init__(self, is_static: bool = False):
        self._transform: Transform = None
        self._velocity: float = 0.0
        self._airborne: bool = False
        self._is_static: bool = is_static
        self._enabled: bool = True

    @property
    def transform(self) -> Transform:
        return self._transform

    @transform.setter
    def transform(self, transform: Transform) -> None:
        self._transform = transform

    @property
    def velocity(self) -> float:
        return self._velocity

    def set_velocity(self, velocity: float) -> None:
        if self._is_static:
            return
        self._velocity = float(velocity)

    @property
    def height(self) -> float:
        return self.transform.position.y

    def set_height(self, height: float) -> None:
        self.transform.position.y = float(height)

    @property
    def is_airborne(self) -> bool:
        return self._airborne

    @property
    def is_static(self) -> bool:
        return self._is_static

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def launch(self, impulse: float) -> bool:
        """Leave the ground with ``impulse`` as the new velocity; no-op while airborne."""
        if self._is_static or not self._enabled or self._airborne:
            return False
        self._velocity = float(impulse)
        self._airborne = True
        return True

    def land(self, ground: float) -> None:
        self.set_height(ground)
        self._velocity = 0.0
        self._airborne = False

    def reset(self, ground: float = 0.0) -> None:
        self.land(ground)
