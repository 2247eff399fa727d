from __future__ import annotations

from jumper.entities.core import BaseEntity
from jumper.internal.collider import BoxCollider
from jumper.internal.layers import CollisionLayer
from jumper.internal.math import Vector2D


class Obstacle(BaseEntity):
    """Ground-standing block that slides left at the global obstacle speed."""

    def __init__(self, position: Vector2D, width: float, height: float):
        super().__init__(position)
        self.width = width
        self.height = height
        self.attach_component(BoxCollider(
            size=Vector2D(width, height),
            layer_bits=CollisionLayer.OBSTACLE,
            mask_bits=CollisionLayer.PLAYER,
        ))

    @property
    def horizontal_position(self) -> float:
        return self.position.x

    def advance(self, speed: float) -> None:
        self.transform.translate(Vector2D(-speed, 0.0))

    def __repr__(self) -> str:
        return f"Obstacle(x={self.horizontal_position:.2f}, h={self.height:.2f})"
