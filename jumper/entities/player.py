from __future__ import annotations

from jumper.entities.core import BaseEntity
from jumper.internal.collider import BoxCollider
from jumper.internal.layers import CollisionLayer
from jumper.internal.math import Vector2D
from jumper.internal.rigidbody import RigidBody


class Player(BaseEntity):
    """The jumping entity: fixed x, fixed box, moves only vertically."""

    def __init__(self, x: float, size: Vector2D, jump_strength: float, ground: float = 0.0):
        super().__init__(Vector2D(x, ground))
        self.start_x = x
        self.ground = ground
        self.jump_strength = jump_strength

        self.attach_component(BoxCollider(
            size=size,
            layer_bits=CollisionLayer.PLAYER,
            mask_bits=CollisionLayer.OBSTACLE,
        ))
        self.attach_component(RigidBody())

    @property
    def vertical_position(self) -> float:
        return self.position.y

    @property
    def vertical_velocity(self) -> float:
        return self.rigidbody.velocity

    @property
    def is_airborne(self) -> bool:
        return self.rigidbody.is_airborne

    def jump(self) -> bool:
        return self.rigidbody.launch(self.jump_strength)

    def reset(self) -> None:
        self.transform.set_position(Vector2D(self.start_x, self.ground))
        self.rigidbody.reset(self.ground)

    def __repr__(self) -> str:
        return (
            f"Player(y={self.vertical_position:.2f}, vy={self.vertical_velocity:.2f}, "
            f"airborne={self.is_airborne})"
        )
