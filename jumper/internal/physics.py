from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumper.internal.collider import BoxCollider
    from jumper.internal.rigidbody import RigidBody


class Physics:
    """
    Explicit Euler integrator for vertical motion plus AABB collision queries.

    Gravity is a fixed per-tick deceleration, not scaled by elapsed time: the
    tick rate is assumed constant. The ground plane is the only boundary.
    """

    def __init__(self, gravity: float, ground: float = 0.0):
        self.gravity = gravity
        self.ground = ground

    def step(self, body: RigidBody) -> None:
        if body.is_static or not body.enabled:
            return

        body.set_velocity(body.velocity - self.gravity)
        body.set_height(body.height + body.velocity)

        if body.height < self.ground:
            body.land(self.ground)

    def collides(self, a: BoxCollider, b: BoxCollider) -> bool:
        if not (a.enabled and b.enabled):
            return False
        if not a.can_collide(b):
            return False
        return a.intersects(b)
