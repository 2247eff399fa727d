from __future__ import annotations

from typing import Optional
from uuid import uuid4

from jumper.internal.collider import BoxCollider
from jumper.internal.math import Rect, Vector2D
from jumper.internal.rigidbody import RigidBody
from jumper.internal.transform import Transform


class BaseEntity:
    def __init__(self, position: Vector2D):
        self.id = uuid4()
        self._transform = Transform(position)

    def attach_component(self, component):
        self.transform.attach_component(component)
        setattr(component, "entity", self)
        return component

    def get_component(self, cls):
        return self.transform.get_component(cls)

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def position(self) -> Vector2D:
        return self._transform.position

    @property
    def collider(self) -> Optional[BoxCollider]:
        return self.get_component(BoxCollider)

    @property
    def rigidbody(self) -> Optional[RigidBody]:
        return self.get_component(RigidBody)

    @property
    def bounds(self) -> Optional[Rect]:
        if self.collider:
            return self.collider.bounds()
        return None
