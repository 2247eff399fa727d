from __future__ import annotations

from typing import TYPE_CHECKING

from jumper.internal.layers import CollisionLayer
from jumper.internal.math import Rect, Vector2D

if TYPE_CHECKING:
    from jumper.internal.transform import Transform


class BoxCollider:
    """Axis-aligned box anchored at its owner's position (bottom-left corner)."""

    def __init__(
        self,
        size: Vector2D,
        offset: Vector2D = Vector2D(0.0, 0.0),
        layer_bits: int | CollisionLayer = CollisionLayer.DEFAULT,
        mask_bits: int | CollisionLayer = CollisionLayer.ALL_BITS,
    ):
        self._enabled = True
        self._transform = None
        self._size = Vector2D(abs(size.x), abs(size.y))
        self._offset = offset.copy()

        self._layer_bits: int = int(layer_bits) or CollisionLayer.DEFAULT
        self._mask_bits: int = int(mask_bits) or CollisionLayer.ALL_BITS

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def transform(self) -> Transform:
        return self._transform

    @transform.setter
    def transform(self, transform: Transform) -> None:
        self._transform = transform

    @property
    def layer_bits(self) -> int:
        return self._layer_bits

    @property
    def mask_bits(self) -> int:
        return self._mask_bits

    @property
    def size(self) -> Vector2D:
        return self._size

    def bounds(self) -> Rect:
        pos = self._transform.position
        return Rect(
            x=pos.x + self._offset.x,
            y=pos.y + self._offset.y,
            width=self._size.x,
            height=self._size.y,
        )

    def can_collide(self, other: "BoxCollider") -> bool:
        return CollisionLayer.can_collide(
            self.layer_bits,
            self.mask_bits,
            other.layer_bits,
            other.mask_bits,
        )

    def intersects(self, other: "BoxCollider") -> bool:
        return self.bounds().intersects(other.bounds())
