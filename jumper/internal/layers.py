from __future__ import annotations

from enum import IntFlag


class CollisionLayer(IntFlag):
    """Bit flags used for collider layer/mask filtering."""

    DEFAULT = 1 << 0
    PLAYER = 1 << 1
    OBSTACLE = 1 << 2

    ALL_BITS = 0xFFFFFFFF
    NONE = 0x00000000

    @classmethod
    def can_collide(cls, layer_bits_a: int, mask_bits_a: int, layer_bits_b: int, mask_bits_b: int) -> bool:
        """Symmetric layer/mask check for collisions."""
        return (mask_bits_a & layer_bits_b) != 0 and (mask_bits_b & layer_bits_a) != 0
