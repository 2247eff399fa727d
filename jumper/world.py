from jumper.internal.math import Rect, Vector2D


class World:
    """
    The playfield: a ``width`` x ``height`` box whose ground line is y = 0.

    Obstacles enter at the right edge and are retired once they are fully past
    the left edge at x = 0.
    """

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.ground = 0.0

    @property
    def spawn_point(self) -> Vector2D:
        return Vector2D(self.width, self.ground)

    def is_past_left_edge(self, rect: Rect) -> bool:
        return rect.right < 0.0
