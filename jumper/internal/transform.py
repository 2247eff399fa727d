from jumper.internal.math import Vector2D


class Transform:
    """Position of an entity plus the components (body, collider) attached to it."""

    def __init__(self, position: Vector2D = None):
        self.position = position.copy() if position is not None else Vector2D.zero()
        self._components = {}

    def attach_component(self, component):
        if isinstance(component, Transform):
            raise ValueError("Transform cannot be attached to another Transform.")

        self._components.setdefault(component.__class__, []).append(component)
        setattr(component, "transform", self)
        return component

    def get_component(self, cls):
        for registered, components in self._components.items():
            if issubclass(registered, cls) and components:
                return components[0]
        return None

    def translate(self, delta: Vector2D) -> None:
        self.position = self.position + delta

    def set_position(self, position: Vector2D) -> None:
        self.position = position.copy()

    def __repr__(self) -> str:
        return f"Transform(position={self.position})"
