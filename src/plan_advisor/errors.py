from __future__ import annotations


class ShapeError(ValueError):
    """A record field is missing, mistyped, outside its closed set or breaks an invariant."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


__all__ = ["ShapeError"]
