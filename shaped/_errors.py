from __future__ import annotations


class ShapeError(Exception):
    """Container shape is not one of sequence, mapping or unique set."""

    container_type: type

    def __init__(self, container_type: type) -> None:
        self.container_type = container_type
        super().__init__(f"Cannot resolve container of type {container_type.__qualname__!r}")

__all__ = ("ShapeError",)
