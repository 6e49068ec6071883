"""Error taxonomy for grid construction, movement and regeneration."""

from __future__ import annotations


class GridError(Exception):
    """Base class for recoverable grid errors."""


class InvalidConfig(GridError):
    """Width, height, wall fraction or position outside the accepted values."""


class OutOfBounds(GridError):
    def __init__(self, position: tuple[int, int], width: int, height: int) -> None:
        super().__init__(
            f"Position {position} is outside the {width}x{height} grid."
        )
        self.position = position


class TargetBlocked(GridError):
    def __init__(self, position: tuple[int, int], reason: str) -> None:
        super().__init__(f"Cannot move to {position}: {reason}.")
        self.position = position


class NoOpenCell(GridError):
    """Start or goal placement could not find an open cell."""


class WallPlacementExhausted(GridError):
    """Wall scattering ran out of draws before placing every wall."""


class UnsolvableConfiguration(GridError):
    """Regeneration never produced a grid with a path from start to goal."""


class InvalidEdge(GridError):
    """An edge would connect a node to itself."""
