"""Core data contracts and configuration validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from gridpath.sim.errors import InvalidConfig

Coord = tuple[int, int]

MIN_GRID_SIZE = 2
MAX_WALL_FRACTION = 0.5
DEFAULT_GRID_SIZE = 20
DEFAULT_WALL_FRACTION = 0.3
DEFAULT_MAX_REGENERATIONS = 100


def is_valid_wall_fraction(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and 0.0 <= value <= MAX_WALL_FRACTION


def as_coord(position: Sequence[int]) -> Coord:
    """Return ``position`` as an ``(x, z)`` tuple of ints, rejecting anything else."""
    try:
        x, z = position
    except (TypeError, ValueError) as exc:
        raise InvalidConfig(f"Position {position!r} must be an (x, z) pair.") from exc
    for value in (x, z):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfig(f"Position {position!r} must hold integers.")
    return (int(x), int(z))


class NodeState(str, Enum):
    START = "start"
    GOAL = "goal"
    OPEN = "open"
    WALL = "wall"
    EXPLORED = "explored"
    CHOSEN = "chosen"


ANNOTATION_STATES = frozenset({NodeState.EXPLORED, NodeState.CHOSEN})
ENDPOINT_STATES = frozenset({NodeState.START, NodeState.GOAL})


class Endpoint(str, Enum):
    START = "start"
    GOAL = "goal"


class GridConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = DEFAULT_GRID_SIZE
    height: int = DEFAULT_GRID_SIZE
    wall_fraction: float = DEFAULT_WALL_FRACTION
    randomize_start_and_goal: bool = False

    @model_validator(mode="after")
    def validate_ranges(self) -> "GridConfig":
        if self.width < MIN_GRID_SIZE or self.height < MIN_GRID_SIZE:
            raise ValueError(
                f"grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}"
            )
        if not is_valid_wall_fraction(self.wall_fraction):
            raise ValueError(
                f"wall_fraction must be within [0, {MAX_WALL_FRACTION}]"
            )
        return self

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def default_goal(self) -> Coord:
        return (self.width - 1, self.height - 1)


class SandboxConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grid: GridConfig = Field(default_factory=GridConfig)
    start: Coord = (0, 0)
    goal: Coord | None = None
    max_regenerations: int = DEFAULT_MAX_REGENERATIONS
    seed: int | None = None

    @model_validator(mode="after")
    def validate_sandbox(self) -> "SandboxConfig":
        if self.max_regenerations < 1:
            raise ValueError("max_regenerations must be positive")
        return self

    def resolved_goal(self) -> Coord:
        return self.goal if self.goal is not None else self.grid.default_goal()


@dataclass(frozen=True)
class SearchResult:
    found: bool
    path: list[Coord] = field(default_factory=list)
    cost: float = math.inf
    explored: int = 0


def parse_grid_config(raw: GridConfig | Mapping[str, Any]) -> GridConfig:
    """Validate a grid config, raising InvalidConfig on any failure."""
    data = raw.model_dump() if isinstance(raw, GridConfig) else dict(raw)
    try:
        return GridConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfig(_first_error(exc)) from exc


def parse_sandbox_config(raw: Mapping[str, Any]) -> SandboxConfig:
    try:
        return SandboxConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidConfig(_first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
