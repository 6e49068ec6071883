"""Orchestration between input events and the grid graph."""

from __future__ import annotations

import logging
import random
from typing import Any, Mapping, Sequence

from gridpath.sim.contracts import (
    DEFAULT_MAX_REGENERATIONS,
    MAX_WALL_FRACTION,
    Coord,
    Endpoint,
    GridConfig,
    NodeState,
    SandboxConfig,
    SearchResult,
    as_coord,
    is_valid_wall_fraction,
    parse_grid_config,
)
from gridpath.sim.errors import InvalidConfig, UnsolvableConfiguration
from gridpath.sim.events import NodeStateListener
from gridpath.sim.grid_graph import GridGraph
from gridpath.sim.pathfinding import PathFinder

logger = logging.getLogger(__name__)

BLOCKING_STATES = frozenset({NodeState.WALL, NodeState.START, NodeState.GOAL})


class GridController:
    """Drive one grid graph: regenerate, move endpoints, change wall density.

    The controller remembers the requested start and goal positions so a
    regeneration keeps the endpoints where the user left them. Wall fraction
    changes only apply to the next regeneration.
    """

    def __init__(
        self,
        graph: GridGraph,
        *,
        config: GridConfig | Mapping[str, Any] | None = None,
        start: Sequence[int] = (0, 0),
        goal: Sequence[int] | None = None,
        max_regenerations: int = DEFAULT_MAX_REGENERATIONS,
    ) -> None:
        if max_regenerations < 1:
            raise InvalidConfig("max_regenerations must be positive")
        self._graph = graph
        self._config = parse_grid_config(
            config if config is not None else GridConfig()
        )
        self._start_pos: Coord = as_coord(start)
        self._goal_pos: Coord | None = as_coord(goal) if goal is not None else None
        self._max_regenerations = max_regenerations
        self._last_result: SearchResult | None = None

    @classmethod
    def from_sandbox_config(
        cls,
        sandbox: SandboxConfig,
        *,
        listener: NodeStateListener | None = None,
    ) -> "GridController":
        graph = GridGraph(listener=listener, rng=random.Random(sandbox.seed))
        return cls(
            graph,
            config=sandbox.grid,
            start=sandbox.start,
            goal=sandbox.goal,
            max_regenerations=sandbox.max_regenerations,
        )

    @property
    def graph(self) -> GridGraph:
        return self._graph

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def last_result(self) -> SearchResult | None:
        return self._last_result

    @property
    def max_regenerations(self) -> int:
        return self._max_regenerations

    @property
    def start_position(self) -> Coord:
        return self._start_pos

    @property
    def goal_position(self) -> Coord:
        return self._goal_pos or self._config.default_goal()

    def regenerate_until_solvable(
        self,
        config: GridConfig | Mapping[str, Any] | None = None,
        start_pos: Sequence[int] | None = None,
        goal_pos: Sequence[int] | None = None,
    ) -> int:
        if config is not None:
            new_config = parse_grid_config(config)
            if (new_config.width, new_config.height) != (
                self._config.width,
                self._config.height,
            ):
                self._start_pos = (0, 0)
                self._goal_pos = None
            self._config = new_config
        if start_pos is not None:
            self._start_pos = as_coord(start_pos)
        if goal_pos is not None:
            self._goal_pos = as_coord(goal_pos)

        for attempt in range(1, self._max_regenerations + 1):
            self._graph.build(self._config)
            self._graph.place_start_and_goal(self._start_pos, self.goal_position)
            self._graph.scatter_walls()
            self._graph.connect_all()
            result = self._search()
            if result.found:
                logger.info(
                    "Generated solvable %sx%s grid on attempt %s (cost %.3f)",
                    self._config.width,
                    self._config.height,
                    attempt,
                    result.cost,
                )
                return attempt
            logger.debug("Regeneration attempt %s has no path", attempt)

        logger.warning(
            "No solvable grid after %s attempts (wall_fraction=%.2f)",
            self._max_regenerations,
            self._config.wall_fraction,
        )
        raise UnsolvableConfiguration(
            f"No path from start to goal after {self._max_regenerations} "
            f"regenerations with wall_fraction={self._config.wall_fraction}."
        )

    def request_move(self, which: Endpoint | str, position: Sequence[int]) -> bool:
        which = Endpoint(which)
        if which == Endpoint.START:
            self._graph.move_start(position)
            self._start_pos = self._graph.get_start() or self._start_pos
        else:
            self._graph.move_goal(position)
            self._goal_pos = self._graph.get_goal() or self._goal_pos
        return self._search().found

    def nudge(self, which: Endpoint | str, dx: int, dz: int) -> bool:
        """Step an endpoint by one offset; blocked steps keep it in place."""
        which = Endpoint(which)
        if which == Endpoint.START:
            current = self._graph.get_start()
        else:
            current = self._graph.get_goal()
        if current is None:
            return False
        target = (current[0] + dx, current[1] + dz)
        if not self._graph.in_bounds(*target) or self._graph.get_node_state(
            target
        ) in BLOCKING_STATES:
            target = current
        return self.request_move(which, target)

    def set_wall_fraction(self, fraction: float) -> None:
        if not is_valid_wall_fraction(fraction):
            raise InvalidConfig(
                f"wall_fraction must be within [0, {MAX_WALL_FRACTION}], "
                f"got {fraction}"
            )
        self._config = self._config.model_copy(
            update={"wall_fraction": float(fraction)}
        )
        logger.debug("Wall fraction set to %.2f for the next regeneration", fraction)

    def adjust_wall_fraction(self, delta: float) -> float:
        fraction = round(
            min(MAX_WALL_FRACTION, max(0.0, self._config.wall_fraction + delta)), 4
        )
        self.set_wall_fraction(fraction)
        return fraction

    def _search(self) -> SearchResult:
        start = self._graph.get_start()
        goal = self._graph.get_goal()
        if start is None or goal is None:
            self._last_result = SearchResult(found=False)
            return self._last_result
        self._graph.clear_annotations()
        self._last_result = PathFinder(self._graph).search(start, goal)
        return self._last_result
