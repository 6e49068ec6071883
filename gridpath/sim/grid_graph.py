"""Dense grid of nodes with start, goal, walls and Moore connectivity."""

from __future__ import annotations

import logging
import math
import random
from typing import Any, Iterator, Mapping, Sequence

from gridpath.sim.contracts import (
    ANNOTATION_STATES,
    ENDPOINT_STATES,
    Coord,
    Endpoint,
    GridConfig,
    NodeState,
    as_coord,
    parse_grid_config,
)
from gridpath.sim.errors import (
    GridError,
    NoOpenCell,
    OutOfBounds,
    TargetBlocked,
    WallPlacementExhausted,
)
from gridpath.sim.events import NodeStateListener
from gridpath.sim.node import Node

logger = logging.getLogger(__name__)

MOORE_OFFSETS: tuple[Coord, ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

# Upper bound on random draws per grid cell while scattering walls.
WALL_DRAWS_PER_CELL = 20


class GridGraph:
    """Own every node of one grid and keep their edges consistent.

    Nodes are stored row-major (``index = z * width + x``). Each walkable
    node keeps a directed edge to every walkable Moore neighbour, so an
    undirected connection is two entries with the same Euclidean weight.
    """

    def __init__(
        self,
        config: GridConfig | Mapping[str, Any] | None = None,
        *,
        listener: NodeStateListener | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._listener = listener
        self._rng = rng or random.Random()
        self._config = GridConfig()
        self._nodes: list[Node] = []
        self._start: Coord | None = None
        self._goal: Coord | None = None
        if config is not None:
            self.build(config)

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def width(self) -> int:
        return self._config.width if self._nodes else 0

    @property
    def height(self) -> int:
        return self._config.height if self._nodes else 0

    @property
    def wall_fraction(self) -> float:
        return self._config.wall_fraction

    def build(self, config: GridConfig | Mapping[str, Any]) -> None:
        self._config = parse_grid_config(config)
        self._start = None
        self._goal = None
        self._nodes = [
            Node((x, z), listener=self._listener)
            for z in range(self._config.height)
            for x in range(self._config.width)
        ]
        for node in self._nodes:
            node.set_state(NodeState.OPEN)
        logger.debug(
            "Built %sx%s grid (wall_fraction=%.2f)",
            self._config.width,
            self._config.height,
            self._config.wall_fraction,
        )

    def place_start_and_goal(
        self, start_pos: Sequence[int], goal_pos: Sequence[int]
    ) -> None:
        """Place both endpoints; on failure the previous endpoints are restored."""
        start_pos = as_coord(start_pos)
        goal_pos = as_coord(goal_pos)
        previous = ((self._start, NodeState.START), (self._goal, NodeState.GOAL))
        for current, _ in previous:
            if current is not None:
                self.node(current).set_state(NodeState.OPEN)
        self._start = None
        self._goal = None
        try:
            self._start = self._place_endpoint(NodeState.START, start_pos)
            self._goal = self._place_endpoint(NodeState.GOAL, goal_pos)
        except GridError:
            for placed in (self._start, self._goal):
                if placed is not None:
                    self.node(placed).set_state(NodeState.OPEN)
            for current, state in previous:
                if current is not None:
                    self.node(current).set_state(state)
            self._start, self._goal = previous[0][0], previous[1][0]
            raise
        logger.debug("Placed start at %s and goal at %s", self._start, self._goal)

    def scatter_walls(self) -> int:
        wall_count = math.floor(self.wall_fraction * self.width * self.height)
        budget = WALL_DRAWS_PER_CELL * self.width * self.height
        placed = 0
        draws = 0
        while placed < wall_count:
            if draws >= budget:
                raise WallPlacementExhausted(
                    f"Placed {placed} of {wall_count} walls after {draws} draws."
                )
            draws += 1
            node = self.node(self._random_coord())
            if node.state in ENDPOINT_STATES or node.state == NodeState.WALL:
                continue
            node.set_state(NodeState.WALL)
            node.clear_edges()
            placed += 1
        logger.debug("Scattered %s walls in %s draws", placed, draws)
        return placed

    def connect_all(self) -> None:
        for node in self._nodes:
            self._connect(node)

    def move_start(self, position: Sequence[int]) -> None:
        self._move_endpoint(Endpoint.START, as_coord(position))

    def move_goal(self, position: Sequence[int]) -> None:
        self._move_endpoint(Endpoint.GOAL, as_coord(position))

    def clear_annotations(self) -> int:
        cleared = 0
        for node in self._nodes:
            if node.state in ANNOTATION_STATES:
                node.set_state(NodeState.OPEN)
                cleared += 1
        return cleared

    def get_start(self) -> Coord | None:
        return self._start

    def get_goal(self) -> Coord | None:
        return self._goal

    def get_node_state(self, coord: Sequence[int]) -> NodeState:
        return self.node(coord).state

    def get_edges(self, coord: Sequence[int]) -> dict[Coord, float]:
        return dict(self.node(coord).edges)

    def node(self, coord: Sequence[int]) -> Node:
        coord = as_coord(coord)
        self._check_bounds(coord)
        return self._nodes[self.index_of(coord)]

    def nodes(self) -> Iterator[Node]:
        return iter(self._nodes)

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.height

    def index_of(self, coord: Coord) -> int:
        return coord[1] * self.width + coord[0]

    def count(self, state: NodeState) -> int:
        return sum(1 for node in self._nodes if node.state == state)

    def _place_endpoint(self, state: NodeState, position: Coord) -> Coord:
        if self._config.randomize_start_and_goal:
            candidate = self._draw_open_cell(state)
        else:
            self._check_bounds(position)
            if self.node(position).state != NodeState.OPEN:
                raise NoOpenCell(
                    f"Cannot place {state.value} at {position}: cell is "
                    f"{self.node(position).state.value}."
                )
            candidate = position
        self.node(candidate).set_state(state)
        return candidate

    def _draw_open_cell(self, state: NodeState) -> Coord:
        for _ in range(self.width * self.height):
            candidate = self._random_coord()
            if self.node(candidate).state == NodeState.OPEN:
                return candidate
        raise NoOpenCell(
            f"No open cell found for {state.value} after "
            f"{self.width * self.height} draws."
        )

    def _move_endpoint(self, endpoint: Endpoint, position: Coord) -> None:
        current = self._start if endpoint == Endpoint.START else self._goal
        if position == current:
            return
        self._check_bounds(position)
        target = self.node(position)
        if target.state == NodeState.WALL:
            raise TargetBlocked(position, "cell is a wall")
        if target.state in ENDPOINT_STATES:
            raise TargetBlocked(position, f"cell holds the {target.state.value}")

        if current is not None:
            self.node(current).set_state(NodeState.OPEN)
        if endpoint == Endpoint.START:
            target.set_state(NodeState.START)
            self._start = position
        else:
            target.set_state(NodeState.GOAL)
            self._goal = position
        self._connect_around(position)
        self.clear_annotations()
        logger.debug("Moved %s from %s to %s", endpoint.value, current, position)

    def _connect_around(self, coord: Coord) -> None:
        self._connect(self.node(coord))
        for neighbor in self._neighbors(coord):
            self._connect(neighbor)

    def _connect(self, node: Node) -> None:
        node.clear_edges()
        if not node.is_walkable:
            return
        x, z = node.coord
        for dx, dz in MOORE_OFFSETS:
            other_x, other_z = x + dx, z + dz
            if not self.in_bounds(other_x, other_z):
                continue
            other = self._nodes[other_z * self.width + other_x]
            if not other.is_walkable:
                continue
            node.add_edge(other.coord, math.hypot(dx, dz))

    def _neighbors(self, coord: Coord) -> Iterator[Node]:
        x, z = coord
        for dx, dz in MOORE_OFFSETS:
            if self.in_bounds(x + dx, z + dz):
                yield self._nodes[(z + dz) * self.width + (x + dx)]

    def _random_coord(self) -> Coord:
        return (self._rng.randrange(self.width), self._rng.randrange(self.height))

    def _check_bounds(self, coord: Coord) -> None:
        if not self.in_bounds(*coord):
            raise OutOfBounds(coord, self.width, self.height)
