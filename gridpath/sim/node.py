"""A single grid vertex: coordinate, state and weighted edges."""

from __future__ import annotations

from gridpath.sim.contracts import Coord, NodeState
from gridpath.sim.errors import InvalidEdge
from gridpath.sim.events import NodeStateListener, ignore_state_change


class Node:
    __slots__ = ("_coord", "_state", "_edges", "_listener")

    def __init__(
        self,
        coord: Coord,
        *,
        state: NodeState = NodeState.OPEN,
        listener: NodeStateListener | None = None,
    ) -> None:
        self._coord = coord
        self._state = state
        self._edges: dict[Coord, float] = {}
        self._listener = listener or ignore_state_change

    def __repr__(self) -> str:
        return f"Node(coord={self._coord}, state={self._state.value})"

    @property
    def coord(self) -> Coord:
        return self._coord

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def edges(self) -> dict[Coord, float]:
        return self._edges

    @property
    def is_walkable(self) -> bool:
        return self._state != NodeState.WALL

    def set_state(self, state: NodeState) -> None:
        self._state = state
        self._listener(self._coord, state)

    def add_edge(self, other: Coord, weight: float) -> None:
        if other == self._coord:
            raise InvalidEdge(f"Node {self._coord} cannot connect to itself.")
        self._edges[other] = weight

    def clear_edges(self) -> None:
        self._edges.clear()
