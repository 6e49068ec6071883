"""Grid-based pathfinding (A*)."""

from __future__ import annotations

import heapq
import logging
import math
from typing import Sequence

from gridpath.sim.contracts import ENDPOINT_STATES, Coord, NodeState, SearchResult
from gridpath.sim.grid_graph import GridGraph

logger = logging.getLogger(__name__)


class PathFinder:
    """A* over the current edges of a grid graph.

    Expanded nodes are marked explored and the nodes of the found path are
    marked chosen; start and goal keep their state. Ties on f-score go to the
    node with the lowest row-major index, so repeated runs on the same grid
    expand the same nodes in the same order.
    """

    def __init__(self, graph: GridGraph) -> None:
        self._graph = graph

    def find_path(self, start: Sequence[int], goal: Sequence[int]) -> bool:
        return self.search(start, goal).found

    def search(self, start: Sequence[int], goal: Sequence[int]) -> SearchResult:
        graph = self._graph
        start = graph.node(start).coord
        goal = graph.node(goal).coord

        g_score: dict[Coord, float] = {start: 0.0}
        f_score: dict[Coord, float] = {start: self.heuristic(start, goal)}
        open_heap: list[tuple[float, int, Coord]] = []
        heapq.heappush(open_heap, (f_score[start], graph.index_of(start), start))
        open_set: set[Coord] = {start}
        closed_set: set[Coord] = set()
        came_from: dict[Coord, Coord] = {}
        expanded = 0

        while open_heap:
            f_value, _, current = heapq.heappop(open_heap)
            if current not in open_set or f_value != f_score[current]:
                continue
            expanded += 1
            current_node = graph.node(current)
            if current_node.state not in ENDPOINT_STATES:
                current_node.set_state(NodeState.EXPLORED)

            if current == goal:
                path = self._reconstruct_path(came_from, current)
                logger.debug(
                    "Path %s -> %s found: %s steps, cost %.3f, %s expanded",
                    start,
                    goal,
                    len(path) - 1,
                    g_score[goal],
                    expanded,
                )
                return SearchResult(
                    found=True, path=path, cost=g_score[goal], explored=expanded
                )

            open_set.remove(current)
            closed_set.add(current)

            for neighbor, weight in current_node.edges.items():
                if neighbor in closed_set:
                    continue
                open_set.add(neighbor)
                tentative = g_score[current] + weight
                if tentative >= g_score.get(neighbor, math.inf):
                    continue
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                f_score[neighbor] = tentative + self.heuristic(neighbor, goal)
                heapq.heappush(
                    open_heap,
                    (f_score[neighbor], graph.index_of(neighbor), neighbor),
                )

        logger.debug("No path %s -> %s (%s expanded)", start, goal, expanded)
        return SearchResult(found=False, explored=expanded)

    @staticmethod
    def heuristic(a: Coord, b: Coord) -> float:
        return math.hypot(a[0] - b[0], a[1] - b[1])

    def _reconstruct_path(
        self, came_from: dict[Coord, Coord], current: Coord
    ) -> list[Coord]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
            node = self._graph.node(current)
            if node.state not in ENDPOINT_STATES:
                node.set_state(NodeState.CHOSEN)
        path.reverse()
        return path
