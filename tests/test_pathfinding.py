import heapq
import math
import random
from collections import deque

import pytest

from gridpath.sim.contracts import NodeState
from gridpath.sim.grid_graph import GridGraph
from gridpath.sim.pathfinding import PathFinder

SQRT2 = math.sqrt(2)


def test_open_grid_takes_the_diagonal() -> None:
    graph = _grid_from_rows(
        [
            "..G",
            "...",
            "S..",
        ]
    )
    result = PathFinder(graph).search((0, 0), (2, 2))

    assert result.found
    assert result.path == [(0, 0), (1, 1), (2, 2)]
    assert result.cost == pytest.approx(2 * SQRT2)
    assert graph.get_node_state((1, 1)) == NodeState.CHOSEN
    assert graph.get_node_state((0, 0)) == NodeState.START
    assert graph.get_node_state((2, 2)) == NodeState.GOAL


def test_centre_wall_forces_detour() -> None:
    graph = _grid_from_rows(
        [
            "..G",
            ".#.",
            "S..",
        ]
    )
    result = PathFinder(graph).search((0, 0), (2, 2))

    assert result.found
    assert result.cost == pytest.approx(2 + SQRT2)
    assert len(result.path) == 4
    assert (1, 1) not in result.path


def test_two_by_two_diagonal() -> None:
    graph = _grid_from_rows(
        [
            ".G",
            "S.",
        ]
    )
    assert PathFinder(graph).find_path((0, 0), (1, 1))
    result = PathFinder(graph).search((0, 0), (1, 1))
    assert result.path == [(0, 0), (1, 1)]
    assert result.cost == pytest.approx(SQRT2)


def test_diagonal_survives_walled_corners() -> None:
    graph = _grid_from_rows(
        [
            "#G",
            "S#",
        ]
    )
    assert PathFinder(graph).find_path((0, 0), (1, 1))


def test_walled_corridor_disconnects_start_from_goal() -> None:
    graph = _grid_from_rows(
        [
            ".#G",
            ".#.",
            "S#.",
        ]
    )
    finder = PathFinder(graph)

    assert not finder.find_path((0, 0), (2, 2))
    assert graph.count(NodeState.CHOSEN) == 0
    assert graph.get_node_state((0, 1)) == NodeState.EXPLORED
    assert graph.get_node_state((0, 2)) == NodeState.EXPLORED
    assert graph.get_node_state((2, 0)) == NodeState.OPEN
    assert graph.get_node_state((0, 0)) == NodeState.START
    assert graph.get_node_state((2, 2)) == NodeState.GOAL


def test_equal_cost_ties_resolve_by_row_major_order() -> None:
    graph = _grid_from_rows(
        [
            "...",
            "S#G",
            "...",
        ]
    )
    result = PathFinder(graph).search((0, 1), (2, 1))

    assert result.path == [(0, 1), (1, 0), (2, 1)]
    assert result.cost == pytest.approx(2 * SQRT2)
    assert graph.get_node_state((1, 0)) == NodeState.CHOSEN
    assert graph.get_node_state((1, 2)) == NodeState.OPEN


def test_search_is_reproducible_across_identical_grids() -> None:
    first = _random_graph(seed=11, width=8, height=8, wall_fraction=0.3)
    second = _random_graph(seed=11, width=8, height=8, wall_fraction=0.3)

    first_result = PathFinder(first).search(first.get_start(), first.get_goal())
    second_result = PathFinder(second).search(second.get_start(), second.get_goal())

    assert first_result == second_result
    assert [node.state for node in first.nodes()] == [
        node.state for node in second.nodes()
    ]


def test_found_matches_reference_reachability() -> None:
    for seed in range(40):
        graph = _random_graph(seed=seed, width=6, height=6, wall_fraction=0.45)
        start, goal = graph.get_start(), graph.get_goal()

        expected = _reachable(graph, start, goal)

        assert PathFinder(graph).find_path(start, goal) == expected


def test_paths_are_optimal_and_contiguous() -> None:
    checked = 0
    for seed in range(40):
        graph = _random_graph(seed=seed, width=7, height=5, wall_fraction=0.35)
        start, goal = graph.get_start(), graph.get_goal()
        reference_cost = _dijkstra_cost(graph, start, goal)

        result = PathFinder(graph).search(start, goal)

        if reference_cost is None:
            assert not result.found
            continue
        checked += 1
        assert result.found
        assert result.cost == pytest.approx(reference_cost, abs=1e-9)
        assert result.path[0] == start
        assert result.path[-1] == goal
        walked = 0.0
        for current, following in zip(result.path, result.path[1:]):
            edges = graph.get_edges(current)
            assert following in edges
            walked += edges[following]
        assert walked == pytest.approx(result.cost)
        chosen = {
            node.coord for node in graph.nodes() if node.state == NodeState.CHOSEN
        }
        assert chosen == set(result.path[1:-1])
    assert checked > 0


def test_heuristic_is_euclidean() -> None:
    assert PathFinder.heuristic((0, 0), (3, 4)) == pytest.approx(5.0)
    assert PathFinder.heuristic((2, 2), (2, 2)) == 0.0


def _grid_from_rows(rows: list[str]) -> GridGraph:
    """Build a grid from rows listed top (highest z) to bottom."""
    height = len(rows)
    width = len(rows[0])
    graph = GridGraph({"width": width, "height": height, "wall_fraction": 0.0})
    start = goal = None
    for row_index, row in enumerate(rows):
        z = height - 1 - row_index
        for x, cell in enumerate(row):
            if cell == "S":
                start = (x, z)
            elif cell == "G":
                goal = (x, z)
            elif cell == "#":
                graph.node((x, z)).set_state(NodeState.WALL)
    graph.place_start_and_goal(start, goal)
    graph.connect_all()
    return graph


def _random_graph(
    *, seed: int, width: int, height: int, wall_fraction: float
) -> GridGraph:
    graph = GridGraph(
        {"width": width, "height": height, "wall_fraction": wall_fraction},
        rng=random.Random(seed),
    )
    graph.place_start_and_goal((0, 0), (width - 1, height - 1))
    graph.scatter_walls()
    graph.connect_all()
    return graph


def _open_neighbours(graph: GridGraph, coord: tuple[int, int]):
    x, z = coord
    for dz in (-1, 0, 1):
        for dx in (-1, 0, 1):
            other = (x + dx, z + dz)
            if (dx or dz) and graph.in_bounds(*other):
                if graph.get_node_state(other) != NodeState.WALL:
                    yield other, math.hypot(dx, dz)


def _reachable(graph: GridGraph, start, goal) -> bool:
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            return True
        for other, _ in _open_neighbours(graph, current):
            if other not in seen:
                seen.add(other)
                queue.append(other)
    return False


def _dijkstra_cost(graph: GridGraph, start, goal) -> float | None:
    best = {start: 0.0}
    heap = [(0.0, start)]
    while heap:
        cost, current = heapq.heappop(heap)
        if current == goal:
            return cost
        if cost > best[current]:
            continue
        for other, weight in _open_neighbours(graph, current):
            candidate = cost + weight
            if candidate < best.get(other, math.inf):
                best[other] = candidate
                heapq.heappush(heap, (candidate, other))
    return None
