"""Grid graph, A* search and orchestration core."""

from gridpath.sim.config_loader import load_sandbox_config
from gridpath.sim.contracts import (
    Coord,
    Endpoint,
    GridConfig,
    NodeState,
    SandboxConfig,
    SearchResult,
    parse_grid_config,
)
from gridpath.sim.controller import GridController
from gridpath.sim.errors import (
    GridError,
    InvalidConfig,
    InvalidEdge,
    NoOpenCell,
    OutOfBounds,
    TargetBlocked,
    UnsolvableConfiguration,
    WallPlacementExhausted,
)
from gridpath.sim.events import NodeStateListener, StateChange, StateChangeRecorder
from gridpath.sim.grid_graph import GridGraph
from gridpath.sim.node import Node
from gridpath.sim.pathfinding import PathFinder

__all__ = [
    "Coord",
    "Endpoint",
    "GridConfig",
    "GridController",
    "GridError",
    "GridGraph",
    "InvalidConfig",
    "InvalidEdge",
    "NoOpenCell",
    "Node",
    "NodeState",
    "NodeStateListener",
    "OutOfBounds",
    "PathFinder",
    "SandboxConfig",
    "SearchResult",
    "StateChange",
    "StateChangeRecorder",
    "TargetBlocked",
    "UnsolvableConfiguration",
    "WallPlacementExhausted",
    "load_sandbox_config",
    "parse_grid_config",
]
