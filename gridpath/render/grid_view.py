"""Rich rendering of grid graphs and search summaries."""

from __future__ import annotations

from dataclasses import dataclass

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gridpath.sim.contracts import Coord, NodeState
from gridpath.sim.controller import GridController
from gridpath.sim.grid_graph import GridGraph

STATE_GLYPHS = {
    NodeState.START: "S",
    NodeState.GOAL: "G",
    NodeState.OPEN: ".",
    NodeState.WALL: "#",
    NodeState.EXPLORED: "o",
    NodeState.CHOSEN: "*",
}

STATE_STYLES = {
    NodeState.START: "bold bright_green",
    NodeState.GOAL: "bold bright_red",
    NodeState.OPEN: "grey50",
    NodeState.WALL: "bright_magenta",
    NodeState.EXPLORED: "yellow",
    NodeState.CHOSEN: "bold bright_cyan",
}

CURSOR_STYLE = "reverse"


@dataclass(frozen=True)
class Viewport:
    x: int
    y: int
    width: int
    height: int


def compute_viewport(
    grid_width: int,
    grid_height: int,
    view_width: int,
    view_height: int,
    *,
    center: tuple[int, int] | None = None,
) -> Viewport:
    """Clamp a view window onto the grid, in display coordinates.

    Display rows run top to bottom, so display row 0 is the grid's highest z.
    """
    view_width = max(1, min(grid_width, view_width))
    view_height = max(1, min(grid_height, view_height))

    if center is not None:
        origin_x = center[0] - view_width // 2
        origin_y = center[1] - view_height // 2
    else:
        origin_x, origin_y = 0, 0

    origin_x = _clamp(origin_x, 0, max(0, grid_width - view_width))
    origin_y = _clamp(origin_y, 0, max(0, grid_height - view_height))
    return Viewport(x=origin_x, y=origin_y, width=view_width, height=view_height)


def coord_to_display(graph: GridGraph, coord: Coord) -> tuple[int, int]:
    return (coord[0], graph.height - 1 - coord[1])


def display_to_coord(graph: GridGraph, column: int, row: int) -> Coord:
    return (column, graph.height - 1 - row)


def render_grid_lines(
    graph: GridGraph,
    *,
    viewport: Viewport | None = None,
    cursor: Coord | None = None,
) -> list[Text]:
    viewport = viewport or Viewport(0, 0, graph.width, graph.height)
    lines: list[Text] = []
    for row in range(viewport.y, viewport.y + viewport.height):
        line = Text()
        for column in range(viewport.x, viewport.x + viewport.width):
            coord = display_to_coord(graph, column, row)
            state = graph.get_node_state(coord)
            style = CURSOR_STYLE if coord == cursor else STATE_STYLES[state]
            line.append(STATE_GLYPHS[state], style=style)
        lines.append(line)
    return lines


def render_summary(controller: GridController) -> RenderableType:
    graph = controller.graph
    result = controller.last_result
    table = Table(show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Grid", f"{graph.width}x{graph.height}")
    table.add_row("Start", _format_coord(graph.get_start()))
    table.add_row("Goal", _format_coord(graph.get_goal()))
    table.add_row("Walls", str(graph.count(NodeState.WALL)))
    table.add_row("Wall fraction", f"{controller.config.wall_fraction:.2f}")
    if result is None:
        table.add_row("Path", "Not searched")
    elif result.found:
        table.add_row("Path", f"{len(result.path) - 1} steps")
        table.add_row("Cost", f"{result.cost:.3f}")
    else:
        table.add_row("Path", "None")
    if result is not None:
        table.add_row("Explored", str(result.explored))
    return Panel(table, title="Search")


def render_legend() -> RenderableType:
    legend = Text()
    for state, glyph in STATE_GLYPHS.items():
        legend.append(glyph, style=STATE_STYLES[state])
        legend.append(f" {state.value}  ")
    return legend


def render_sandbox(controller: GridController) -> RenderableType:
    grid_panel = Panel(
        Group(*render_grid_lines(controller.graph), Text(), render_legend()),
        title="Grid",
    )
    return Columns([grid_panel, render_summary(controller)])


def _format_coord(coord: Coord | None) -> str:
    if coord is None:
        return "-"
    return f"({coord[0]}, {coord[1]})"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
