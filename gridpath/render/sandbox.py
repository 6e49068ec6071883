"""Interactive Textual sandbox for moving endpoints and regenerating grids."""

from __future__ import annotations

from dataclasses import dataclass

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.geometry import Size
from textual.screen import Screen
from textual.widgets import Static

from gridpath.render.grid_view import (
    compute_viewport,
    coord_to_display,
    display_to_coord,
    render_grid_lines,
    render_legend,
    render_summary,
)
from gridpath.render.textual_widgets import CellClicked, GridRenderResult, GridWidget
from gridpath.sim.contracts import Endpoint
from gridpath.sim.controller import GridController
from gridpath.sim.errors import GridError
from gridpath.sim.events import StateChangeRecorder

WALL_STEP = 0.05
SUMMARY_WIDTH = 30
HELP_TEXT = "WASD start · arrows goal · click goal · r regenerate · +/- walls · q quit"


@dataclass(frozen=True)
class SandboxCommand:
    kind: str
    endpoint: Endpoint | None = None
    dx: int = 0
    dz: int = 0
    delta: float = 0.0


KEY_COMMANDS: dict[str, SandboxCommand] = {
    "w": SandboxCommand("nudge", Endpoint.START, 0, 1),
    "s": SandboxCommand("nudge", Endpoint.START, 0, -1),
    "a": SandboxCommand("nudge", Endpoint.START, -1, 0),
    "d": SandboxCommand("nudge", Endpoint.START, 1, 0),
    "up": SandboxCommand("nudge", Endpoint.GOAL, 0, 1),
    "down": SandboxCommand("nudge", Endpoint.GOAL, 0, -1),
    "left": SandboxCommand("nudge", Endpoint.GOAL, -1, 0),
    "right": SandboxCommand("nudge", Endpoint.GOAL, 1, 0),
    "r": SandboxCommand("regenerate"),
    "plus": SandboxCommand("walls", delta=WALL_STEP),
    "equals_sign": SandboxCommand("walls", delta=WALL_STEP),
    "minus": SandboxCommand("walls", delta=-WALL_STEP),
}


def map_key_to_command(key: str) -> SandboxCommand | None:
    aliases = {"+": "plus", "=": "equals_sign", "-": "minus"}
    return KEY_COMMANDS.get(aliases.get(key, key.lower()))


def apply_command(controller: GridController, command: SandboxCommand) -> str:
    """Run one command against the controller and describe the outcome."""
    try:
        if command.kind == "nudge" and command.endpoint is not None:
            found = controller.nudge(command.endpoint, command.dx, command.dz)
            return "Path found." if found else "No path."
        if command.kind == "regenerate":
            attempts = controller.regenerate_until_solvable()
            return f"Regenerated in {attempts} attempt(s)."
        if command.kind == "walls":
            fraction = controller.adjust_wall_fraction(command.delta)
            return f"Wall fraction {fraction:.2f} (press r to regenerate)."
    except GridError as exc:
        return f"Error: {exc}"
    return ""


class SandboxScreen(Screen):
    CSS = """
    #main {
        layout: horizontal;
        height: 1fr;
    }
    #status-bar {
        height: 3;
    }
    """

    BINDINGS = [("q", "quit", "Quit")]

    def __init__(
        self,
        controller: GridController,
        *,
        recorder: StateChangeRecorder | None = None,
    ) -> None:
        super().__init__()
        self.controller = controller
        self.recorder = recorder
        self._message = "Ready."
        self._grid_widget: GridWidget | None = None
        self._summary: Static | None = None
        self._status_bar: Static | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            with Horizontal(id="main"):
                yield GridWidget(self._render_grid, emit_clicks=True, id="grid")
                yield Static(id="summary")
            yield Static(id="status-bar")

    def on_mount(self) -> None:
        self._grid_widget = self.query_one("#grid", GridWidget)
        self._summary = self.query_one("#summary", Static)
        self._status_bar = self.query_one("#status-bar", Static)
        self._summary.styles.width = SUMMARY_WIDTH
        self._refresh_ui()

    def on_key(self, event: Key) -> None:
        command = map_key_to_command(event.key)
        if command is None and event.character:
            command = map_key_to_command(event.character)
        if command is None:
            return
        self._message = apply_command(self.controller, command)
        self._refresh_ui()
        event.stop()

    def on_cell_clicked(self, message: CellClicked) -> None:
        graph = self.controller.graph
        coord = display_to_coord(graph, *message.display_point)
        try:
            found = self.controller.request_move(Endpoint.GOAL, coord)
        except GridError as exc:
            self._message = f"Error: {exc}"
        else:
            self._message = "Path found." if found else "No path."
        self._refresh_ui()

    def action_quit(self) -> None:
        self.app.exit()

    def _refresh_ui(self) -> None:
        if self._summary:
            self._summary.update(
                Group(render_summary(self.controller), render_legend())
            )
        if self._status_bar:
            self._status_bar.update(
                Panel(Text(self._status_text()), padding=(0, 1))
            )
        if self._grid_widget:
            self._grid_widget.refresh()

    def _status_text(self) -> str:
        parts = [self._message]
        if self.recorder is not None:
            parts.append(f"{len(self.recorder.changes)} cell updates")
            self.recorder.clear()
        parts.append(HELP_TEXT)
        return " | ".join(parts)

    def _render_grid(self, content_size: Size) -> GridRenderResult:
        graph = self.controller.graph
        inner_width = max(1, content_size.width - 2)
        inner_height = max(1, content_size.height - 2)
        start = graph.get_start()
        center = coord_to_display(graph, start) if start is not None else None
        viewport = compute_viewport(
            graph.width, graph.height, inner_width, inner_height, center=center
        )
        lines = render_grid_lines(graph, viewport=viewport) if graph.width else []
        renderable = Panel(
            Align.center(Group(*lines), vertical="middle"),
            title="Grid",
            padding=(0, 0),
        )
        offset_x = 1 + max(0, (inner_width - viewport.width) // 2)
        offset_y = 1 + max(0, (inner_height - viewport.height) // 2)
        return GridRenderResult(
            renderable=renderable,
            viewport=viewport,
            offset_x=offset_x,
            offset_y=offset_y,
        )


class SandboxApp(App):
    """Run the sandbox screen in a minimal Textual app."""

    def __init__(self, screen: SandboxScreen, *, title: str = "gridpath") -> None:
        super().__init__()
        self._initial_screen = screen
        self.title = title

    def on_mount(self) -> None:
        self.push_screen(self._initial_screen)
