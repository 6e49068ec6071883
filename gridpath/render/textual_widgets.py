"""Textual widgets for grid rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.console import RenderableType
from textual.events import Click
from textual.geometry import Size
from textual.message import Message
from textual.widget import Widget

from gridpath.render.grid_view import Viewport


@dataclass(frozen=True)
class GridRenderResult:
    renderable: RenderableType
    viewport: Viewport
    offset_x: int
    offset_y: int


class CellClicked(Message):
    """Message emitted when a click lands on a grid cell (display coords)."""

    def __init__(self, *, display_point: tuple[int, int]) -> None:
        super().__init__()
        self.display_point = display_point


class GridWidget(Widget):
    """Render a grid and optionally emit click events."""

    def __init__(
        self,
        render_grid: Callable[[Size], GridRenderResult],
        *,
        emit_clicks: bool = False,
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self._render_grid = render_grid
        self._emit_clicks = emit_clicks
        self._viewport: Viewport | None = None
        self._offset_x = 0
        self._offset_y = 0

    def render(self) -> RenderableType:
        result = self._render_grid(self.content_size)
        self._viewport = result.viewport
        self._offset_x = result.offset_x
        self._offset_y = result.offset_y
        return result.renderable

    def on_click(self, event: Click) -> None:
        if not self._emit_clicks or self._viewport is None:
            return
        offset = event.get_content_offset(self)
        if offset is None:
            return
        point = map_click_to_display(
            self._viewport, self._offset_x, self._offset_y, offset.x, offset.y
        )
        if point is not None:
            self.post_message(CellClicked(display_point=point))


def map_click_to_display(
    viewport: Viewport, offset_x: int, offset_y: int, x: int, y: int
) -> tuple[int, int] | None:
    if not (
        offset_x <= x < offset_x + viewport.width
        and offset_y <= y < offset_y + viewport.height
    ):
        return None
    return (viewport.x + (x - offset_x), viewport.y + (y - offset_y))
