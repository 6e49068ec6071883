"""Application entry for running the sandbox."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from textual.logging import TextualHandler

from gridpath.render.grid_view import render_sandbox
from gridpath.render.sandbox import SandboxApp, SandboxScreen
from gridpath.sim.contracts import SandboxConfig
from gridpath.sim.controller import GridController
from gridpath.sim.events import StateChangeRecorder

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(
    level: str = DEFAULT_LOG_LEVEL, *, interactive: bool = False
) -> None:
    handler: logging.Handler
    if interactive:
        handler = TextualHandler()
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def run_once(
    config: SandboxConfig, *, console: Console | None = None
) -> GridController:
    controller = GridController.from_sandbox_config(config)
    controller.regenerate_until_solvable()
    (console or Console()).print(render_sandbox(controller))
    return controller


def run_sandbox(config: SandboxConfig) -> None:
    recorder = StateChangeRecorder()
    controller = GridController.from_sandbox_config(config, listener=recorder)
    controller.regenerate_until_solvable()
    recorder.clear()
    app = SandboxApp(SandboxScreen(controller, recorder=recorder))
    app.run()
