from pathlib import Path

import pytest
from rich.console import Console

from gridpath.__main__ import build_parser, main
from gridpath.app import run_once
from gridpath.sim.contracts import GridConfig, NodeState, SandboxConfig


def test_once_prints_a_solved_grid(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    _isolate(tmp_path, monkeypatch)

    main(["--once", "--width", "5", "--height", "5", "--walls", "0", "--seed", "1"])

    output = capsys.readouterr().out
    assert "Grid" in output
    assert "Search" in output
    assert "5x5" in output


def test_invalid_wall_fraction_exits(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _isolate(tmp_path, monkeypatch)

    with pytest.raises(SystemExit) as excinfo:
        main(["--once", "--walls", "0.9"])

    assert "wall_fraction" in str(excinfo.value)


def test_missing_config_file_exits(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _isolate(tmp_path, monkeypatch)

    with pytest.raises(SystemExit):
        main(["--once", "--config", str(tmp_path / "missing.json")])


def test_parser_defaults_leave_config_untouched() -> None:
    args = build_parser().parse_args([])

    assert args.width is None
    assert args.walls is None
    assert not args.randomize
    assert not args.once
    assert args.log_level == "WARNING"


def test_log_level_is_restricted_to_known_levels() -> None:
    parser = build_parser()

    assert parser.parse_args(["--log-level", "debug"]).log_level == "DEBUG"
    with pytest.raises(SystemExit):
        parser.parse_args(["--log-level", "chatty"])


def test_run_once_returns_solved_controller() -> None:
    console = Console(width=100, record=True)
    config = SandboxConfig(
        grid=GridConfig(width=6, height=6, wall_fraction=0.2), seed=5
    )

    controller = run_once(config, console=console)

    assert controller.last_result is not None
    assert controller.last_result.found
    assert controller.graph.count(NodeState.WALL) == 7
    assert "Cost" in console.export_text()


def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "GRIDPATH_WIDTH",
        "GRIDPATH_HEIGHT",
        "GRIDPATH_WALL_FRACTION",
        "GRIDPATH_RANDOMIZE_START_AND_GOAL",
        "GRIDPATH_SEED",
        "GRIDPATH_MAX_REGENERATIONS",
    ):
        monkeypatch.delenv(name, raising=False)
