"""Module entry point for `python -m gridpath`."""

from __future__ import annotations

import argparse
from pathlib import Path

from gridpath.app import (
    DEFAULT_LOG_LEVEL,
    LOG_LEVELS,
    configure_logging,
    run_once,
    run_sandbox,
)
from gridpath.sim.config_loader import load_sandbox_config
from gridpath.sim.errors import GridError


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, interactive=not args.once)

    try:
        config = load_sandbox_config(
            args.config,
            overrides={
                "width": args.width,
                "height": args.height,
                "wall_fraction": args.walls,
                "randomize_start_and_goal": True if args.randomize else None,
                "seed": args.seed,
                "max_regenerations": args.max_regenerations,
            },
        )
        if args.once:
            run_once(config)
        else:
            run_sandbox(config)
    except (GridError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the A* grid sandbox.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON sandbox config (defaults to ./sandbox.json when present).",
    )
    parser.add_argument("--width", type=int, default=None, help="Grid width.")
    parser.add_argument("--height", type=int, default=None, help="Grid height.")
    parser.add_argument(
        "--walls",
        type=float,
        default=None,
        help="Fraction of cells turned into walls, between 0 and 0.5.",
    )
    parser.add_argument(
        "--randomize",
        action="store_true",
        help="Place start and goal on random open cells.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible grids.",
    )
    parser.add_argument(
        "--max-regenerations",
        type=int,
        default=None,
        help="Give up after this many unsolvable grids.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print one solved grid and exit instead of opening the sandbox.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help="Logging level.",
    )
    return parser


if __name__ == "__main__":
    main()
