"""Load sandbox configuration from JSON, environment and CLI overrides."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Mapping

from gridpath.sim.contracts import SandboxConfig, parse_sandbox_config
from gridpath.sim.errors import InvalidConfig

DEFAULT_CONFIG_PATH = Path("sandbox.json")
ENV_PREFIX = "GRIDPATH_"

GRID_FIELDS = ("width", "height", "wall_fraction", "randomize_start_and_goal")
SANDBOX_FIELDS = ("seed", "max_regenerations")


def load_sandbox_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SandboxConfig:
    """Merge defaults, a JSON file, GRIDPATH_* variables and explicit overrides.

    An explicit ``path`` must exist. Without one, ``sandbox.json`` in the
    working directory is used when present.
    """
    if path is not None:
        data = _load_json(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = _load_json(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    grid = dict(data.get("grid", {}))
    sandbox = {key: value for key, value in data.items() if key != "grid"}

    env_values = _env_overrides(os.environ if env is None else env)
    for layer in (env_values, overrides or {}):
        for key, value in layer.items():
            if value is None:
                continue
            if key in GRID_FIELDS:
                grid[key] = value
            elif key in SANDBOX_FIELDS or key in {"start", "goal"}:
                sandbox[key] = value
            else:
                raise InvalidConfig(f"Unknown configuration key: {key}")

    sandbox["grid"] = grid
    return parse_sandbox_config(sandbox)


def _load_json(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Missing sandbox config file: {path}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidConfig(f"Sandbox config {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidConfig(f"Sandbox config {path} must contain a JSON object.")
    return data


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(raw)


_ENV_PARSERS: dict[str, Callable[[str], Any]] = {
    "width": int,
    "height": int,
    "wall_fraction": float,
    "randomize_start_and_goal": _parse_bool,
    "seed": int,
    "max_regenerations": int,
}


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, parse in _ENV_PARSERS.items():
        name = f"{ENV_PREFIX}{key.upper()}"
        raw = env.get(name)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[key] = parse(raw.strip())
        except ValueError as exc:
            raise InvalidConfig(f"{name}={raw!r} is not a valid value.") from exc
    return values
