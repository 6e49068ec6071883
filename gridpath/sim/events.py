"""Node state-change notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from gridpath.sim.contracts import Coord, NodeState


class NodeStateListener(Protocol):
    def __call__(self, coord: Coord, state: NodeState) -> None:
        """Receive a node's new state."""


@dataclass(frozen=True)
class StateChange:
    coord: Coord
    state: NodeState


@dataclass
class StateChangeRecorder:
    """Collect state changes in the order they were fired."""

    changes: list[StateChange] = field(default_factory=list)

    def __call__(self, coord: Coord, state: NodeState) -> None:
        self.changes.append(StateChange(coord=coord, state=state))

    def clear(self) -> None:
        self.changes.clear()

    def latest(self) -> dict[Coord, NodeState]:
        return {change.coord: change.state for change in self.changes}


def ignore_state_change(coord: Coord, state: NodeState) -> None:
    return None
