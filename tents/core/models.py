"""Data models supporting the tents solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from .constants import MoveReason

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    """A single tent placement recorded in a board's history."""

    row: int
    col: int
    reason: MoveReason = MoveReason.MANUAL

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)


@dataclass(frozen=True)
class Region:
    """A group of unsatisfied trees whose legal spots interact."""

    trees: Tuple[Coord, ...]
    spots: FrozenSet[Coord] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.trees)


@dataclass
class SolveStats:
    """Counters collected while solving one board."""

    forced_placements: int = 0
    region_count: int = 0
    stuck_regions: int = 0
    nodes_expanded: int = 0
    max_depth: int = 0
    backtracks: int = 0
    used_full_search: bool = False
    elapsed_seconds: float = 0.0
    engine: str = "search"
