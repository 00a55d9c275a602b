"""Shared constants and enumerations for the tents solver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple


class CellState(IntEnum):
    """All supported cell states on the board.

    Values are small integers so a board can keep its cells in a flat
    ``bytearray``.
    """

    UNKNOWN = 0
    TREE = 1
    TENT = 2
    GRASS = 3


class MoveReason(str, Enum):
    """Why a tent was placed."""

    MANUAL = "MANUAL"
    ROW_SATURATION = "ROW_SATURATION"
    COLUMN_SATURATION = "COLUMN_SATURATION"
    SINGLE_OPTION = "SINGLE_OPTION"
    REGION_FORCED = "REGION_FORCED"
    BRANCH = "BRANCH"
    ORACLE = "ORACLE"
    CP_SAT = "CP_SAT"


# Enumeration order for a tree's candidate spots: down, up, right, left.
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KING_STEPS: Tuple[Tuple[int, int], ...] = ORTHOGONAL_STEPS + DIAGONAL_STEPS

# Characters used by the text puzzle format and the pretty printer.
CELL_SYMBOLS = {
    CellState.UNKNOWN: ".",
    CellState.TREE: "T",
    CellState.TENT: "t",
    CellState.GRASS: "g",
}
SYMBOL_CELLS = {symbol: state for state, symbol in CELL_SYMBOLS.items()}


@dataclass(frozen=True)
class Bounds:
    """Simple square bounds helper."""

    size: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size
