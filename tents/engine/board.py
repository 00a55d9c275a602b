"""Board representation and helper utilities."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import CELL_SYMBOLS, ORTHOGONAL_STEPS, SYMBOL_CELLS, Bounds, CellState, MoveReason
from ..core.exceptions import BoardStateError, PlacementError, PuzzleDefinitionError
from ..core.models import Coord, Move
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class Board:
    """An n×n tents board with fixed trees and per-line tent targets.

    Cells live in a flat ``bytearray`` of :class:`CellState` values and the
    usage counters in four small integer lists, so :meth:`clone` is a bulk
    copy rather than a walk over an object graph. Trees are kept in
    row-major order; that order is the tie-break order of every strategy.
    """

    def __init__(
        self,
        size: int,
        trees: Iterable[Coord],
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        solution: Optional[Iterable[Coord]] = None,
    ) -> None:
        if size < 1:
            raise PuzzleDefinitionError(f"Board size must be positive, got {size}")
        if len(row_targets) != size or len(col_targets) != size:
            raise PuzzleDefinitionError(
                f"Expected {size} row and column targets, got "
                f"{len(row_targets)} and {len(col_targets)}"
            )
        if any(t < 0 for t in row_targets) or any(t < 0 for t in col_targets):
            raise PuzzleDefinitionError("Tent targets cannot be negative")

        self.bounds = Bounds(size)
        self._size = size
        self.cells = bytearray(size * size)
        self.row_targets: Tuple[int, ...] = tuple(int(t) for t in row_targets)
        self.col_targets: Tuple[int, ...] = tuple(int(t) for t in col_targets)
        self.rows_used: List[int] = [0] * size
        self.cols_used: List[int] = [0] * size
        self.history: List[Move] = []

        seen = set()
        for row, col in trees:
            if not self.bounds.contains(row, col):
                raise PuzzleDefinitionError(f"Tree outside bounds: {(row, col)}")
            if (row, col) in seen:
                raise PuzzleDefinitionError(f"Duplicate tree at {(row, col)}")
            seen.add((row, col))
            self.cells[self._index(row, col)] = CellState.TREE
        self._trees: Tuple[Coord, ...] = tuple(sorted(seen))

        self._solution: Optional[bytearray] = None
        if solution is not None:
            self._solution = bytearray(size * size)
            for row, col in self._trees:
                self._solution[self._index(row, col)] = CellState.TREE
            for row, col in solution:
                if not self.bounds.contains(row, col):
                    raise PuzzleDefinitionError(f"Solution tent outside bounds: {(row, col)}")
                if (row, col) in seen:
                    raise PuzzleDefinitionError(f"Solution tent on a tree at {(row, col)}")
                self._solution[self._index(row, col)] = CellState.TENT
            for index, value in enumerate(self._solution):
                if value == CellState.UNKNOWN:
                    self._solution[index] = CellState.GRASS

    @classmethod
    def from_strings(
        cls,
        rows: Sequence[str],
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        solution: Optional[Sequence[str]] = None,
    ) -> "Board":
        """Build a board from text rows such as ``"T..t"``.

        Only trees are read from ``rows``; tents and grass in ``rows`` are
        applied afterwards so partially played boards can be described too.
        """

        size = len(rows)
        grid = _parse_rows(rows, size)
        trees = [(r, c) for r in range(size) for c in range(size) if grid[r][c] == CellState.TREE]
        solution_tents = None
        if solution is not None:
            solved = _parse_rows(solution, size)
            solution_tents = [
                (r, c) for r in range(size) for c in range(size) if solved[r][c] == CellState.TENT
            ]
        board = cls(size, trees, row_targets, col_targets, solution=solution_tents)
        for r in range(size):
            for c in range(size):
                if grid[r][c] == CellState.TENT:
                    board.place_tent(r, c)
                elif grid[r][c] == CellState.GRASS:
                    board.mark_grass(r, c)
        return board

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    @property
    def trees(self) -> Tuple[Coord, ...]:
        return self._trees

    @property
    def has_solution(self) -> bool:
        return self._solution is not None

    def _index(self, row: int, col: int) -> int:
        return row * self._size + col

    def in_bounds(self, row: int, col: int) -> bool:
        return self.bounds.contains(row, col)

    def cell(self, row: int, col: int) -> CellState:
        if not self.bounds.contains(row, col):
            raise PlacementError(f"Cell outside bounds: {(row, col)}")
        return CellState(self.cells[self._index(row, col)])

    def row_target(self, row: int) -> int:
        return self.row_targets[row]

    def col_target(self, col: int) -> int:
        return self.col_targets[col]

    def row_used(self, row: int) -> int:
        return self.rows_used[row]

    def col_used(self, col: int) -> int:
        return self.cols_used[col]

    def solution_cell(self, row: int, col: int) -> Optional[CellState]:
        if self._solution is None:
            return None
        if not self.bounds.contains(row, col):
            raise PlacementError(f"Cell outside bounds: {(row, col)}")
        return CellState(self._solution[self._index(row, col)])

    def neighbors(self, row: int, col: int, steps) -> Iterable[Coord]:
        for dr, dc in steps:
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield nr, nc

    def tents(self) -> List[Coord]:
        size = self._size
        return [divmod(i, size) for i, value in enumerate(self.cells) if value == CellState.TENT]

    def tent_count(self) -> int:
        return sum(self.rows_used)

    def is_complete(self) -> bool:
        """Every line is at its target and every tree touches a tent."""

        if list(self.row_targets) != self.rows_used or list(self.col_targets) != self.cols_used:
            return False
        for row, col in self._trees:
            if not any(
                self.cells[self._index(nr, nc)] == CellState.TENT
                for nr, nc in self.neighbors(row, col, ORTHOGONAL_STEPS)
            ):
                return False
        return True

    def state_key(self) -> Tuple[bytes, Tuple[int, ...], Tuple[int, ...]]:
        """Return a hashable fingerprint of every mutable field except history."""

        return bytes(self.cells), tuple(self.rows_used), tuple(self.cols_used)

    # ------------------------------------------------------------------
    # Cell manipulation
    # ------------------------------------------------------------------
    def place_tent(self, row: int, col: int, reason: MoveReason = MoveReason.MANUAL) -> Move:
        """Set a tent and bump both line counters as one operation."""

        if not self.bounds.contains(row, col):
            raise PlacementError(f"Tent outside bounds: {(row, col)}")
        index = self._index(row, col)
        if self.cells[index] != CellState.UNKNOWN:
            raise PlacementError(
                f"Cannot place tent on {CellState(self.cells[index]).name} cell at {(row, col)}"
            )
        self.cells[index] = CellState.TENT
        self.rows_used[row] += 1
        self.cols_used[col] += 1
        move = Move(row, col, reason)
        self.history.append(move)
        LOGGER.debug("Placed tent at (%s,%s) [%s]", row, col, reason.value)
        return move

    def remove_tent(self, row: int, col: int) -> None:
        if not self.bounds.contains(row, col):
            raise PlacementError(f"Tent outside bounds: {(row, col)}")
        index = self._index(row, col)
        if self.cells[index] != CellState.TENT:
            raise PlacementError(f"No tent to remove at {(row, col)}")
        self.cells[index] = CellState.UNKNOWN
        self.rows_used[row] -= 1
        self.cols_used[col] -= 1
        self.history = [move for move in self.history if move.coord != (row, col)]

    def set_cell(self, row: int, col: int, state: CellState) -> None:
        """Set a non-tent state on a non-tree cell."""

        if not self.bounds.contains(row, col):
            raise PlacementError(f"Cell outside bounds: {(row, col)}")
        if state == CellState.TENT:
            raise PlacementError("Use place_tent to add tents")
        if state == CellState.TREE:
            raise PlacementError("Trees are fixed when the board is created")
        current = self.cells[self._index(row, col)]
        if current == CellState.TREE:
            raise PlacementError(f"Cannot overwrite tree at {(row, col)}")
        if current == CellState.TENT:
            self.remove_tent(row, col)
        self.cells[self._index(row, col)] = state

    def mark_grass(self, row: int, col: int) -> None:
        self.set_cell(row, col, CellState.GRASS)

    def fill_grass(self) -> int:
        """Mark every remaining unknown cell as grass; return how many changed."""

        changed = 0
        for index, value in enumerate(self.cells):
            if value == CellState.UNKNOWN:
                self.cells[index] = CellState.GRASS
                changed += 1
        return changed

    # ------------------------------------------------------------------
    # Branching support
    # ------------------------------------------------------------------
    def clone(self) -> "Board":
        other = Board.__new__(Board)
        other.bounds = self.bounds
        other._size = self._size
        other.cells = bytearray(self.cells)
        other.row_targets = self.row_targets
        other.col_targets = self.col_targets
        other.rows_used = list(self.rows_used)
        other.cols_used = list(self.cols_used)
        other.history = list(self.history)
        other._trees = self._trees
        other._solution = self._solution
        return other

    def copy_from(self, other: "Board") -> None:
        """Overwrite cells, counters and history with ``other``'s."""

        if other.size != self._size:
            raise BoardStateError(
                f"Cannot copy a {other.size}x{other.size} board into a {self._size}x{self._size} board"
            )
        if other.trees != self._trees:
            raise BoardStateError("Cannot copy a board with different trees")
        self.cells[:] = other.cells
        self.rows_used[:] = other.rows_used
        self.cols_used[:] = other.cols_used
        self.history = list(other.history)

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_strings(self) -> List[str]:
        return [
            "".join(CELL_SYMBOLS[CellState(self.cells[self._index(r, c)])] for c in range(self._size))
            for r in range(self._size)
        ]

    def to_jsonable(self) -> dict:
        return {
            "size": self._size,
            "row_targets": list(self.row_targets),
            "col_targets": list(self.col_targets),
            "rows_used": list(self.rows_used),
            "cols_used": list(self.cols_used),
            "grid": self.to_strings(),
            "tents": [list(coord) for coord in self.tents()],
            "moves": [
                {"row": move.row, "col": move.col, "reason": move.reason.value}
                for move in self.history
            ],
        }


def _parse_rows(rows: Sequence[str], size: int) -> List[List[CellState]]:
    grid: List[List[CellState]] = []
    for r, text in enumerate(rows):
        text = text.replace(" ", "")
        if len(text) != size:
            raise PuzzleDefinitionError(f"Row {r} has {len(text)} cells, expected {size}")
        row: List[CellState] = []
        for c, symbol in enumerate(text):
            state = SYMBOL_CELLS.get(symbol)
            if state is None:
                raise PuzzleDefinitionError(f"Unknown cell symbol {symbol!r} at {(r, c)}")
            row.append(state)
        grid.append(row)
    return grid
