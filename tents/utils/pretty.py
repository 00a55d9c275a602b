"""Pretty-print helpers for tents boards."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING

from ..core.constants import CELL_SYMBOLS, CellState

if TYPE_CHECKING:
    from ..engine.board import Board
    from ..engine.solver import SolveResult


def format_board(board: Board) -> str:
    """Render the grid with column targets on top and row targets on the right."""

    size = board.size
    header_cells = [f"{c:>2}" for c in range(size)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + " ".join(f"{board.col_target(c):>2}" for c in range(size)))
    lines.append("    " + "-" * (3 * size - 1))
    for r in range(size):
        row_render = " ".join(f"{CELL_SYMBOLS[board.cell(r, c)]:>2}" for c in range(size))
        lines.append(f"{r:>2} | {row_render} | {board.row_used(r)}/{board.row_target(r)}")
    lines.append("    " + " ".join(f"{board.col_used(c):>2}" for c in range(size)))
    return "\n".join(lines)


def pretty_print_board(board: Board, *, label: str | None = None, stream=None) -> None:
    """Print the board in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_board(board), file=stream)


def print_solve_stats(result: SolveResult, *, stream=None) -> None:
    """Print board + solve statistics for a finished run."""

    stream = stream or sys.stdout
    board = result.board
    print(format_board(board), file=stream)

    states = Counter(board.cell(r, c) for r in range(board.size) for c in range(board.size))
    print(file=stream)
    print("--- Board ---", file=stream)
    print(f"  Size:          {board.size} x {board.size}", file=stream)
    print(f"  Trees:         {states[CellState.TREE]}", file=stream)
    print(f"  Tents:         {board.tent_count()} / {sum(board.row_targets)}", file=stream)
    if states[CellState.GRASS]:
        print(f"  Grass:         {states[CellState.GRASS]}", file=stream)

    stats = result.stats
    reasons = Counter(move.reason.value for move in board.history)
    print(file=stream)
    print("--- Solve ---", file=stream)
    print(f"  Status:        {result.status.value}", file=stream)
    print(f"  Engine:        {stats.engine}", file=stream)
    print(f"  Forced moves:  {stats.forced_placements}", file=stream)
    print(f"  Regions:       {stats.region_count} ({stats.stuck_regions} stuck)", file=stream)
    print(f"  Search nodes:  {stats.nodes_expanded} (max depth {stats.max_depth}, {stats.backtracks} dead ends)", file=stream)
    print(f"  Time:          {stats.elapsed_seconds:.3f}s", file=stream)
    if reasons:
        parts = [f"{reason}:{count}" for reason, count in sorted(reasons.items())]
        print(f"  Moves:         {' '.join(parts)}", file=stream)

    if result.messages:
        print(file=stream)
        print("--- Messages ---", file=stream)
        for msg in result.messages:
            print(f"  {msg}", file=stream)
