"""JSON puzzle files.

A puzzle document looks like::

    {
      "size": 6,
      "row_targets": [2, 0, 2, 0, 2, 1],
      "col_targets": [2, 1, 0, 2, 0, 2],
      "grid": ["....T.", "T.....", ...],
      "solution": ["t..tT.", ...]
    }

``trees`` (a list of ``[row, col]`` pairs) may replace ``grid``; ``size``
is optional when ``grid`` is given, and ``solution`` is always optional.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List

from ..core.constants import CellState
from ..core.exceptions import PuzzleDefinitionError, PuzzleFileError
from ..engine.board import Board
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..engine.solver import SolveResult


LOGGER = get_logger(__name__)

_SOLUTION_SYMBOLS = {CellState.TREE: "T", CellState.TENT: "t", CellState.GRASS: "."}


def load_puzzle(path: Path | str) -> Board:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PuzzleFileError(f"Cannot read puzzle file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PuzzleFileError(f"Puzzle file {path} is not valid JSON: {exc}") from exc
    board = parse_puzzle(payload)
    LOGGER.info("Loaded %dx%d puzzle with %d trees from %s", board.size, board.size, len(board.trees), path)
    return board


def parse_puzzle(payload: Dict[str, Any]) -> Board:
    """Build a :class:`Board` from a decoded puzzle document."""

    if not isinstance(payload, dict):
        raise PuzzleFileError("Puzzle document must be a JSON object")
    try:
        row_targets = [int(v) for v in payload["row_targets"]]
        col_targets = [int(v) for v in payload["col_targets"]]
    except KeyError as exc:
        raise PuzzleFileError(f"Puzzle document is missing {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise PuzzleFileError(f"Targets must be lists of integers: {exc}") from exc

    solution = payload.get("solution")
    try:
        if "grid" in payload:
            grid = _string_rows(payload["grid"], "grid")
            size = payload.get("size", len(grid))
            if size != len(grid):
                raise PuzzleFileError(f"Declared size {size} does not match {len(grid)} grid rows")
            return Board.from_strings(
                grid,
                row_targets,
                col_targets,
                solution=_string_rows(solution, "solution") if solution is not None else None,
            )
        if "trees" not in payload or "size" not in payload:
            raise PuzzleFileError("Puzzle document needs either 'grid' or both 'size' and 'trees'")
        trees = [(int(r), int(c)) for r, c in payload["trees"]]
        tents = None
        if solution is not None:
            tents = Board.from_strings(_string_rows(solution, "solution"), row_targets, col_targets).tents()
        return Board(int(payload["size"]), trees, row_targets, col_targets, solution=tents)
    except PuzzleFileError:
        raise
    except PuzzleDefinitionError as exc:
        raise PuzzleFileError(str(exc)) from exc
    except (TypeError, ValueError) as exc:
        raise PuzzleFileError(f"Malformed puzzle document: {exc}") from exc


def board_to_payload(board: Board) -> Dict[str, Any]:
    """Inverse of :func:`parse_puzzle` for the puzzle part of a board."""

    payload: Dict[str, Any] = {
        "size": board.size,
        "row_targets": list(board.row_targets),
        "col_targets": list(board.col_targets),
        "trees": [list(tree) for tree in board.trees],
    }
    if board.has_solution:
        payload["solution"] = [
            "".join(_SOLUTION_SYMBOLS[board.solution_cell(r, c)] for c in range(board.size))
            for r in range(board.size)
        ]
    return payload


def dump_result(result: "SolveResult") -> Dict[str, Any]:
    stats = result.stats
    return {
        "status": result.status.value,
        "messages": list(result.messages),
        "board": result.board.to_jsonable(),
        "stats": {
            "engine": stats.engine,
            "forced_placements": stats.forced_placements,
            "region_count": stats.region_count,
            "stuck_regions": stats.stuck_regions,
            "nodes_expanded": stats.nodes_expanded,
            "max_depth": stats.max_depth,
            "backtracks": stats.backtracks,
            "used_full_search": stats.used_full_search,
            "elapsed_seconds": round(stats.elapsed_seconds, 6),
        },
    }


def save_puzzle(board: Board, path: Path | str) -> None:
    Path(path).write_text(json.dumps(board_to_payload(board), indent=2), encoding="utf-8")


def _string_rows(value: Any, field: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(row, str) for row in value):
        raise PuzzleFileError(f"'{field}' must be a list of strings")
    return value
