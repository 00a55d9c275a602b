"""CP-SAT tents solver using OR-Tools.

Serves as an alternate engine and as an independent cross-check of the
propagation and search engine.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

from ortools.sat.python import cp_model

from ..core.constants import KING_STEPS, ORTHOGONAL_STEPS, CellState
from ..core.models import Coord
from ..utils.logger import get_logger
from .board import Board

LOGGER = get_logger(__name__)

TentVar = Union[int, cp_model.IntVar]


def solve_with_cpsat(
    board: Board,
    timeout: float = 10.0,
    strict_matching: bool = False,
    num_workers: int = 1,
) -> Optional[List[Coord]]:
    """Find tent positions completing ``board`` via CP-SAT.

    Args:
        board: Board whose existing tents are kept fixed.
        timeout: Solver time limit in seconds.
        strict_matching: Require every tree to own a distinct adjacent tent
            instead of merely touching one.
        num_workers: CP-SAT search workers. One worker keeps repeated runs
            on the same board identical.

    Returns:
        Sorted list of every tent coordinate of the completed board, or
        None if the board cannot be completed.
    """

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Tent variables for cells beside a tree
    # ------------------------------------------------------------------
    tent_vars: Dict[Coord, TentVar] = {}
    for row in range(board.size):
        for col in range(board.size):
            state = board.cell(row, col)
            if state not in (CellState.TENT, CellState.UNKNOWN):
                continue
            beside_tree = any(
                board.cell(nr, nc) == CellState.TREE
                for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
            )
            if state == CellState.TENT:
                if not beside_tree:
                    LOGGER.debug("CP-SAT: fixed tent at %s has no tree beside it", (row, col))
                    return None
                tent_vars[(row, col)] = 1
            elif beside_tree:
                tent_vars[(row, col)] = model.new_bool_var(f"T_{row}_{col}")

    # ------------------------------------------------------------------
    # Step 2: Exact line counts
    # ------------------------------------------------------------------
    for index in range(board.size):
        row_terms = [v for (r, _), v in tent_vars.items() if r == index]
        col_terms = [v for (_, c), v in tent_vars.items() if c == index]
        if not _add_exact_sum(model, row_terms, board.row_target(index)):
            LOGGER.debug("CP-SAT: row %d cannot reach its target", index)
            return None
        if not _add_exact_sum(model, col_terms, board.col_target(index)):
            LOGGER.debug("CP-SAT: column %d cannot reach its target", index)
            return None

    # ------------------------------------------------------------------
    # Step 3: Tents never touch
    # ------------------------------------------------------------------
    for (row, col), var in tent_vars.items():
        for dr, dc in KING_STEPS:
            other_coord = (row + dr, col + dc)
            # Visit each unordered pair once.
            if other_coord not in tent_vars or other_coord < (row, col):
                continue
            other = tent_vars[other_coord]
            if _is_const(var) and _is_const(other):
                LOGGER.debug("CP-SAT: fixed tents at %s and %s touch", (row, col), other_coord)
                return None
            if _is_const(var):
                model.add(other == 0)
            elif _is_const(other):
                model.add(var == 0)
            else:
                model.add(var + other <= 1)

    # ------------------------------------------------------------------
    # Step 4: Tree coverage
    # ------------------------------------------------------------------
    if strict_matching:
        if not _add_matching(model, board, tent_vars):
            return None
    else:
        for row, col in board.trees:
            around = [
                tent_vars[(nr, nc)]
                for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
                if (nr, nc) in tent_vars
            ]
            if any(_is_const(v) for v in around):
                continue
            if not around:
                LOGGER.debug("CP-SAT: tree %s has no candidate cell", (row, col))
                return None
            model.add_bool_or(around)

    # ------------------------------------------------------------------
    # Step 5: Solve and extract
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = num_workers

    LOGGER.info(
        "CP-SAT: %d candidate cells, solving (timeout=%0.1fs)...",
        sum(1 for v in tent_vars.values() if not _is_const(v)),
        timeout,
    )
    status = solver.solve(model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None

    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)
    return sorted(coord for coord, var in tent_vars.items() if _resolve_var(solver, var) == 1)


def _is_const(value: TentVar) -> bool:
    return isinstance(value, int)


def _resolve_var(solver: cp_model.CpSolver, var_or_const: TentVar) -> int:
    if _is_const(var_or_const):
        return var_or_const
    return solver.value(var_or_const)


def _add_exact_sum(model: cp_model.CpModel, terms: Sequence[TentVar], target: int) -> bool:
    fixed = sum(t for t in terms if _is_const(t))
    variables = [t for t in terms if not _is_const(t)]
    if not variables:
        return fixed == target
    model.add(sum(variables) == target - fixed)
    return True


def _add_matching(model: cp_model.CpModel, board: Board, tent_vars: Dict[Coord, TentVar]) -> bool:
    """Each tree owns exactly one adjacent tent and each tent one tree."""

    owners: Dict[Coord, List[cp_model.IntVar]] = {coord: [] for coord in tent_vars}
    for row, col in board.trees:
        edges = []
        for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS):
            if (nr, nc) not in tent_vars:
                continue
            edge = model.new_bool_var(f"M_{row}_{col}_{nr}_{nc}")
            owners[(nr, nc)].append(edge)
            edges.append(edge)
        if not edges:
            LOGGER.debug("CP-SAT: tree %s has no candidate cell", (row, col))
            return False
        model.add(sum(edges) == 1)
    for coord, var in tent_vars.items():
        edges = owners[coord]
        if not edges:
            if _is_const(var):
                return False
            model.add(var == 0)
            continue
        model.add(sum(edges) == var)
    return True
