"""Main tents solver orchestration.

Phases:
  1. Propagate forced placements to a fixpoint.
  2. Partition the remaining trees into independent regions and solve each
     one deterministically.
  3. Escalate stuck regions to a search scoped to the region, then fall
     back to a whole-board search if the board is still open.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..core.constants import CellState, MoveReason
from ..core.exceptions import BoardStateError, PartitionError
from ..core.models import Move, Region, SolveStats
from ..utils.logger import get_logger
from .backtracking import BacktrackingSolver, SearchBudget, SearchOutcome
from .board import Board
from .cpsat import solve_with_cpsat
from .deterministic import RegionStatus, solve_region
from .propagator import propagate
from .regions import check_partition, partition_regions
from .rules import is_legal_spot
from .scoring import get_scorer
from .validator import BoardValidator


LOGGER = get_logger(__name__)

ENGINES = ("search", "cpsat")


class SolveStatus(str, Enum):
    SOLVED = "SOLVED"
    INVALID = "INVALID"
    # Search budget ran out before a verdict.
    UNKNOWN = "UNKNOWN"
    MALFORMED = "MALFORMED"


@dataclass
class SolverConfig:
    engine: str = "search"
    scoring: Optional[str] = None
    node_limit: Optional[int] = 200_000
    time_limit_seconds: Optional[float] = 30.0
    scoped_search: bool = True
    verify_partition: bool = True
    mark_grass: bool = False
    strict_matching: bool = False
    cpsat_timeout: float = 10.0

    def to_budget(self) -> SearchBudget:
        return SearchBudget(node_limit=self.node_limit, time_limit=self.time_limit_seconds)


@dataclass
class SolveResult:
    status: SolveStatus
    board: Board
    stats: SolveStats
    messages: List[str] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED


class TentsSolver:
    """High-level driver composing propagation, regions and search.

    :meth:`solve` works on a clone and copies the result back into the
    caller's board only when the puzzle is solved.
    """

    def __init__(self, config: Optional[SolverConfig] = None, validator: Optional[BoardValidator] = None) -> None:
        self.config = config or SolverConfig()
        if self.config.engine not in ENGINES:
            raise ValueError(f"Unknown engine {self.config.engine!r}; expected one of {ENGINES}")
        self.scorer = get_scorer(self.config.scoring)
        self.validator = validator or BoardValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def solve(self, board: Board) -> SolveResult:
        started = time.perf_counter()
        stats = SolveStats(engine=self.config.engine)

        definition = self.validator.check_definition(board)
        if not definition.ok:
            return self._finish(board, None, SolveStatus.MALFORMED, stats, definition.messages, started)

        LOGGER.info(
            "Solving %dx%d board with %d trees (engine=%s)",
            board.size,
            board.size,
            len(board.trees),
            self.config.engine,
        )
        work = board.clone()
        if self.config.engine == "cpsat":
            status, messages = self._solve_cpsat(work)
        else:
            status, messages = self._solve_search(work, stats)
        return self._finish(board, work, status, stats, messages, started)

    def next_move(self, board: Board) -> Optional[Move]:
        """Return the first tent the solver would place, without placing it.

        When the solver cannot finish the board, the first legal tent of the
        reference solution (row-major) is offered instead, if there is one.
        """

        if board.is_complete():
            return None
        trial = board.clone()
        result = self.solve(trial)
        if result.solved:
            fresh = trial.history[len(board.history):]
            if fresh:
                return fresh[0]
        if board.has_solution:
            for row in range(board.size):
                for col in range(board.size):
                    if (
                        board.solution_cell(row, col) == CellState.TENT
                        and board.cell(row, col) != CellState.TENT
                        and is_legal_spot(board, row, col)
                    ):
                        return Move(row, col, MoveReason.ORACLE)
        return None

    def make_move(self, board: Board) -> Optional[Move]:
        move = self.next_move(board)
        if move is None:
            return None
        return board.place_tent(move.row, move.col, reason=move.reason)

    @staticmethod
    def reveal_solution(board: Board) -> None:
        """Overwrite the board with its reference solution."""

        if not board.has_solution:
            raise BoardStateError("Board has no reference solution to reveal")
        for row in range(board.size):
            for col in range(board.size):
                current = board.cell(row, col)
                if current == CellState.TREE:
                    continue
                if board.solution_cell(row, col) == CellState.TENT:
                    if current == CellState.TENT:
                        continue
                    if current == CellState.GRASS:
                        board.set_cell(row, col, CellState.UNKNOWN)
                    board.place_tent(row, col, reason=MoveReason.ORACLE)
                else:
                    board.set_cell(row, col, CellState.GRASS)

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------
    def _solve_search(self, work: Board, stats: SolveStats) -> Tuple[SolveStatus, List[str]]:
        searcher = BacktrackingSolver(self.scorer, self.config.to_budget())
        start_moves = len(work.history)
        try:
            first = propagate(work)
            if first.contradiction:
                return SolveStatus.INVALID, [first.reason or "propagation contradiction"]
            stats.forced_placements = len(work.history) - start_moves
            if work.is_complete():
                return SolveStatus.SOLVED, []

            regions = partition_regions(work)
            stats.region_count = len(regions)
            if self.config.verify_partition:
                problems = check_partition(work, regions)
                if problems:
                    raise PartitionError("; ".join(problems))

            stuck: List[Region] = []
            for region in regions:
                outcome = solve_region(work, region)
                if outcome == RegionStatus.INVALID:
                    return SolveStatus.INVALID, [
                        f"region of {len(region)} trees starting at {region.trees[0]} cannot be satisfied"
                    ]
                if outcome == RegionStatus.STUCK:
                    stuck.append(region)
            stats.stuck_regions = len(stuck)
            LOGGER.info("Deterministic pass: %d regions, %d stuck", len(regions), len(stuck))

            settle = propagate(work)
            if settle.contradiction:
                return SolveStatus.INVALID, [settle.reason or "propagation contradiction"]
            stats.forced_placements = len(work.history) - start_moves
            if work.is_complete():
                return SolveStatus.SOLVED, []

            if stuck and self.config.scoped_search:
                verdict = self._search_regions(work, stuck, searcher)
                if verdict is not None:
                    return verdict

            stats.used_full_search = True
            LOGGER.info("Running whole-board search")
            outcome = searcher.search(work)
            if outcome == SearchOutcome.SUCCESS:
                return SolveStatus.SOLVED, []
            if outcome == SearchOutcome.BUDGET_EXHAUSTED:
                return SolveStatus.UNKNOWN, ["search budget exhausted"]
            return SolveStatus.INVALID, ["no tent placement completes the board"]
        finally:
            stats.nodes_expanded = searcher.nodes_expanded
            stats.max_depth = searcher.max_depth
            stats.backtracks = searcher.backtracks

    def _search_regions(
        self, work: Board, stuck: List[Region], searcher: BacktrackingSolver
    ) -> Optional[Tuple[SolveStatus, List[str]]]:
        """Search each stuck region on its own; None means fall back."""

        checkpoint = work.clone()
        for region in stuck:
            outcome = searcher.search(work, scope=region)
            if outcome == SearchOutcome.BUDGET_EXHAUSTED:
                return SolveStatus.UNKNOWN, ["search budget exhausted"]
            if outcome == SearchOutcome.FAIL:
                LOGGER.info("Scoped search failed for region at %s", region.trees[0])
                break
        else:
            if work.is_complete():
                return SolveStatus.SOLVED, []
        # Region-local choices can starve a shared row or column.
        work.copy_from(checkpoint)
        return None

    def _solve_cpsat(self, work: Board) -> Tuple[SolveStatus, List[str]]:
        tents = solve_with_cpsat(
            work, timeout=self.config.cpsat_timeout, strict_matching=self.config.strict_matching
        )
        if tents is None:
            return SolveStatus.INVALID, ["CP-SAT found no completion"]
        existing = set(work.tents())
        for row, col in tents:
            if (row, col) not in existing:
                work.place_tent(row, col, reason=MoveReason.CP_SAT)
        if not work.is_complete():
            return SolveStatus.INVALID, ["CP-SAT placement left the board incomplete"]
        return SolveStatus.SOLVED, []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _finish(
        self,
        board: Board,
        work: Optional[Board],
        status: SolveStatus,
        stats: SolveStats,
        messages: List[str],
        started: float,
    ) -> SolveResult:
        if status == SolveStatus.SOLVED and work is not None:
            if self.config.mark_grass:
                work.fill_grass()
            board.copy_from(work)
        stats.elapsed_seconds = time.perf_counter() - started
        LOGGER.info(
            "Solve finished: %s in %.3fs (%d forced, %d search nodes)",
            status.value,
            stats.elapsed_seconds,
            stats.forced_placements,
            stats.nodes_expanded,
        )
        for message in messages:
            LOGGER.info("  %s", message)
        return SolveResult(status=status, board=board, stats=stats, messages=list(messages))
