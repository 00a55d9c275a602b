"""Solver package for the Tents and Trees logic puzzle.

This package exposes the public API surface via:

- ``tents.engine.board.Board``: compact board state with clone/commit support.
- ``tents.engine.solver.TentsSolver``: propagation, region and search driver.
- ``tents.io.puzzle_io`` helpers: JSON puzzle loading and result dumps.
"""

from .engine.board import Board
from .engine.solver import SolveResult, SolveStatus, SolverConfig, TentsSolver

__all__ = [
    "Board",
    "SolveResult",
    "SolveStatus",
    "SolverConfig",
    "TentsSolver",
]

__version__ = "0.1.0"
