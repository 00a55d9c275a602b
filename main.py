"""CLI entrypoint for the Tents and Trees solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from tents.core.exceptions import PuzzleFileError
from tents.engine.scoring import SCORERS
from tents.engine.solver import ENGINES, SolverConfig, TentsSolver
from tents.engine.validator import BoardValidator
from tents.io.puzzle_io import dump_result, load_puzzle
from tents.utils.logger import configure_logging
from tents.utils.pretty import pretty_print_board, print_solve_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve Tents and Trees puzzles",
    )
    parser.add_argument("puzzle", type=Path, help="Path to a JSON puzzle file")
    parser.add_argument(
        "--engine",
        type=str,
        choices=list(ENGINES),
        default="search",
        help="Propagation + search engine, or the CP-SAT reference model",
    )
    parser.add_argument(
        "--scoring",
        type=str,
        choices=["none", *sorted(SCORERS)],
        default="none",
        help="Heuristic used to order the spots of each branching tree",
    )
    parser.add_argument("--node-limit", type=int, default=200_000, help="Search node budget (0 disables)")
    parser.add_argument("--time-limit", type=float, default=30.0, help="Search time budget in seconds (0 disables)")
    parser.add_argument(
        "--no-scoped-search",
        action="store_true",
        help="Skip per-region search and go straight to the whole-board search",
    )
    parser.add_argument("--mark-grass", action="store_true", help="Mark leftover cells as grass when solved")
    parser.add_argument(
        "--strict",
        action="store_true",
        help=(
            "Check the solved board for a one-to-one tree/tent pairing and exit 2 "
            "if it has none; the CP-SAT engine also solves under this rule"
        ),
    )
    parser.add_argument("--hint", action="store_true", help="Only print the next move instead of solving")
    parser.add_argument("--trace", action="store_true", help="Print the placement sequence")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.node_limit < 0 or args.time_limit < 0:
        parser.error("budgets cannot be negative")

    try:
        board = load_puzzle(args.puzzle)
    except PuzzleFileError as exc:
        parser.error(str(exc))

    config = SolverConfig(
        engine=args.engine,
        scoring=None if args.scoring == "none" else args.scoring,
        node_limit=args.node_limit or None,
        time_limit_seconds=args.time_limit or None,
        scoped_search=not args.no_scoped_search,
        mark_grass=args.mark_grass,
        strict_matching=args.strict,
    )
    solver = TentsSolver(config)

    if args.hint:
        move = solver.next_move(board)
        if move is None:
            print("No move available")
            return 1
        print(f"Place a tent at row {move.row}, column {move.col} ({move.reason.value})")
        return 0

    pretty_print_board(board, label="Puzzle:", stream=sys.stderr)
    result = solver.solve(board)
    print_solve_stats(result, stream=sys.stderr)

    payload: Dict[str, Any] = dump_result(result)
    valid = result.solved
    if result.solved:
        validation = BoardValidator().validate(result.board, strict=args.strict)
        payload["validation"] = validation.messages
        valid = validation.ok
    if args.trace:
        for index, move in enumerate(result.board.history, start=1):
            print(f"{index:>4}: ({move.row},{move.col}) {move.reason.value}", file=sys.stderr)

    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0 if valid else 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
