"""
Sudoku solver (backtracking with pluggable traversal strategies).

The search itself lives in ``BacktrackingSolver``; a ``TraversalStrategy``
only decides which unsolved cell is tried next:

- ``ForwardScan``: r1c1, r1c2, ... r9c9
- ``ReverseScan``: r9c9, r9c8, ... r1c1
- ``HeatMap``: cells with the most filled neighbours first
"""

from __future__ import annotations

import argparse
import os
import random
import sys
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from loguru import logger

from sudoku_board import (
    Board,
    Cell,
    SudokuError,
    board_to_text,
    find_conflict,
    new_from_puzzle,
)
from sudoku_generator import new_from_level

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class TraversalStrategy(ABC):
    """Chooses the next unsolved cell for the backtracking search."""

    name = ""

    @abstractmethod
    def next_cell(self, board: Board) -> Optional[Cell]:
        """Return the next unsolved cell, or None when every cell is filled."""


class ForwardScan(TraversalStrategy):
    name = "forward"

    def next_cell(self, board: Board) -> Optional[Cell]:
        for cell in board.cells:
            if not cell.solved:
                return cell
        return None


class ReverseScan(TraversalStrategy):
    name = "reverse"

    def next_cell(self, board: Board) -> Optional[Cell]:
        for cell in reversed(board.cells):
            if not cell.solved:
                return cell
        return None


class HeatMap(TraversalStrategy):
    """
    Visit the cells with the most filled neighbours first.

    The heat of a cell is the number of filled cells in its row, plus those in
    its column, plus those in its box; a neighbour sharing two units with the
    cell is counted twice. Cells are grouped by heat, hottest group first and
    positional order inside a group.

    The ordering is computed once per board, on the first call, and kept for
    the whole search even though the board fills up meanwhile. Passing a
    different board takes a new snapshot.
    """

    name = "heat"

    def __init__(self) -> None:
        self.board: Optional[Board] = None
        self.heatmap: Dict[int, List[Cell]] = {}
        self.order: List[Cell] = []

    def build(self, board: Board) -> None:
        self.board = board
        self.heatmap = {}
        for cell in board.cells:
            heat = 0
            heat += sum(1 for other in board.row_cells(cell.row) if other.digit != 0)
            heat += sum(1 for other in board.column_cells(cell.column) if other.digit != 0)
            heat += sum(1 for other in board.box_cells(cell.row, cell.column) if other.digit != 0)
            self.heatmap.setdefault(heat, []).append(cell)

        self.order = [
            cell
            for heat in sorted(self.heatmap, reverse=True)
            for cell in self.heatmap[heat]
        ]
        logger.debug(
            "Heat map snapshot: {}",
            {heat: len(cells) for heat, cells in sorted(self.heatmap.items(), reverse=True)},
        )

    def next_cell(self, board: Board) -> Optional[Cell]:
        if self.board is not board:
            self.build(board)

        for cell in self.order:
            if not cell.solved:
                return cell
        return None


STRATEGIES: Dict[str, Type[TraversalStrategy]] = {
    ForwardScan.name: ForwardScan,
    ReverseScan.name: ReverseScan,
    HeatMap.name: HeatMap,
}


def get_strategy(name: str) -> TraversalStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError as exc:
        raise ValueError(f"Unknown traversal strategy: {name}") from exc


class BacktrackingSolver:
    """Depth-first search that fills the board in place."""

    def __init__(self, board: Board, strategy: Optional[TraversalStrategy] = None) -> None:
        """
        Args:
            board: The board to solve; it is mutated during the search.
            strategy: Cell visitation order, ``ForwardScan`` when omitted.
        """
        self.board = board
        self.strategy = strategy or ForwardScan()

    def solve(self) -> bool:
        """
        Solve the board.

        Returns:
            bool: True once every cell is filled, False if the puzzle is
            unsolvable from its current state.
        """
        conflict = find_conflict(self.board)
        if conflict is not None:
            logger.debug(
                "Digit {} at row {} column {} conflicts, nothing to search",
                conflict.digit,
                conflict.row,
                conflict.column,
            )
            return False

        start = self.board.backtracking
        logger.debug("Solving {} with {} strategy", self.board.puzzle or self.board.to_digits(), self.strategy.name)
        result = self._backtrack()
        logger.debug(
            "Search {} after {} placements",
            "succeeded" if result else "failed",
            self.board.backtracking - start,
        )
        return result

    def _backtrack(self) -> bool:
        cell = self.strategy.next_cell(self.board)
        if cell is None:
            self.board.mark_solved()
            return True

        for digit in range(1, 10):
            if self.board.is_legal(cell.row, cell.column, digit):
                cell.digit = digit
                self.board.backtracking += 1
                if self._backtrack():
                    return True
                cell.digit = 0

        return False


def solve(board: Board) -> bool:
    """Solve ``board`` visiting cells in ascending positional order."""
    return BacktrackingSolver(board).solve()


def solve_with_strategy(board: Board, strategy: TraversalStrategy) -> bool:
    return BacktrackingSolver(board, strategy).solve()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Solve a 9x9 Sudoku with backtracking search."
    )
    parser.add_argument(
        "puzzle",
        nargs="?",
        default=None,
        help="81 digits in row-major order, 0 for an empty cell.",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Generate a random puzzle with this many givens (17-80) instead.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed used together with --level.",
    )
    parser.add_argument(
        "--strategy",
        choices=list(STRATEGIES.keys()),
        default=ForwardScan.name,
        help="Cell visitation order (default: forward).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("SUDOKU_LOG_LEVEL", "WARNING").upper(),
        help="Loguru level for diagnostics written to stderr (default: WARNING).",
    )
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level: {args.log_level}")
    if args.puzzle is None and args.level is None:
        parser.error("either PUZZLE or --level is required")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level)

    try:
        if args.puzzle is not None:
            board = new_from_puzzle(args.puzzle.strip())
        else:
            board = new_from_level(args.level, random.Random(args.seed))
    except SudokuError as exc:
        logger.error("Invalid puzzle: {}", exc)
        return 2

    conflict = find_conflict(board)
    if conflict is not None:
        logger.warning(
            "Digit {} at row {} column {} repeats in its row, column or box",
            conflict.digit,
            conflict.row,
            conflict.column,
        )

    print(f"Puzzle ({board.level.name}, {board.count_givens()} givens):")
    print(board_to_text(board), end="")

    started = time.time()
    solved = solve_with_strategy(board, get_strategy(args.strategy))
    elapsed = time.time() - started

    if not solved:
        print(f"✗ Puzzle is unsolvable ({board.backtracking} placements, {elapsed:.2f}s).")
        return 1

    print("Solution:")
    print(board_to_text(board), end="")
    print(board.solution)
    print(f"✓ Solved with {args.strategy} strategy: {board.backtracking} placements in {elapsed:.2f}s.")
    return 0


__all__ = [
    "TraversalStrategy",
    "ForwardScan",
    "ReverseScan",
    "HeatMap",
    "STRATEGIES",
    "get_strategy",
    "BacktrackingSolver",
    "solve",
    "solve_with_strategy",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
