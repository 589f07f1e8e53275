"""
Random Sudoku puzzle generation.

Puzzles are built by dropping legal digits onto random cells until the
requested amount of givens is reached. Generated puzzles are consistent but
neither uniqueness nor solvability is guaranteed.
"""

from __future__ import annotations

import random
from typing import Optional

from loguru import logger

from sudoku_board import (
    CELL_COUNT,
    MAX_GIVENS,
    MIN_GIVENS,
    Board,
    InvalidLevelError,
)


def new_from_level(level: int, rng: Optional[random.Random] = None) -> Board:
    """
    Generate a board with ``level`` digits filled.

    Args:
        level: Amount of givens, between 17 and 80.
        rng: Random source; an unseeded ``random.Random`` when omitted.

    Returns:
        Board: The generated board with ``puzzle`` and ``level`` set.

    Raises:
        InvalidLevelError: If ``level`` is smaller than 17 or larger than 80.
    """
    # A Sudoku requires at least 17 digits and at most 80 digits
    if level < MIN_GIVENS or level > MAX_GIVENS:
        raise InvalidLevelError(
            f"Level should be between {MIN_GIVENS} and {MAX_GIVENS}, got {level}."
        )

    rng = rng or random.Random()
    board = Board()

    placed = 0
    draws = 0
    while placed < level:
        cell = board.cells[rng.randrange(CELL_COUNT)]
        if cell.solved:
            continue

        # 0 is drawn as well; it is never legal next to an empty cell
        digit = rng.randrange(10)
        draws += 1
        if digit and board.is_legal(cell.row, cell.column, digit):
            cell.digit = digit
            cell.given = True
            placed += 1

    board.puzzle = board.to_digits()
    board.determine_level()
    logger.debug("Generated {} givens in {} draws: {}", placed, draws, board.puzzle)
    return board


__all__ = ["new_from_level"]
