"""
Sudoku board representation.

Holds the 9x9 grid of cells together with the row/column/box constraint
queries used by the backtracking solver, puzzle string parsing, difficulty
levels and the text rendering of a board.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from loguru import logger

SIZE = 9  # Amount of rows/columns in a Sudoku
BOX = 3
CELL_COUNT = SIZE * SIZE
MIN_GIVENS = 17
MAX_GIVENS = 80

SEPARATOR = "-" * 31


class SudokuError(ValueError):
    """Base class for invalid puzzle input."""


class InvalidLevelError(SudokuError):
    """Requested amount of givens is outside [17, 80]."""


class InvalidPuzzleLengthError(SudokuError):
    """Puzzle string does not contain exactly 81 characters."""


class InvalidDigitError(SudokuError):
    """Puzzle string contains a character that is not a decimal digit."""


class Level(IntEnum):
    """Difficulty of a puzzle, named by its amount of givens."""

    Unknown = 0
    Diabolic = 17
    Extreme = 18
    Expert = 20
    VeryHard = 24
    Hard = 28
    Medium = 30
    Easy = 32
    VeryEasy = 36


def level_for_givens(count: int) -> Level:
    """Map an amount of given digits to its level, ``Level.Unknown`` otherwise."""
    try:
        return Level(count)
    except ValueError:
        return Level.Unknown


@dataclass
class Cell:
    """A single cell; ``row`` and ``column`` are 1-indexed."""

    row: int
    column: int
    digit: int = 0
    given: bool = False

    @property
    def solved(self) -> bool:
        return self.digit != 0

    @property
    def index(self) -> int:
        return (self.row - 1) * SIZE + (self.column - 1)


class Board:
    """A 9x9 Sudoku board stored as 81 cells in row-major order."""

    def __init__(self) -> None:
        self.cells: List[Cell] = [
            Cell(row=row, column=column)
            for row in range(1, SIZE + 1)
            for column in range(1, SIZE + 1)
        ]
        self.puzzle = ""
        self.solution = ""
        self.level = Level.Unknown
        self.backtracking = 0  # placement attempts made by the solver
        self.solved = False

    # ------------------------------------------------------------------
    # Unit queries
    # ------------------------------------------------------------------
    def cell(self, row: int, column: int) -> Cell:
        return self.cells[(row - 1) * SIZE + (column - 1)]

    def row_cells(self, row: int) -> List[Cell]:
        start = (row - 1) * SIZE
        return self.cells[start:start + SIZE]

    def column_cells(self, column: int) -> List[Cell]:
        return self.cells[column - 1::SIZE]

    def box_cells(self, row: int, column: int) -> List[Cell]:
        """Return the 9 cells of the box containing (row, column)."""
        row_min = ((row - 1) // BOX) * BOX + 1
        column_min = ((column - 1) // BOX) * BOX + 1
        return [
            self.cell(r, c)
            for r in range(row_min, row_min + BOX)
            for c in range(column_min, column_min + BOX)
        ]

    # ------------------------------------------------------------------
    # Constraint checks
    # ------------------------------------------------------------------
    def in_row(self, row: int, digit: int) -> bool:
        return any(cell.digit == digit for cell in self.row_cells(row))

    def in_column(self, column: int, digit: int) -> bool:
        return any(cell.digit == digit for cell in self.column_cells(column))

    def in_box(self, row: int, column: int, digit: int) -> bool:
        return any(cell.digit == digit for cell in self.box_cells(row, column))

    def is_legal(self, row: int, column: int, digit: int) -> bool:
        """
        Check whether ``digit`` may be placed at (row, column).

        Evaluated against the current grid on every call, nothing is cached.
        Only the 27 cells of the three units are read; the answer equals a
        scan of all 81 cells.
        Digit 0 is never legal while the unit still holds an empty cell.
        """
        return (
            not self.in_box(row, column, digit)
            and not self.in_row(row, digit)
            and not self.in_column(column, digit)
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------
    def count_givens(self) -> int:
        return sum(1 for cell in self.cells if cell.given)

    def to_digits(self) -> str:
        """Flatten the grid into an 81 character digit string."""
        return "".join(str(cell.digit) for cell in self.cells)

    def determine_level(self) -> Level:
        self.level = level_for_givens(sum(1 for cell in self.cells if cell.digit != 0))
        return self.level

    def mark_solved(self) -> None:
        self.solved = True
        self.solution = self.to_digits()

    def __repr__(self) -> str:
        return (
            f"Board(level={self.level.name}, givens={self.count_givens()}, "
            f"solved={self.solved}, backtracking={self.backtracking})"
        )


def new_from_puzzle(puzzle: str) -> Board:
    """
    Build a board from an 81 character puzzle string.

    Args:
        puzzle: Digits in row-major order, ``0`` marks an empty cell.

    Returns:
        Board: The parsed board with its level determined.

    Raises:
        InvalidPuzzleLengthError: If the string is not 81 characters long.
        InvalidDigitError: If a character is not a decimal digit.
    """
    if len(puzzle) != CELL_COUNT:
        raise InvalidPuzzleLengthError(
            f"Puzzle should contain {CELL_COUNT} digits, got {len(puzzle)}."
        )

    board = Board()
    for position, (cell, char) in enumerate(zip(board.cells, puzzle)):
        if char not in "0123456789":
            raise InvalidDigitError(
                f"Couldn't interpret {char!r} at position {position} as a digit."
            )
        cell.digit = int(char)
        cell.given = cell.digit > 0

    board.puzzle = puzzle
    board.determine_level()
    logger.debug("Parsed puzzle {} ({} givens, level {})", puzzle, board.count_givens(), board.level.name)
    return board


def board_to_text(board: Board) -> str:
    """Render the board as a fixed-width grid, empty cells shown as a dot."""

    parts: List[str] = [SEPARATOR, "\n"]
    for position, cell in enumerate(board.cells, start=1):
        if cell.column == 1:
            parts.append("|")
        parts.append(" . " if cell.digit == 0 else f" {cell.digit} ")
        if position % BOX == 0:
            parts.append("|")
        if position % SIZE == 0:
            parts.append("\n")
        if position % (SIZE * BOX) == 0:
            parts.append(SEPARATOR + "\n")
    parts.append("\n")
    return "".join(parts)


render = board_to_text


def find_conflict(board: Board) -> Optional[Cell]:
    """Return the first filled cell whose digit repeats in one of its units."""

    for cell in board.cells:
        if cell.digit == 0:
            continue
        digit = cell.digit
        cell.digit = 0
        legal = board.is_legal(cell.row, cell.column, digit)
        cell.digit = digit
        if not legal:
            return cell
    return None


__all__ = [
    "Board",
    "Cell",
    "Level",
    "SudokuError",
    "InvalidLevelError",
    "InvalidPuzzleLengthError",
    "InvalidDigitError",
    "level_for_givens",
    "new_from_puzzle",
    "board_to_text",
    "render",
    "find_conflict",
    "SIZE",
    "MIN_GIVENS",
    "MAX_GIVENS",
]
